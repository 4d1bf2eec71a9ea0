"""Selection/resend state machine.

    Live --select_turn--> Inspecting --back_to_live--> Live
                          Inspecting --resend-------> Live

Each transition takes a ViewState and returns a new one.
"""

from threadview.conversation.models import Turn
from threadview.exceptions import InvalidTransition
from threadview.session.state import InspectingTurn, LiveView, ViewState


def select_turn(state: ViewState, turn: Turn) -> ViewState:
    """Inspect a past turn.

    Pre-fills the input with the turn's prompt and makes the turn's
    conversation the active send target. Allowed from either state, and
    while a send is in flight.
    """
    changes: dict = {
        "selection": InspectingTurn(turn_id=turn.id, conversation_id=turn.conversation_id),
        "active_conversation_id": turn.conversation_id,
    }
    if turn.prompt:
        changes["input_text"] = turn.prompt
    return state.model_copy(update=changes)


def back_to_live(state: ViewState) -> ViewState:
    """Return to the live conversation, leaving the input untouched."""
    if not isinstance(state.selection, InspectingTurn):
        raise InvalidTransition("Already showing the current chat")
    return state.model_copy(update={"selection": LiveView()})


def resend(state: ViewState) -> ViewState:
    """Leave inspection because the (possibly edited) prompt is being sent.

    The send targets whatever conversation is active now. From the live
    state this is an ordinary send and the selection is unchanged.
    """
    if isinstance(state.selection, InspectingTurn):
        return state.model_copy(update={"selection": LiveView()})
    return state
