"""The immutable view state shared by every engine operation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from threadview.conversation.models import (
    AnnotatedMessage,
    Conversation,
    LiveMessage,
    ServerTurnId,
    Turn,
    TurnId,
)


class LiveView(BaseModel):
    """No past turn selected; the main pane shows the live session."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["live"] = "live"


class InspectingTurn(BaseModel):
    """A past turn is shown in the main pane instead of the live session."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["inspecting"] = "inspecting"
    turn_id: TurnId
    conversation_id: str


Selection = LiveView | InspectingTurn


class ViewState(BaseModel):
    """Snapshot of everything the host UI renders.

    Never mutated: each refresh or user action produces a new instance via
    `model_copy(update=...)`.
    """

    model_config = ConfigDict(frozen=True)

    conversations: tuple[Conversation, ...] = ()
    active_conversation_id: str | None = None
    history: tuple[AnnotatedMessage, ...] = Field(
        default=(), description="All fetched messages, newest first"
    )
    turns: tuple[Turn, ...] = Field(default=(), description="Side panel turns, newest first")
    live_messages: tuple[LiveMessage, ...] = ()
    upload_messages: tuple[LiveMessage, ...] = ()
    selection: Selection = Field(default_factory=LiveView)
    input_text: str = ""

    conversations_loading: bool = False
    history_loading: bool = False
    sending: bool = False
    uploading: bool = False

    conversations_error: str | None = None
    history_error: str | None = None
    send_error: str | None = None
    upload_error: str | None = None

    @property
    def inspecting(self) -> bool:
        return isinstance(self.selection, InspectingTurn)

    def find_turn(self, turn_id: TurnId | str) -> Turn | None:
        """Look up a turn by identity.

        A plain string names a server id. Turns without one are only found
        through their SyntheticTurnId.
        """
        if isinstance(turn_id, str):
            if not turn_id:
                return None
            turn_id = ServerTurnId(value=turn_id)
        for turn in self.turns:
            if turn.id == turn_id:
                return turn
        return None

    @property
    def selected_turn(self) -> Turn | None:
        if isinstance(self.selection, InspectingTurn):
            return self.find_turn(self.selection.turn_id)
        return None
