"""Session layer: live buffer, view composition, selection and the engine facade."""

from threadview.session.engine import ConversationEngine
from threadview.session.state import InspectingTurn, LiveView, Selection, ViewState

__all__ = [
    "ConversationEngine",
    "ViewState",
    "Selection",
    "LiveView",
    "InspectingTurn",
]
