"""Conversation domain models.

Contains all Pydantic models for aggregated conversation state:
- Conversations as listed by the backend directory
- Messages and their conversation-annotated form
- Turns built from paired messages
- LiveMessages produced during the current session
"""

from threadview.conversation.models.conversation import Conversation
from threadview.conversation.models.live import LiveMessage, LiveSource
from threadview.conversation.models.message import (
    AnnotatedMessage,
    Message,
    MessagePart,
    Role,
    timestamp_key,
)
from threadview.conversation.models.turn import (
    ServerTurnId,
    SyntheticTurnId,
    Turn,
    TurnId,
    TurnKind,
)

__all__ = [
    "Conversation",
    "Message",
    "MessagePart",
    "Role",
    "AnnotatedMessage",
    "timestamp_key",
    "Turn",
    "TurnId",
    "TurnKind",
    "ServerTurnId",
    "SyntheticTurnId",
    "LiveMessage",
    "LiveSource",
]
