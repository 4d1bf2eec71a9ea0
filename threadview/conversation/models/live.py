"""Messages produced during the current session."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from threadview.conversation.models.message import Role


class LiveSource(str, Enum):
    """Which session action produced a live message."""

    TYPED = "typed"
    UPLOAD = "upload"


class LiveMessage(BaseModel):
    """An in-session message rendered directly, never turned into a Turn."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Session-unique synthesized identity")
    role: Role = Field(..., description="user or assistant")
    text: str = Field(..., description="Message body")
    created_at: datetime = Field(..., description="When the message was produced")
    source: LiveSource = Field(default=LiveSource.TYPED, description="Producing action")
    reply_to: str | None = Field(default=None, description="Id of the prompt this answers")
    failed: bool = Field(default=False, description="The prompt's send failed")
