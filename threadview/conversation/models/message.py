"""Message models for conversation histories."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

TEXT_PART = "text"


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessagePart(BaseModel):
    """One typed part of a multi-part message body."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(..., description="Part type, e.g. text or image")
    text: str | None = Field(default=None, description="Text payload for text parts")


class Message(BaseModel):
    """A message as returned by the backend history endpoint.

    The body is either a direct string in `content`, or a sequence of typed
    parts, carried in `parts` or in `content` itself.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str | None = Field(default=None, description="Server identity, when assigned")
    role: Role = Field(..., description="Message author")
    content: str | tuple[MessagePart, ...] | None = Field(
        default=None, description="Direct text or typed parts"
    )
    parts: tuple[MessagePart, ...] | None = Field(default=None, description="Typed parts")
    created_at: datetime | None = Field(
        default=None, alias="createdAt", description="Creation time"
    )

    @property
    def text(self) -> str:
        """Extracted text.

        A non-empty string body wins. Otherwise the text parts are
        concatenated in order and every other part type is dropped.
        """
        if isinstance(self.content, str) and self.content:
            return self.content

        parts = self.content if isinstance(self.content, tuple) else self.parts
        if not parts:
            return ""
        return "".join(part.text for part in parts if part.type == TEXT_PART and part.text)


def timestamp_key(created_at: datetime | None) -> float:
    """Sort key for a message time; missing times sort as zero.

    Naive times are read as UTC.
    """
    if created_at is None:
        return 0.0
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return created_at.timestamp()


class AnnotatedMessage(BaseModel):
    """A history message tagged with the conversation it came from.

    Produced only by the history merger and never persisted. `position` is
    the message's index inside its conversation's fetched sequence.
    """

    model_config = ConfigDict(frozen=True)

    message: Message
    conversation_id: str
    conversation_title: str | None = None
    position: int = Field(..., ge=0)

    @property
    def role(self) -> Role:
        return self.message.role

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def created_at(self) -> datetime | None:
        return self.message.created_at
