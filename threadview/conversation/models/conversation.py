"""Conversation model as listed by the backend directory."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Conversation(BaseModel):
    """A backend-owned conversation.

    The engine only ever holds a read-only cached copy; new conversations
    are discovered by listing the directory again.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Opaque conversation identifier")
    title: str | None = Field(default=None, description="Display title")
    created_at: datetime | None = Field(default=None, description="Creation time")
    updated_at: datetime | None = Field(default=None, description="Last update time")
