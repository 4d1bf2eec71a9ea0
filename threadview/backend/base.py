"""Backend abstract interface and its exchange models."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from threadview.conversation.models import Conversation, Message

NO_ANSWER = "(no answer)"


class BackendError(Exception):
    """A backend exchange did not succeed."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class TurnReply(BaseModel):
    """Assistant answer to a sent turn."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Assistant reply text")
    conversation_id: str = Field(..., description="Conversation the turn was recorded in")


class UploadFile(BaseModel):
    """A file attached to a multimodal turn."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Original file name")
    content_type: str = Field(
        default="application/octet-stream", description="MIME type"
    )
    data: bytes = Field(default=b"", repr=False, description="File contents")

    @property
    def size(self) -> int:
        return len(self.data)


class Backend(ABC):
    """Abstract interface for the assistant backend.

    All operations are single request/response exchanges. Any non-success
    outcome raises BackendError.
    """

    @abstractmethod
    async def list_conversations(self) -> list[Conversation]:
        """List known conversations in directory order."""
        pass

    @abstractmethod
    async def get_history(self, conversation_id: str) -> list[Message]:
        """Get a conversation's messages in the order the backend stores them."""
        pass

    @abstractmethod
    async def send_turn(self, text: str, conversation_id: str | None = None) -> TurnReply:
        """Send a typed turn and wait for the assistant's reply."""
        pass

    @abstractmethod
    async def send_multimodal_turn(
        self,
        question: str | None = None,
        file: UploadFile | None = None,
        conversation_id: str | None = None,
    ) -> TurnReply:
        """Send a question and/or file and wait for the assistant's answer."""
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None

    async def __aenter__(self) -> "Backend":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
