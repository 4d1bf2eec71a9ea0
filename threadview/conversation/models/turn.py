"""Turn models: a prompting event paired with its response."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ServerTurnId(BaseModel):
    """Turn identity taken from the server id of the prompting message."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1)

    @property
    def key(self) -> str:
        return self.value


class SyntheticTurnId(BaseModel):
    """Turn identity for a prompting message that carries no server id."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    position: int = Field(..., ge=0)

    @property
    def key(self) -> str:
        return f"{self.conversation_id}-{self.position}"


TurnId = ServerTurnId | SyntheticTurnId


class TurnKind(str, Enum):
    """What opened a turn."""

    EXCHANGE = "exchange"
    """A user message."""

    INGESTION = "ingestion"
    """A system message announcing a document added to the knowledge base."""


class Turn(BaseModel):
    """A paired prompt and its (possibly empty) response."""

    model_config = ConfigDict(frozen=True)

    id: TurnId = Field(..., description="Server or synthetic identity")
    prompt: str = Field(..., description="Text of the prompting message")
    response: str = Field(default="", description="Text of the assistant reply")
    created_at: datetime | None = Field(default=None, description="Prompt time")
    conversation_id: str = Field(..., description="Owning conversation")
    conversation_title: str | None = Field(default=None, description="Owning conversation title")
    kind: TurnKind = Field(default=TurnKind.EXCHANGE, description="What opened the turn")

    @property
    def answered(self) -> bool:
        return bool(self.response)
