"""Aggregation engine policy configuration."""

from pydantic import BaseModel, Field

DEFAULT_INGESTION_MARKER = "[Document added to knowledge base]"


class EngineConfig(BaseModel):
    """Behavioral switches of the conversation engine."""

    ingestion_marker: str = Field(
        default=DEFAULT_INGESTION_MARKER,
        min_length=1,
        description="Content prefix of system messages that open a turn",
    )
    retain_failed_messages: bool = Field(
        default=True,
        description="Keep the optimistic prompt in the live view when its send fails",
    )
    refresh_after_send: bool = Field(
        default=False,
        description="Trigger a history refresh after every successful send",
    )
