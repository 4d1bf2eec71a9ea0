"""Assistant backend connection configuration."""

from pydantic import BaseModel, Field


class BackendConfig(BaseModel):
    """Where and how the engine talks to the assistant backend."""

    base_url: str = Field(
        default="http://localhost:3141",
        description="Base URL of the assistant backend",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    conversations_path: str = Field(
        default="/api/conversations", description="Conversation directory endpoint"
    )
    history_path: str = Field(default="/api/history", description="History endpoint")
    chat_path: str = Field(default="/api/chat", description="Text turn endpoint")
    multimodal_path: str = Field(
        default="/api/mm-chat", description="Question + file turn endpoint"
    )
