"""In-memory backend for testing and local development."""

import asyncio
from collections.abc import Callable
from typing import Any

from threadview.backend.base import Backend, BackendError, TurnReply, UploadFile
from threadview.conversation.models import Conversation, Message


def _echo(text: str) -> str:
    return f"Echo: {text}"


class MockBackend(Backend):
    """Mock backend serving conversations and histories from memory.

    Failures and latencies are scriptable per call so that tests can
    exercise partial failure and out-of-order completion.
    """

    def __init__(
        self,
        conversations: list[Conversation] | None = None,
        histories: dict[str, list[Message]] | None = None,
        reply: Callable[[str], str] = _echo,
    ):
        """Initialize mock backend.

        Args:
            conversations: Directory listing, in directory order
            histories: conversation id -> messages in stored order
            reply: Maps a sent text to the assistant's answer
        """
        self.conversations = list(conversations or [])
        self.histories = {cid: list(msgs) for cid, msgs in (histories or {}).items()}
        self._reply = reply
        self.fail_directory = False
        self.failing_histories: set[str] = set()
        self.failing_sends: set[str] = set()
        self.fail_uploads = False
        self.history_delays: dict[str, float] = {}
        self.send_delays: dict[str, float] = {}
        self._new_conversations = 0
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def calls(self, operation: str) -> list[dict[str, Any]]:
        return [call for call in self._call_history if call["operation"] == operation]

    def clear_history(self) -> None:
        self._call_history.clear()

    def _conversation_for(self, conversation_id: str | None) -> str:
        if conversation_id:
            return conversation_id
        self._new_conversations += 1
        return f"conv-{self._new_conversations}"

    async def list_conversations(self) -> list[Conversation]:
        self._call_history.append({"operation": "list_conversations"})
        if self.fail_directory:
            raise BackendError("Conversations error", status_code=500)
        return list(self.conversations)

    async def get_history(self, conversation_id: str) -> list[Message]:
        self._call_history.append({"operation": "get_history", "conversation_id": conversation_id})
        delay = self.history_delays.get(conversation_id)
        if delay:
            await asyncio.sleep(delay)
        if conversation_id in self.failing_histories:
            raise BackendError(f"History error: {conversation_id}", status_code=500)
        return list(self.histories.get(conversation_id, []))

    async def send_turn(self, text: str, conversation_id: str | None = None) -> TurnReply:
        self._call_history.append(
            {"operation": "send_turn", "text": text, "conversation_id": conversation_id}
        )
        delay = self.send_delays.get(text)
        if delay:
            await asyncio.sleep(delay)
        if text in self.failing_sends:
            raise BackendError("Error talking to AI backend", status_code=500)
        return TurnReply(text=self._reply(text), conversation_id=self._conversation_for(conversation_id))

    async def send_multimodal_turn(
        self,
        question: str | None = None,
        file: UploadFile | None = None,
        conversation_id: str | None = None,
    ) -> TurnReply:
        self._call_history.append({
            "operation": "send_multimodal_turn",
            "question": question,
            "file": file.name if file else None,
            "conversation_id": conversation_id,
        })
        if self.fail_uploads:
            raise BackendError("Backend chat failed", status_code=500)
        subject = question or (f"file {file.name}" if file else "")
        return TurnReply(
            text=self._reply(subject),
            conversation_id=self._conversation_for(conversation_id),
        )
