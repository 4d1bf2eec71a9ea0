"""HTTP backend adapter.

Talks to the assistant backend's JSON endpoints with httpx:

    GET  /api/conversations            -> {"conversations": [...]}
    GET  /api/history?conversationId=  -> {"messages": [...]}
    POST /api/chat      {text, conversationId}        -> {text, conversationId}
    POST /api/mm-chat   multipart question/file/id    -> {answer, conversationId}
"""

from typing import Any

import httpx
from pydantic import ValidationError

from threadview.backend.base import NO_ANSWER, Backend, BackendError, TurnReply, UploadFile
from threadview.config.models import BackendConfig
from threadview.conversation.models import Conversation, Message
from threadview.observability.logging import get_logger

logger = get_logger(__name__)


class HttpBackend(Backend):
    """Async httpx client for the assistant backend.

    Attributes:
        base_url: Base URL of the backend
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3141",
        timeout: float = 30.0,
        *,
        config: BackendConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the backend (ignored when config is given)
            timeout: Request timeout in seconds (ignored when config is given)
            config: Full backend configuration, including endpoint paths
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self._config = config or BackendConfig(base_url=base_url, timeout=timeout)
        self.base_url = self._config.base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._config.timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: BackendConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpBackend":
        return cls(config=config, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
        data: dict | None = None,
        files: dict | None = None,
    ) -> dict:
        """Make a request and return its decoded JSON object."""
        try:
            response = await self._client.request(
                method=method,
                url=path,
                json=json,
                params=params,
                data=data,
                files=files,
            )
        except httpx.HTTPError as exc:
            logger.warning("backend_transport_error", path=path, error=str(exc))
            raise BackendError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 400:
            error_data: Any = None
            message = response.text
            try:
                error_data = response.json()
            except ValueError:
                pass
            if isinstance(error_data, dict):
                error = error_data.get("error")
                if isinstance(error, dict):
                    error = error.get("message")
                if error:
                    message = str(error)

            logger.warning(
                "backend_request_failed",
                path=path,
                status_code=response.status_code,
            )
            raise BackendError(
                message=message or f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                details=error_data,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise BackendError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise BackendError(
                f"{method} {path} returned {type(payload).__name__}, expected an object",
                status_code=response.status_code,
            )
        return payload

    async def list_conversations(self) -> list[Conversation]:
        data = await self._request("GET", self._config.conversations_path)
        try:
            return [Conversation.model_validate(c) for c in data.get("conversations") or []]
        except ValidationError as exc:
            raise BackendError("Malformed conversation list", details=exc.errors()) from exc

    async def get_history(self, conversation_id: str) -> list[Message]:
        data = await self._request(
            "GET",
            self._config.history_path,
            params={"conversationId": conversation_id},
        )
        try:
            return [Message.model_validate(m) for m in data.get("messages") or []]
        except ValidationError as exc:
            raise BackendError(
                f"Malformed history for conversation {conversation_id}",
                details=exc.errors(),
            ) from exc

    async def send_turn(self, text: str, conversation_id: str | None = None) -> TurnReply:
        """Send a typed turn.

        Args:
            text: User message
            conversation_id: Conversation to continue; the backend opens a
                new one when omitted

        Returns:
            TurnReply with the assistant's text and the conversation id used
        """
        data = await self._request(
            "POST",
            self._config.chat_path,
            json={"text": text, "conversationId": conversation_id},
        )
        return TurnReply(
            text=data.get("text") or NO_ANSWER,
            conversation_id=data.get("conversationId") or conversation_id or "",
        )

    async def send_multimodal_turn(
        self,
        question: str | None = None,
        file: UploadFile | None = None,
        conversation_id: str | None = None,
    ) -> TurnReply:
        """Send a question and/or a file as multipart form data."""
        form: dict[str, str] = {}
        if question:
            form["question"] = question
        if conversation_id:
            form["conversationId"] = conversation_id

        files = None
        if file is not None:
            files = {"file": (file.name, file.data, file.content_type)}

        data = await self._request(
            "POST",
            self._config.multimodal_path,
            data=form,
            files=files,
        )
        return TurnReply(
            text=data.get("answer") or NO_ANSWER,
            conversation_id=data.get("conversationId") or conversation_id or "",
        )
