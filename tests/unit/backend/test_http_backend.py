"""Tests for the httpx backend adapter."""

import json

import httpx
import pytest

from threadview.backend import BackendError, HttpBackend, UploadFile
from threadview.backend.base import NO_ANSWER
from threadview.config.models import BackendConfig
from threadview.conversation.models import Role


def make_backend(handler, **config) -> HttpBackend:
    return HttpBackend.from_config(
        BackendConfig(base_url="http://backend.test", **config),
        transport=httpx.MockTransport(handler),
    )


class TestListConversations:
    @pytest.mark.asyncio
    async def test_parses_directory(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/conversations"
            return httpx.Response(
                200,
                json={
                    "conversations": [
                        {"id": "c1", "title": "Trip", "created_at": "2025-01-01T00:00:00Z"},
                        {"id": "c2"},
                    ]
                },
            )

        async with make_backend(handler) as backend:
            conversations = await backend.list_conversations()

        assert [c.id for c in conversations] == ["c1", "c2"]
        assert conversations[0].title == "Trip"
        assert conversations[0].created_at is not None

    @pytest.mark.asyncio
    async def test_missing_key_is_empty(self) -> None:
        async with make_backend(lambda request: httpx.Response(200, json={})) as backend:
            assert await backend.list_conversations() == []

    @pytest.mark.asyncio
    async def test_custom_path(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v2/threads"
            return httpx.Response(200, json={"conversations": []})

        async with make_backend(handler, conversations_path="/v2/threads") as backend:
            assert await backend.list_conversations() == []

    @pytest.mark.asyncio
    async def test_malformed_entry(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"conversations": [{"title": "no id"}]})

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError, match="Malformed"):
                await backend.list_conversations()


class TestGetHistory:
    @pytest.mark.asyncio
    async def test_sends_conversation_id_and_parses_messages(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/history"
            assert request.url.params["conversationId"] == "c 1"
            return httpx.Response(
                200,
                json={
                    "messages": [
                        {"id": "m1", "role": "user", "content": "hi", "createdAt": "2025-03-01T12:00:00Z"},
                        {"role": "assistant", "parts": [{"type": "text", "text": "hello"}]},
                    ]
                },
            )

        async with make_backend(handler) as backend:
            messages = await backend.get_history("c 1")

        assert [(m.role, m.text) for m in messages] == [
            (Role.USER, "hi"),
            (Role.ASSISTANT, "hello"),
        ]
        assert messages[1].id is None

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="History error")

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError) as exc_info:
                await backend.get_history("c1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "History error"

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError, match="non-JSON"):
                await backend.get_history("c1")

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError) as exc_info:
                await backend.get_history("c1")

        assert exc_info.value.status_code is None


class TestSendTurn:
    @pytest.mark.asyncio
    async def test_posts_text_and_conversation(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/chat"
            assert json.loads(request.content) == {"text": "Hello", "conversationId": "c1"}
            return httpx.Response(200, json={"text": "Hi!", "conversationId": "c1"})

        async with make_backend(handler) as backend:
            reply = await backend.send_turn("Hello", "c1")

        assert reply.text == "Hi!"
        assert reply.conversation_id == "c1"

    @pytest.mark.asyncio
    async def test_defaults_for_missing_fields(self) -> None:
        async with make_backend(lambda request: httpx.Response(200, json={})) as backend:
            reply = await backend.send_turn("Hello", "c7")

        assert reply.text == NO_ANSWER
        assert reply.conversation_id == "c7"

    @pytest.mark.asyncio
    async def test_error_message_from_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, json={"error": "Backend chat failed"})

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError) as exc_info:
                await backend.send_turn("Hello")

        assert exc_info.value.message == "Backend chat failed"
        assert exc_info.value.status_code == 502


class TestSendMultimodalTurn:
    @pytest.mark.asyncio
    async def test_multipart_form(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/mm-chat"
            assert request.headers["content-type"].startswith("multipart/form-data")
            body = request.content
            assert b'name="question"' in body
            assert b"What is this?" in body
            assert b'name="conversationId"' in body
            assert b'filename="scan.png"' in body
            assert b"PNGDATA" in body
            return httpx.Response(200, json={"success": True, "answer": "A cat.", "conversationId": "c1"})

        file = UploadFile(name="scan.png", content_type="image/png", data=b"PNGDATA")
        async with make_backend(handler) as backend:
            reply = await backend.send_multimodal_turn("What is this?", file, "c1")

        assert reply.text == "A cat."
        assert reply.conversation_id == "c1"

    @pytest.mark.asyncio
    async def test_rejected_upload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Provide text, image, or file."})

        async with make_backend(handler) as backend:
            with pytest.raises(BackendError, match="Provide text"):
                await backend.send_multimodal_turn()
