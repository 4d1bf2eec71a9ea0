"""Assistant backend collaborators.

The engine only depends on the abstract Backend interface:

    from threadview.backend import HttpBackend

    async with HttpBackend(base_url="http://localhost:3141") as backend:
        conversations = await backend.list_conversations()
        messages = await backend.get_history(conversations[0].id)
        reply = await backend.send_turn("Hello!", conversations[0].id)
        print(reply.text)

MockBackend serves the same interface from memory for tests and demos.
"""

from threadview.backend.base import Backend, BackendError, TurnReply, UploadFile
from threadview.backend.http import HttpBackend
from threadview.backend.mock import MockBackend

__all__ = [
    "Backend",
    "BackendError",
    "TurnReply",
    "UploadFile",
    "HttpBackend",
    "MockBackend",
]
