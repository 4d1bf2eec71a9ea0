"""Conversation directory: the list of conversations known to the backend."""

from collections.abc import Sequence

from threadview.backend.base import Backend, BackendError
from threadview.conversation.models import Conversation
from threadview.exceptions import DirectoryUnavailable
from threadview.observability.logging import get_logger

logger = get_logger(__name__)


class ConversationDirectory:
    """Lists conversations through the backend collaborator."""

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    async def list(self) -> tuple[Conversation, ...]:
        """List conversations in directory order.

        Raises:
            DirectoryUnavailable: If the backend call does not succeed
        """
        try:
            conversations = await self._backend.list_conversations()
        except BackendError as exc:
            logger.warning(
                "directory_unavailable",
                status_code=exc.status_code,
                error=exc.message,
            )
            raise DirectoryUnavailable(f"Conversations error: {exc.message}") from exc

        logger.debug("directory_listed", conversation_count=len(conversations))
        return tuple(conversations)


def default_conversation_id(
    conversations: Sequence[Conversation],
    current: str | None,
) -> str | None:
    """Pick the active conversation after a directory listing.

    An existing choice is kept. Otherwise the first entry in directory
    order (not the most recent one) becomes active.
    """
    if current is not None:
        return current
    if conversations:
        return conversations[0].id
    return None
