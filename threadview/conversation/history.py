"""History fetcher and merger.

Retrieves every conversation's messages concurrently and merges them into
one sequence ordered most recent first, each message annotated with the
conversation it belongs to.
"""

import asyncio
from collections.abc import Iterable, Sequence

from threadview.backend.base import Backend, BackendError
from threadview.conversation.models import AnnotatedMessage, Conversation, Message, timestamp_key
from threadview.exceptions import HistoryFetchFailed
from threadview.observability.logging import get_logger

logger = get_logger(__name__)


def annotate(conversation: Conversation, messages: Iterable[Message]) -> list[AnnotatedMessage]:
    """Tag one conversation's messages with its identity and fetch position."""
    return [
        AnnotatedMessage(
            message=message,
            conversation_id=conversation.id,
            conversation_title=conversation.title,
            position=position,
        )
        for position, message in enumerate(messages)
    ]


def merge_histories(
    histories: Iterable[Sequence[AnnotatedMessage]],
) -> tuple[AnnotatedMessage, ...]:
    """Concatenate per-conversation sequences and order them newest first.

    The sort is stable: messages with equal or missing timestamps keep
    their relative fetch order. Missing timestamps sort as zero, at the
    oldest end.
    """
    combined = [message for history in histories for message in history]
    combined.sort(key=lambda m: timestamp_key(m.created_at), reverse=True)
    return tuple(combined)


def split_by_conversation(
    messages: Iterable[AnnotatedMessage],
) -> dict[str, tuple[AnnotatedMessage, ...]]:
    """Regroup merged messages per conversation, restored to fetch order.

    Conversations appear in order of first occurrence in `messages`.
    """
    groups: dict[str, list[AnnotatedMessage]] = {}
    for message in messages:
        groups.setdefault(message.conversation_id, []).append(message)
    return {
        conversation_id: tuple(sorted(group, key=lambda m: m.position))
        for conversation_id, group in groups.items()
    }


class HistoryFetcher:
    """Fetches and merges the histories of a set of conversations."""

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    async def _fetch_one(self, conversation: Conversation) -> list[AnnotatedMessage]:
        try:
            messages = await self._backend.get_history(conversation.id)
        except BackendError as exc:
            logger.warning(
                "history_fetch_failed",
                conversation_id=conversation.id,
                status_code=exc.status_code,
                error=exc.message,
            )
            raise HistoryFetchFailed(conversation.id, exc.message) from exc

        logger.debug(
            "history_fetched",
            conversation_id=conversation.id,
            message_count=len(messages),
        )
        return annotate(conversation, messages)

    async def fetch_all(
        self,
        conversations: Sequence[Conversation],
    ) -> tuple[AnnotatedMessage, ...]:
        """Fetch every conversation concurrently and merge the results.

        All retrievals are issued at once. If any of them fails, the whole
        call fails and nothing fetched by the others is returned.

        Args:
            conversations: Conversations to fetch, in directory order

        Returns:
            All messages, newest first

        Raises:
            HistoryFetchFailed: For the first conversation whose retrieval failed
        """
        if not conversations:
            return ()

        histories = await asyncio.gather(
            *(self._fetch_one(conversation) for conversation in conversations)
        )
        merged = merge_histories(histories)

        logger.info(
            "histories_merged",
            conversation_count=len(conversations),
            message_count=len(merged),
        )
        return merged
