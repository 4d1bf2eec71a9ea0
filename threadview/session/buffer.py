"""Live session buffer.

Messages typed or uploaded during this session live here until a history
refresh brings them back from the backend. Buffers are tuples; every
operation returns a new tuple.
"""

import itertools
from collections.abc import Callable
from datetime import UTC, datetime

from threadview.conversation.models import LiveMessage, LiveSource, Role

LiveMessages = tuple[LiveMessage, ...]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class LiveSessionBuffer:
    """Creates session messages with synthesized, session-unique ids."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._counter = itertools.count(1)

    def _next_id(self, now: datetime) -> str:
        return f"live-{next(self._counter)}-{int(now.timestamp() * 1000)}"

    def prompt(self, text: str, source: LiveSource = LiveSource.TYPED) -> LiveMessage:
        now = self._clock()
        return LiveMessage(
            id=self._next_id(now),
            role=Role.USER,
            text=text,
            created_at=now,
            source=source,
        )

    def reply(self, prompt: LiveMessage, text: str) -> LiveMessage:
        now = self._clock()
        return LiveMessage(
            id=self._next_id(now),
            role=Role.ASSISTANT,
            text=text,
            created_at=now,
            source=prompt.source,
            reply_to=prompt.id,
        )


def append(messages: LiveMessages, message: LiveMessage) -> LiveMessages:
    return (*messages, message)


def insert_reply(messages: LiveMessages, reply: LiveMessage) -> LiveMessages:
    """Place a reply directly after its prompt.

    Replies to prompts sent in quick succession therefore never interleave,
    whatever the order in which prompts were appended. A reply whose prompt
    is gone is appended at the end.
    """
    for index, message in enumerate(messages):
        if message.id == reply.reply_to:
            position = index + 1
            while position < len(messages) and messages[position].reply_to == reply.reply_to:
                position += 1
            return (*messages[:position], reply, *messages[position:])
    return append(messages, reply)


def mark_failed(messages: LiveMessages, message_id: str) -> LiveMessages:
    return tuple(
        message.model_copy(update={"failed": True}) if message.id == message_id else message
        for message in messages
    )


def retract(messages: LiveMessages, message_id: str) -> LiveMessages:
    return tuple(message for message in messages if message.id != message_id)
