"""Turn builder: folds flat message sequences into prompt/response turns."""

from collections.abc import Iterable, Sequence

from threadview.conversation.models import (
    AnnotatedMessage,
    Role,
    ServerTurnId,
    SyntheticTurnId,
    Turn,
    TurnId,
    TurnKind,
    timestamp_key,
)


def prompt_kind(message: AnnotatedMessage, ingestion_marker: str) -> TurnKind | None:
    """Return the kind of turn a message opens, or None if it opens none."""
    if message.role == Role.USER:
        return TurnKind.EXCHANGE
    if message.role == Role.SYSTEM and message.text.startswith(ingestion_marker):
        return TurnKind.INGESTION
    return None


def turn_id_for(message: AnnotatedMessage) -> TurnId:
    if message.message.id:
        return ServerTurnId(value=message.message.id)
    return SyntheticTurnId(conversation_id=message.conversation_id, position=message.position)


def build_turns(
    messages: Sequence[AnnotatedMessage],
    ingestion_marker: str,
) -> tuple[Turn, ...]:
    """Pair an ascending message sequence into turns, in construction order.

    Each user message, and each system message starting with the ingestion
    marker, opens a turn. The message right after it becomes the response
    when it is an assistant message; otherwise the response stays empty.
    An assistant message that does not directly follow a prompt belongs to
    no turn and does not appear in the turn view.
    """
    turns: list[Turn] = []
    for index, message in enumerate(messages):
        kind = prompt_kind(message, ingestion_marker)
        if kind is None:
            continue

        response = ""
        if index + 1 < len(messages):
            following = messages[index + 1]
            if following.role == Role.ASSISTANT:
                response = following.text

        turns.append(
            Turn(
                id=turn_id_for(message),
                prompt=message.text,
                response=response,
                created_at=message.created_at,
                conversation_id=message.conversation_id,
                conversation_title=message.conversation_title,
                kind=kind,
            )
        )
    return tuple(turns)


def display_order(turns: Iterable[Turn]) -> tuple[Turn, ...]:
    """Most recent turn first.

    Reverses construction order, then stable-sorts by time so turns from
    several conversations interleave the same way merged messages do.
    """
    ordered = list(reversed(list(turns)))
    ordered.sort(key=lambda t: timestamp_key(t.created_at), reverse=True)
    return tuple(ordered)


def chronological(messages: Iterable[AnnotatedMessage]) -> list[AnnotatedMessage]:
    """One conversation oldest first; ties and missing times keep fetch order."""
    return sorted(messages, key=lambda m: (timestamp_key(m.created_at), m.position))


def build_turns_by_conversation(
    histories: Iterable[Sequence[AnnotatedMessage]],
    ingestion_marker: str,
) -> tuple[Turn, ...]:
    """Pair each conversation on its own, then order the union for display.

    Each conversation is put in ascending time order before pairing, whatever
    order the backend stored it in.
    """
    turns: list[Turn] = []
    for history in histories:
        turns.extend(build_turns(chronological(history), ingestion_marker))
    return display_order(turns)
