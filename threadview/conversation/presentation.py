"""Text helpers for the history side panel."""

from datetime import UTC, datetime

TOPIC_WORDS = 6
LABEL_ID_CHARS = 8


def make_topic(text: str) -> str:
    """Short topic for a turn: the first line, cut to its first six words."""
    if not text:
        return "Conversation"
    first_line = text.split("\n")[0]
    words = [word for word in first_line.split(" ") if word]
    if len(words) <= TOPIC_WORDS:
        return first_line
    return " ".join(words[:TOPIC_WORDS]) + "…"


def conversation_label(conversation_id: str, title: str | None = None) -> str:
    """Title of a conversation, or a shortened id when it has none."""
    if title:
        return title
    suffix = "…" if len(conversation_id) > LABEL_ID_CHARS else ""
    return f"Conversation {conversation_id[:LABEL_ID_CHARS]}{suffix}"


def format_time_with_gap(moment: datetime | None, now: datetime | None = None) -> str:
    """Relative age of a timestamp ("just now", "5 min ago", "3 hr ago").

    Anything a day or older is shown as an absolute date and time.
    """
    if moment is None:
        return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    minutes = int((now - moment).total_seconds() // 60)
    hours = minutes // 60

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{hours} hr ago"
    return moment.astimezone(now.tzinfo).strftime("%d %b, %H:%M")
