"""View composer: decides what the main pane renders."""

from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from threadview.conversation.models import LiveMessage, Role, Turn
from threadview.session.state import InspectingTurn, Selection


class RenderKind(str, Enum):
    LIVE = "live"
    UPLOAD = "upload"
    INSPECTED = "inspected"


class RenderedMessage(BaseModel):
    """One bubble in the main pane."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    text: str
    created_at: datetime | None = None
    kind: RenderKind
    failed: bool = False


def _from_live(message: LiveMessage, kind: RenderKind) -> RenderedMessage:
    return RenderedMessage(
        id=message.id,
        role=message.role,
        text=message.text,
        created_at=message.created_at,
        kind=kind,
        failed=message.failed,
    )


def _from_turn(turn: Turn) -> tuple[RenderedMessage, ...]:
    key = turn.id.key
    rendered = [
        RenderedMessage(
            id=f"{key}:prompt",
            role=Role.USER,
            text=turn.prompt,
            created_at=turn.created_at,
            kind=RenderKind.INSPECTED,
        )
    ]
    if turn.response:
        rendered.append(
            RenderedMessage(
                id=f"{key}:response",
                role=Role.ASSISTANT,
                text=turn.response,
                created_at=turn.created_at,
                kind=RenderKind.INSPECTED,
            )
        )
    return tuple(rendered)


def compose(
    live_messages: Sequence[LiveMessage],
    upload_messages: Sequence[LiveMessage],
    turns: Sequence[Turn],
    selection: Selection,
) -> tuple[RenderedMessage, ...]:
    """Render the main pane.

    Live mode shows the session's typed messages followed by its upload
    messages, in the order they were produced, and ignores turns. Inspecting
    mode shows only the selected turn's prompt and response in place of the
    live stream. A selection whose turn is no longer known falls back to the
    live view.
    """
    if isinstance(selection, InspectingTurn):
        for turn in turns:
            if turn.id == selection.turn_id:
                return _from_turn(turn)

    return (
        *(_from_live(m, RenderKind.LIVE) for m in live_messages),
        *(_from_live(m, RenderKind.UPLOAD) for m in upload_messages),
    )
