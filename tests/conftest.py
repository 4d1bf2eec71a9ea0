"""Shared test fixtures for the threadview test suite."""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from threadview.backend import MockBackend
from threadview.conversation.models import Conversation
from tests.factories import message


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Point settings at an empty config directory and clear the cache."""
    from threadview.config import get_settings

    empty = tmp_path / "no-config"
    empty.mkdir()
    monkeypatch.setenv("THREADVIEW_CONFIG_DIR", str(empty))
    monkeypatch.delenv("THREADVIEW_ENV", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def base_time() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def at(base_time: datetime):
    """Timestamp factory: at(5) is five minutes after base_time."""

    def _at(minutes: int) -> datetime:
        return base_time + timedelta(minutes=minutes)

    return _at


@pytest.fixture
def mock_backend(at) -> MockBackend:
    """Backend with two conversations whose exchanges interleave in time."""
    return MockBackend(
        conversations=[
            Conversation(id="c1", title="Travel plans"),
            Conversation(id="c2", title=None),
        ],
        histories={
            "c1": [
                message("user", "Where should I go?", at(0), id="m1"),
                message("assistant", "Try Lisbon.", at(1), id="m2"),
                message("user", "When?", at(10), id="m5"),
                message("assistant", "In spring.", at(11), id="m6"),
            ],
            "c2": [
                message("user", "Summarize my notes", at(5), id="m3"),
                message("assistant", "Here is a summary.", at(6), id="m4"),
            ],
        },
    )
