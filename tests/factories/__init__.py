"""Test factories for creating test data."""

from tests.factories.conversation import annotated, message, turn

__all__ = [
    "annotated",
    "message",
    "turn",
]
