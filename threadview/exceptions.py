"""Engine error hierarchy.

All engine errors inherit from ThreadviewError, which carries a
machine-readable error_code. The engine facade catches these at its
boundary and turns them into user-visible messages on the view state.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    DIRECTORY_UNAVAILABLE = "DIRECTORY_UNAVAILABLE"
    """The conversation list could not be fetched."""

    HISTORY_FETCH_FAILED = "HISTORY_FETCH_FAILED"
    """At least one conversation history could not be fetched."""

    SEND_FAILED = "SEND_FAILED"
    """A typed turn was not answered by the backend."""

    UPLOAD_FAILED = "UPLOAD_FAILED"
    """A question + file turn was rejected or not answered."""

    INVALID_TRANSITION = "INVALID_TRANSITION"
    """A selection action was not legal in the current view state."""


class ThreadviewError(Exception):
    """Base exception for all engine errors."""

    error_code: ErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DirectoryUnavailable(ThreadviewError):
    """Raised when the conversation directory cannot be listed."""

    error_code = ErrorCode.DIRECTORY_UNAVAILABLE

    def __init__(self, message: str = "Conversations are unavailable") -> None:
        super().__init__(message)


class HistoryFetchFailed(ThreadviewError):
    """Raised when any conversation's history retrieval fails.

    A single failing conversation fails the whole aggregate fetch.
    """

    error_code = ErrorCode.HISTORY_FETCH_FAILED

    def __init__(self, conversation_id: str, reason: str | None = None) -> None:
        message = f"History error for conversation {conversation_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.conversation_id = conversation_id
        self.reason = reason


class SendFailed(ThreadviewError):
    """Raised when a typed turn could not be delivered or answered."""

    error_code = ErrorCode.SEND_FAILED

    def __init__(self, reason: str) -> None:
        super().__init__(f"Send failed: {reason}")
        self.reason = reason


class UploadFailed(ThreadviewError):
    """Raised when a question + file turn could not be delivered or answered."""

    error_code = ErrorCode.UPLOAD_FAILED

    def __init__(self, reason: str) -> None:
        super().__init__(f"Upload failed: {reason}")
        self.reason = reason


class InvalidTransition(ThreadviewError):
    """Raised on a selection action that the current state does not allow."""

    error_code = ErrorCode.INVALID_TRANSITION
