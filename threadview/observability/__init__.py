"""Observability: structured logging via structlog."""

from threadview.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
