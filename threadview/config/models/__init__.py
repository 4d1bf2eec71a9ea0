"""Configuration model exports."""

from threadview.config.models.backend import BackendConfig
from threadview.config.models.engine import EngineConfig
from threadview.config.models.observability import LoggingConfig, ObservabilityConfig

__all__ = [
    "BackendConfig",
    "EngineConfig",
    "LoggingConfig",
    "ObservabilityConfig",
]
