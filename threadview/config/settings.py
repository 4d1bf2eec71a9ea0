"""Root settings model for threadview configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from threadview.config.loader import load_config
from threadview.config.models.backend import BackendConfig
from threadview.config.models.engine import EngineConfig
from threadview.config.models.observability import ObservabilityConfig


class LayeredTomlSource(PydanticBaseSettingsSource):
    """Settings source backed by the merged TOML layers.

    Layers are read once, when the source is built for a Settings instance,
    so every Settings() sees the files as they are at that moment.
    """

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._values = load_config()

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {
            name: self._values[name]
            for name in self.settings_cls.model_fields
            if name in self._values
        }


class Settings(BaseSettings):
    """Settings for one engine process.

    Each section maps to a TOML table (`[backend]`, `[engine]`,
    `[observability.logging]`) and to THREADVIEW_<SECTION>__<KEY> variables,
    which take precedence over the files.
    """

    model_config = SettingsConfigDict(
        env_prefix="THREADVIEW_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="threadview", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")

    backend: BackendConfig = Field(
        default_factory=BackendConfig,
        description="Assistant backend connection",
    )
    engine: EngineConfig = Field(
        default_factory=EngineConfig,
        description="Aggregation engine policy",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: constructor arguments, THREADVIEW_* env vars, TOML files."""
        return (
            init_settings,
            env_settings,
            LayeredTomlSource(settings_cls),
        )
