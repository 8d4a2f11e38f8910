"""Configuration management using pydantic-settings.

Configuration is read once per process (``get_app_config`` is a
singleton): the LLM client is built from it at startup and never
rebuilt, so re-reading files later would only make the two disagree.

Priority order (highest first):

1. Init kwargs (tests and embedding callers)
2. Environment variables (``CHATSTORE_`` prefix, ``__`` nesting)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml``)
5. File secrets
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from chatstore.infra.singleton import singleton

from .system import ChatConfig, LLMConfig, LoggingConfig, MetricsConfig, TracingConfig

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"  # Nested environment variable delimiter
ENV_PREFIX = "CHATSTORE_"

DEFAULT_ENCODING = "utf-8"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM provider configuration",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig,
        description="Chat endpoint settings",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig,
        description="OpenTelemetry tracing settings",
    )

    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig,
        description="Prometheus metrics settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


@singleton
def get_app_config() -> AppConfig:
    """Get the process-wide application configuration."""
    return AppConfig()


def get_llm_config() -> LLMConfig:
    return get_app_config().llm


def get_chat_config() -> ChatConfig:
    return get_app_config().chat
