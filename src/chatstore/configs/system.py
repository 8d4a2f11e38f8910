from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMPLETIONS_PATH = "chat/completions"


class ProviderKind(str, Enum):
    """LLM backends recognised by configuration.

    Only ``GROQ`` and ``LOCAL_OLLAMA`` have client implementations; the
    others are accepted so that a config naming them degrades to the
    no-op client instead of failing validation.
    """

    GROQ = "groq"
    OPENAI = "openai"
    GEMINI = "gemini"
    LOCAL_OLLAMA = "local_ollama"

    @classmethod
    def from_string(cls, value: str) -> "ProviderKind":
        for kind in cls:
            if kind.value == value.strip().lower():
                return kind
        raise ValueError(f"Unknown LLM provider: {value}")

    @property
    def is_hosted(self) -> bool:
        return self is not ProviderKind.LOCAL_OLLAMA


class LLMConfig(BaseModel):
    """Connection and sampling parameters for the active LLM provider.

    Loaded once at startup and frozen for the process lifetime.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderKind = Field(
        default=ProviderKind.GROQ, description="Active LLM provider"
    )
    model: str = Field(
        default="llama-3.1-8b-instant", description="Model identifier"
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=1024, description="Maximum reply tokens")
    timeout: timedelta = Field(
        default=timedelta(seconds=30),
        description="Request timeout applied to every provider call",
    )
    base_url: str = Field(
        default="", description="Base URL of a local runtime (e.g. Ollama)"
    )
    api_url: str = Field(
        default="",
        description=(
            "Base URL of a hosted API, without the /chat/completions suffix"
        ),
    )
    api_key: str = Field(default="", description="API key for hosted providers")
    top_p: float = Field(default=1.0, description="Top-p sampling parameter")
    stream: bool = Field(
        default=False,
        description="Request streamed replies; streamed bodies are not parsed",
    )

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value):
        if isinstance(value, str):
            return ProviderKind.from_string(value)
        return value

    @field_validator("api_url")
    @classmethod
    def _strip_completions_path(cls, value: str) -> str:
        url = value.strip().rstrip("/")
        if url.endswith(COMPLETIONS_PATH):
            return url[: -len(COMPLETIONS_PATH)].rstrip("/")
        return value

    @property
    def requires_api_key(self) -> bool:
        return self.provider.is_hosted

    @property
    def effective_base_url(self) -> str:
        """URL the provider transport is bound to."""
        return self.api_url if self.provider.is_hosted else self.base_url

    def is_configured(self) -> bool:
        """Whether enough is set to construct a real (non-fallback) client."""
        if self.provider.is_hosted:
            return bool(self.api_key.strip()) and bool(self.api_url.strip())
        return bool(self.base_url.strip())


class ChatConfig(BaseModel):
    """Configuration for the chat endpoints."""

    max_history_messages: int = Field(
        default=20,
        description="Most recent messages passed to the LLM as context",
    )
    max_message_length: int = Field(
        default=4096, description="Maximum length of a single user message"
    )
    default_session_title: str = Field(
        default="New Chat", description="Title used when none is supplied"
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )
    service_name: str = Field(
        default="chatstore", description="Static 'service' field on JSON lines"
    )
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["httpx", "httpcore", "opentelemetry"],
        description="Third-party loggers capped at WARNING",
    )


class TracingConfig(BaseModel):
    """OpenTelemetry export settings (disabled by default)."""

    enabled: bool = Field(default=False, description="Enable OTLP export")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic-auth user")
    password: str = Field(default="", description="Basic-auth password")
    service_name: str = Field(
        default="chatstore", description="service.name resource attribute"
    )
    sample_rate: float = Field(default=1.0, description="Root sampling ratio")
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Paths not traced or measured",
    )


class MetricsConfig(BaseModel):
    """Prometheus exposition settings."""

    enabled: bool = Field(default=True, description="Expose /metrics")
