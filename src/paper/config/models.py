"""Configuration dataclasses."""

from dataclasses import dataclass, field
from enum import Enum


class SlackMode(Enum):
    """How the bot obtains its workspace credentials."""

    SINGLE = "single"
    MULTI = "multi"


@dataclass
class SlackConfig:
    """Slack connection settings.

    Single-workspace mode needs ``bot_token``; multi-workspace mode needs the
    OAuth client credentials instead. ``app_token`` is used for Socket Mode
    in both modes.
    """

    app_token: str
    mode: SlackMode = SlackMode.SINGLE
    bot_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    signing_secret: str | None = None
    redirect_uri: str | None = None
    install_url: str | None = None
    scopes: list[str] = field(
        default_factory=lambda: [
            "app_mentions:read",
            "canvases:read",
            "canvases:write",
            "channels:history",
            "channels:read",
            "chat:write",
            "groups:history",
            "groups:read",
            "team:read",
            "users:read",
        ]
    )


@dataclass
class LLMConfig:
    """LLM settings (passed to LiteLLM completion)."""

    model: str
    temperature: float = 0.3
    max_tokens: int = 1500


@dataclass
class BatchConfig:
    """Message batching thresholds."""

    message_limit: int = 10
    time_window_seconds: float = 120
    buffer_cap: int = 100
    flush_delay_seconds: float = 1.0
    stale_window_seconds: float = 900
    stale_sweep_interval_seconds: float = 600
    idle_eviction_seconds: float = 3600
    cleanup_interval_seconds: float = 1800


@dataclass
class BootstrapConfig:
    """Initial history import settings."""

    lookback_days: int = 14
    max_messages: int = 1000
    min_messages: int = 10


@dataclass
class CanvasConfig:
    """Canvas publishing settings."""

    app_name: str = "Paper"
    summary_timeout_seconds: float = 90
    write_timeout_seconds: float = 30
    manual_history_limit: int = 100
    manual_min_messages: int = 3
    max_summary_messages: int = 150
    keep_first: int = 25
    keep_last: int = 75
    default_timezone: str = "America/New_York"
    notify_on_create: bool = True


@dataclass
class HttpConfig:
    """Health/status and OAuth HTTP server settings."""

    enabled: bool = True
    port: int = 10000


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None


@dataclass
class Config:
    """Application settings."""

    slack: SlackConfig
    llm: dict[str, LLMConfig]
    batch: BatchConfig = field(default_factory=BatchConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig | None = None
