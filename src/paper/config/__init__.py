"""Configuration management."""

from paper.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
from paper.config.models import (
    BatchConfig,
    BootstrapConfig,
    CanvasConfig,
    Config,
    HttpConfig,
    LLMConfig,
    LoggingConfig,
    SlackConfig,
    SlackMode,
)

__all__ = [
    "BatchConfig",
    "BootstrapConfig",
    "CanvasConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "HttpConfig",
    "LLMConfig",
    "LoggingConfig",
    "SlackConfig",
    "SlackMode",
    "expand_env_vars",
    "load_config",
]
