"""YAML config loading and environment variable expansion."""

import os
import re
from dataclasses import fields
from pathlib import Path
from typing import Any, TypeVar

import yaml

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

T = TypeVar("T")


class ConfigError(Exception):
    """Base exception for configuration problems."""


class ConfigValidationError(ConfigError):
    """A config value is missing or invalid."""


class EnvironmentVariableError(ConfigError):
    """A referenced environment variable is not set."""


# Environment variable pattern: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} in a string with the environment variable value.

    Args:
        value: String to expand.

    Returns:
        String with environment variables expanded.

    Raises:
        EnvironmentVariableError: A referenced variable is not set.
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """Walk a data structure and expand environment variables in strings."""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """Validate that a required field is present.

    Args:
        data: Mapping to inspect.
        field: Field name.
        parent: Parent path (for the error message).

    Returns:
        The field value.

    Raises:
        ConfigValidationError: The field is missing.
    """
    if field not in data or data[field] is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _build_section(cls: type[T], data: dict[str, Any] | None, name: str) -> T:
    """Build an optional config section, rejecting unknown keys.

    Args:
        cls: Dataclass type of the section.
        data: Raw section data (None uses all defaults).
        name: Section name (for error messages).

    Returns:
        Section instance.

    Raises:
        ConfigValidationError: The section contains unknown keys.
    """
    if not data:
        return cls()
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Section '{name}' must be a mapping")

    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigValidationError(
            f"Unknown field(s) in '{name}': {', '.join(unknown)}"
        )
    return cls(**data)


def _build_slack_config(slack_data: dict[str, Any]) -> SlackConfig:
    """Build and validate the slack section."""
    mode_value = slack_data.get("mode", SlackMode.SINGLE.value)
    try:
        mode = SlackMode(mode_value)
    except ValueError as e:
        raise ConfigValidationError(
            f"slack.mode must be 'single' or 'multi', got '{mode_value}'"
        ) from e

    app_token = _validate_required_field(slack_data, "app_token", "slack")

    if mode is SlackMode.SINGLE:
        _validate_required_field(slack_data, "bot_token", "slack")
    else:
        for required in ("client_id", "client_secret", "signing_secret"):
            _validate_required_field(slack_data, required, "slack")

    slack = SlackConfig(
        app_token=app_token,
        mode=mode,
        bot_token=slack_data.get("bot_token"),
        client_id=slack_data.get("client_id"),
        client_secret=slack_data.get("client_secret"),
        signing_secret=slack_data.get("signing_secret"),
        redirect_uri=slack_data.get("redirect_uri"),
        install_url=slack_data.get("install_url"),
    )
    if slack_data.get("scopes"):
        slack.scopes = list(slack_data["scopes"])
    return slack


def load_config(path: str | Path) -> Config:
    """Load the config file.

    Args:
        path: Path to config.yaml.

    Returns:
        Config object.

    Raises:
        FileNotFoundError: The file does not exist.
        ConfigValidationError: A required value is missing or invalid.
        EnvironmentVariableError: A referenced environment variable is not set.
        yaml.YAMLError: YAML syntax error.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    data = _expand_recursive(raw_data)

    slack = _build_slack_config(_validate_required_field(data, "slack"))

    # LLMConfig (default is required, others such as "title" are optional)
    llm_data = _validate_required_field(data, "llm")
    _validate_required_field(llm_data, "default", "llm")
    llm: dict[str, LLMConfig] = {}
    for key, llm_item in llm_data.items():
        model = _validate_required_field(llm_item, "model", f"llm.{key}")
        llm[key] = LLMConfig(
            model=model,
            temperature=llm_item.get("temperature", 0.3),
            max_tokens=llm_item.get("max_tokens", 1500),
        )

    logging_config: LoggingConfig | None = None
    if data.get("logging"):
        logging_config = _build_section(LoggingConfig, data["logging"], "logging")

    return Config(
        slack=slack,
        llm=llm,
        batch=_build_section(BatchConfig, data.get("batch"), "batch"),
        bootstrap=_build_section(BootstrapConfig, data.get("bootstrap"), "bootstrap"),
        canvas=_build_section(CanvasConfig, data.get("canvas"), "canvas"),
        http=_build_section(HttpConfig, data.get("http"), "http"),
        logging=logging_config,
    )
