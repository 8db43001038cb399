"""Loading ``config.yaml`` with environment placeholders."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.bookshelf.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve_placeholder(expression: str) -> str:
    if ":-" in expression:
        name, default = expression.split(":-", 1)
        return os.getenv(name, default)

    name, _, hint = expression.partition(":?")
    value = os.getenv(name)
    if value is None:
        detail = hint or "not set"
        raise ValueError(f"Required environment variable {name}: {detail}")
    return value


def substitute_env_vars(text: str) -> str:
    """
    Replace environment placeholders in ``text``.

    - ``${NAME}``: required, ValueError when unset
    - ``${NAME:-default}``: ``default`` when unset
    - ``${NAME:?hint}``: required, ``hint`` goes into the error message
    """
    return _PLACEHOLDER.sub(lambda match: _resolve_placeholder(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Copy ``<ENV>_NAME`` variables onto ``NAME`` for the active environment.

    With ``APP_ENVIRONMENT=production``, ``PRODUCTION_MONGO_URI`` becomes
    ``MONGO_URI``. Returns the names that were overridden.
    """
    prefix = f"{env_mode.upper()}_"
    overridden = []
    for name, value in list(os.environ.items()):
        if name.startswith(prefix) and len(name) > len(prefix):
            target = name[len(prefix):]
            os.environ[target] = value
            overridden.append(target)
    if overridden:
        logger.info("Applied {} overrides: {}", env_mode, sorted(overridden))
    return overridden


def _parse(text: str) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not isinstance(loaded, dict):
        raise ValueError("Failed to parse YAML: expected a mapping at the top level")
    return loaded.get("config") or {}


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Read ``file_path``, substitute placeholders and validate the ``config`` section.

    Raises:
        ValueError: a required variable is missing or the result is not a
            valid configuration
        FileNotFoundError: the file does not exist
    """
    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading {} configuration from {}", env_mode, file_path)
    apply_environment_overrides(env_mode)

    section = _parse(substitute_env_vars(file_path.read_text()))
    try:
        config = ConfigData(**section)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.auth.protected_operations and config.auth.token is None:
        logger.warning(
            "No AUTH_TOKEN configured; protected operations {} will reject every request",
            config.auth.protected_operations,
        )
    return config


def load_config(file_path: Path = Path("config.yaml")) -> ConfigData:
    """``config.yaml`` when present, built-in defaults otherwise."""
    if not file_path.exists():
        logger.info("No {} found; using default configuration", file_path)
        return ConfigData()
    return load_templated_yaml(file_path)
