import os
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from src.bookshelf.runtime.config.config_data import ConfigData
from src.bookshelf.runtime.config.config_template import load_config

CONFIG_PATH_ENV = "BOOKSHELF_CONFIG"


@dataclass(frozen=True)
class AppContext:
    """Process-wide state reachable from request handlers, services and the CLI."""

    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context",
    default=AppContext(
        config=load_config(Path(os.getenv(CONFIG_PATH_ENV, "config.yaml")))
    ),
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Install ``context`` for the current task; reset it with the returned token."""
    return _app_context.set(context)


def get_config() -> ConfigData:
    """The configuration of the active context."""
    return get_context().config


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(base: ConfigData, override: ConfigData) -> ConfigData:
    """Apply the explicitly set values of ``override`` on top of ``base``.

    ``exclude_unset`` recurses into nested sections, so
    ``ConfigData(auth=AuthConfig(token="t"))`` changes the token and nothing else.
    """
    merged = _deep_merge(base.model_dump(), override.model_dump(exclude_unset=True))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[ConfigData]:
    """Temporarily run with ``config_override`` merged into the active config.

    Example:
        with with_context(ConfigData(auth=AuthConfig(token="secret"))):
            assert get_config().auth.token == "secret"
    """
    if config_override is None:
        yield get_config()
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged = merge_config(get_config(), config_override)
    token = set_context(replace(get_context(), config=merged))
    try:
        yield merged
    finally:
        _app_context.reset(token)
