"""Process-wide application context.

The configuration is loaded once, at import, from ``$APP_CONFIG_FILE``
(default ``config.yaml``). Code reads it through ``get_config()``; tests and
tools swap it for a block of code with ``with_context``.
"""

import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from src.automarket.runtime.config.config_data import ConfigData
from src.automarket.runtime.config.config_template import load_templated_yaml

CONFIG_FILE_ENV = "APP_CONFIG_FILE"


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def _config_path() -> Path:
    return Path(os.getenv(CONFIG_FILE_ENV, "config.yaml"))


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_templated_yaml(_config_path()))
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit_values(model: BaseModel) -> dict[str, Any]:
    """Collect the values a caller actually set, at any depth.

    A nested section appears only when something inside it was set, or when
    the section itself was passed explicitly. Dict-valued fields (such as the
    provider map) are replaced whole rather than merged key by key.
    """
    values: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _explicit_values(value)
            if nested or name in model.model_fields_set:
                values[name] = nested
        elif name in model.model_fields_set:
            if isinstance(value, dict):
                value = {
                    k: v.model_dump() if isinstance(v, BaseModel) else v
                    for k, v in value.items()
                }
            values[name] = value
    return values


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict) and key != "providers":
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Overlay the explicitly set parts of ``override_config`` on ``base_config``."""
    return ConfigData.model_validate(
        _deep_merge(base_config.model_dump(), _explicit_values(override_config))
    )


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily override the application configuration.

    Only fields explicitly set on ``config_override`` replace the current
    values; everything else is inherited from the enclosing context.

    Example:
        with with_context(ConfigData(store=StoreConfig(backend="memory"))):
            assert get_config().store.backend == "memory"
    """
    if config_override is None:
        yield
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData or None, got {type(config_override).__name__}"
        )

    current = get_context()
    token = set_context(replace(current, config=_merge_configs(current.config, config_override)))
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    return get_context().config
