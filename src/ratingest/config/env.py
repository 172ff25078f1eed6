"""Readers for configuration held in environment variables."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return ``{name: value}`` for ``names``, reporting every unset or blank name at once."""

    values = {name: os.getenv(name, "") for name in names}
    missing = [name for name, value in values.items() if not value.strip()]
    if missing:
        raise MissingConfigurationError(missing)
    return values


def require_env_var(name: str) -> str:
    return require_env_vars([name])[name]


def optional_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


def optional_flag(name: str, *, default: bool) -> bool:
    """Read a boolean switch; ``0``, ``false``, ``no`` and ``off`` turn it off."""

    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    return value not in _FALSE_VALUES
