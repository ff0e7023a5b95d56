"""Public API surface for indentlog."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .core.logger import Logger
from .core.manager import GLOBAL_MANAGER
from .formatters.indent import IndentFormatter

_CONFIGURED = False


def configure(overrides: Dict[str, Any] | None = None) -> None:
    """Configure indentlog using the provided overrides."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_formatter() -> IndentFormatter:
    """Return the root formatter."""

    _ensure_configured()
    return GLOBAL_MANAGER.formatter


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger; records reach the formatter through the bridge."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def get_context_logger(*args: Any, **context_kv: Any) -> Logger:
    """Return a structured logger carrying the given attributes."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_context_logger(*args, **context_kv)


def set_level(level: int | str) -> None:
    """Change the minimum level for every logger handed out so far."""

    _ensure_configured()
    GLOBAL_MANAGER.set_level(level)
