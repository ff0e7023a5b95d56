"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import IndentlogConfig
from .levels import parse_level

_STREAMS = {"stdout", "stderr"}


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def validate_configuration(config: IndentlogConfig) -> None:
    """Ensure configuration values can be applied."""

    if isinstance(config.level, str):
        try:
            parse_level(config.level)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid level {config.level!r}: {exc}") from exc

    if config.stream not in _STREAMS:
        raise ConfigurationError(
            f"Unknown stream {config.stream!r}; expected one of {', '.join(sorted(_STREAMS))}"
        )

    if config.bridge.enabled and not config.bridge.loggers:
        raise ConfigurationError("Bridge is enabled but no loggers are listed")
