"""Runtime wiring: root formatter, shared level and the stdlib bridge."""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from ..config.schema import BridgeConfig, IndentlogConfig
from ..formatters.indent import IndentFormatter, Options
from ..handlers.bridge import IndentLogHandler
from ..handlers.console import ConsoleSinkConfig, build_console_sink
from .levels import INFO, Level, LevelVar, ensure_level, parse_level, to_stdlib
from .logger import Logger
from .validation import ConfigurationError, validate_configuration

_LOGGER = logging.getLogger(__name__)


class LogManager:
    """Central coordinator for indentlog configuration."""

    def __init__(self) -> None:
        self._config: IndentlogConfig | None = None
        self._level = LevelVar(INFO)
        self._formatter: IndentFormatter | None = None
        self._bridge: IndentLogHandler | None = None
        # Logger name -> (level, propagate) before the bridge was attached.
        self._bridged: Dict[str, Tuple[int, bool]] = {}

    # ------------------------------------------------------------------
    def configure(self, config: IndentlogConfig) -> None:
        """Apply the supplied configuration."""

        validate_configuration(config)
        self._teardown()

        self._config = config
        self._level.set(ensure_level(config.level))
        sink = build_console_sink(ConsoleSinkConfig(stream=config.stream))
        self._formatter = IndentFormatter(sink, Options(level=self._level))

        if config.bridge.enabled:
            self._install_bridge(config.bridge)
        logging.captureWarnings(config.bridge.capture_warnings)
        _LOGGER.debug("indentlog configured: level=%s stream=%s", self._level.level(), config.stream)

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach the bridge and drop the root formatter."""

        self._teardown()
        self._config = None

    # ------------------------------------------------------------------
    @property
    def configured(self) -> bool:
        return self._formatter is not None

    @property
    def formatter(self) -> IndentFormatter:
        if self._formatter is None:
            raise RuntimeError("indentlog is not configured")
        return self._formatter

    def set_level(self, level: int | str) -> None:
        """Change the threshold of every formatter derived from the root."""

        if isinstance(level, str):
            try:
                level = parse_level(level)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid level {level!r}: {exc}") from exc
        self._level.set(Level(level))
        stdlib_level = to_stdlib(self._level.level())
        for name in self._bridged:
            _stdlib_logger(name).setLevel(stdlib_level)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, *args: Any, **context_kv: Any) -> Logger:
        return Logger(self.formatter).with_(*args, **context_kv)

    # ------------------------------------------------------------------
    def _install_bridge(self, config: BridgeConfig) -> None:
        assert self._formatter is not None
        handler = IndentLogHandler(self._formatter)
        stdlib_level = to_stdlib(self._level.level())
        for name in config.loggers:
            logger = _stdlib_logger(name)
            self._bridged[name] = (logger.level, logger.propagate)
            logger.addHandler(handler)
            logger.setLevel(stdlib_level)
            if name != "root":
                logger.propagate = False
        self._bridge = handler

    def _teardown(self) -> None:
        if self._bridge is not None:
            for name, (level, propagate) in self._bridged.items():
                logger = _stdlib_logger(name)
                logger.removeHandler(self._bridge)
                logger.setLevel(level)
                logger.propagate = propagate
            self._bridge.close()
        self._bridge = None
        self._bridged.clear()
        self._formatter = None


def _stdlib_logger(name: str) -> logging.Logger:
    return logging.getLogger() if name == "root" else logging.getLogger(name)


GLOBAL_MANAGER = LogManager()
