"""Configuration schema definition for indentlog."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

DEFAULT_CONFIG: Dict[str, Any] = {
    "level": "INFO",
    "stream": "stderr",
    "bridge": {
        "enabled": True,
        "loggers": ["root"],
        "capture_warnings": False,
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class BridgeConfig:
    enabled: bool = True
    loggers: List[str] = field(default_factory=lambda: ["root"])
    capture_warnings: bool = False


@dataclass(slots=True)
class IndentlogConfig:
    level: str | int
    stream: str
    bridge: BridgeConfig
    raw: Dict[str, Any] = field(repr=False)


def _to_bridge(data: Mapping[str, Any]) -> BridgeConfig:
    enabled = bool(data.get("enabled", True))
    loggers_raw = data.get("loggers", ["root"])
    if isinstance(loggers_raw, str):
        loggers = [loggers_raw]
    elif isinstance(loggers_raw, Iterable):
        loggers = [str(item) for item in loggers_raw]
    else:
        loggers = []
    capture_warnings = bool(data.get("capture_warnings", False))
    return BridgeConfig(enabled=enabled, loggers=loggers, capture_warnings=capture_warnings)


def build_config(data: Mapping[str, Any]) -> IndentlogConfig:
    level = data.get("level", "INFO")
    if not isinstance(level, int):
        level = str(level)
    stream = str(data.get("stream", "stderr")).lower()
    bridge_data = data.get("bridge", {})
    bridge = _to_bridge(bridge_data if isinstance(bridge_data, Mapping) else {})

    raw_copy: Dict[str, Any] = deepcopy({k: v for k, v in data.items()})

    return IndentlogConfig(level=level, stream=stream, bridge=bridge, raw=raw_copy)
