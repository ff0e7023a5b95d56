"""Layered configuration loading.

Sources, lowest precedence first: built-in defaults, the per-user config
directory, ``indentlog.toml``/``indentlog.yaml`` in the working directory,
``[tool.indentlog]`` in ``pyproject.toml``, ``INDENTLOG__*`` environment
variables and finally the overrides passed by the caller.
"""

from __future__ import annotations

import importlib
import json
import logging
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, Mapping, cast

from platformdirs import user_config_dir

from .schema import IndentlogConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

_LOGGER = logging.getLogger(__name__)

_APP_NAME = "indentlog"
_ENV_PREFIX = "INDENTLOG__"
_FILENAMES = ("indentlog.toml", "indentlog.yaml", "indentlog.yml")


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    if yaml is None:
        _LOGGER.debug("PyYAML not installed, skipping %s", path)
        return {}
    loader = cast(Callable[[Any], Any], getattr(yaml, "safe_load"))
    with path.open("r", encoding="utf-8") as fh:
        data = loader(fh)
    if not isinstance(data, Mapping):
        return {}
    return {str(key): value for key, value in data.items()}


def _read_directory(directory: Path) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for filename in _FILENAMES:
        payload = _read_file(directory / filename)
        if payload:
            _LOGGER.debug("loaded configuration from %s", directory / filename)
            _merge(data, payload)
    return data


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        if isinstance(value, Mapping):
            existing = base.get(key)
            nested = dict(existing) if isinstance(existing, Mapping) else {}
            base[key] = _merge(nested, value)
        else:
            base[key] = value
    return base


def _user_config() -> Dict[str, Any]:
    return _read_directory(Path(user_config_dir(_APP_NAME)))


def _local_config() -> Dict[str, Any]:
    return _read_directory(Path.cwd())


def _pyproject_config() -> Dict[str, Any]:
    data = _read_file(Path.cwd() / "pyproject.toml")
    section = data.get("tool", {})
    section = section.get(_APP_NAME, {}) if isinstance(section, Mapping) else {}
    if not isinstance(section, Mapping):
        return {}
    return {str(key): value for key, value in section.items()}


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if stripped.lstrip("+-").isdigit():
        return int(stripped)
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for env_key, raw_value in (os.environ if environ is None else environ).items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        *parents, leaf = env_key[len(_ENV_PREFIX) :].lower().split("__")
        target = data
        for segment in parents:
            target = cast(Dict[str, Any], target.setdefault(segment, {}))
        target[leaf] = _coerce_value(raw_value)
    return data


def _layers() -> Iterable[Mapping[str, Any]]:
    yield _user_config()
    yield _local_config()
    yield _pyproject_config()
    yield _env_config()


def load_configuration(overrides: Mapping[str, Any] | None = None) -> IndentlogConfig:
    """Load configuration from supported sources in precedence order."""

    merged = default_config()
    for layer in (*_layers(), overrides or {}):
        _merge(merged, layer)
    return build_config(merged)
