from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

import pytest

import indentlog.api as indentlog_api
from indentlog.config import loader
from indentlog.core.manager import GLOBAL_MANAGER


@pytest.fixture(autouse=True)
def reset_indentlog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(tmp_path / "no-user-config"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("INDENTLOG__"):
            monkeypatch.delenv(key)
    yield
    GLOBAL_MANAGER.shutdown()
    GLOBAL_MANAGER.set_level("INFO")
    indentlog_api._CONFIGURED = False
    logging.captureWarnings(False)
