from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cfgforge.utils.logging import _LOGGER_FILES, _close_handlers


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch):
    # artifacts set the base dir guard with os.environ.setdefault; register the
    # key with monkeypatch so it is removed again after each test
    monkeypatch.setenv("CFGFORGE_BASEDIR", "")
    monkeypatch.delenv("CFGFORGE_BASEDIR")
    for name in ("CFGFORGE_BASE_DIR", "CFGFORGE_OUTPUT_DIR", "CFGFORGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    for name in ["cfgforge", *_LOGGER_FILES]:
        logger = logging.getLogger(name)
        _close_handlers(logger)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
    root = logging.getLogger("cfgforge")
    if hasattr(root, "_cfgforge_logging"):
        delattr(root, "_cfgforge_logging")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve() / "project"
    root.mkdir()
    return root

