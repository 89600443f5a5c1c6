from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Dict, Optional


_LOGGER_FILES: Dict[str, str] = {
    "cfgforge.readers": "readers.log",
    "cfgforge.emit": "emit.log",
}
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(logs_dir: Optional[Path], level: int = logging.INFO) -> None:
    """Console logging on ``cfgforge``, plus run and per-area log files under ``logs_dir``.

    Calling again with the same directory and level is a no-op.
    """
    root = logging.getLogger("cfgforge")
    target = str(logs_dir) if logs_dir is not None else ""
    if getattr(root, "_cfgforge_logging", None) == (target, level):
        return

    _close_handlers(root)
    root.setLevel(level)
    root.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console_handler)

    for logger_name in _LOGGER_FILES:
        logger = logging.getLogger(logger_name)
        _close_handlers(logger)
        logger.setLevel(level)
        logger.propagate = True

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(logs_dir / "run.log", level))
        for logger_name, filename in _LOGGER_FILES.items():
            logging.getLogger(logger_name).addHandler(_file_handler(logs_dir / filename, level))

    root._cfgforge_logging = (target, level)  # type: ignore[attr-defined]


def resolve_log_level(name: str) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(path: Path, level: int) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()
