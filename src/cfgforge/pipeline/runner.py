from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from cfgforge.config import (
    load_config,
    resolve_addition,
    resolve_base_dir,
    resolve_files,
    resolve_logging_level,
    resolve_logs_dir,
    resolve_output_dir,
)
from cfgforge.pipeline.builder import Builder, BuildReport
from cfgforge.utils import load_dotenv_files, setup_logging

LOGGER = logging.getLogger("cfgforge.pipeline")


def run(config_path: str | Path) -> BuildReport:
    """Assemble every unit of a manifest and persist the run description."""
    builder = _builder_from_manifest(config_path, with_log_files=True)
    LOGGER.info(f"[build] Assembling {len(builder.files)} unit(s) into {builder.output_dir}")
    report = builder.build_units()
    builder.save_files()
    return report


def rebuild(output_dir: str | Path, base_dir: Optional[str | Path] = None) -> BuildReport:
    """Re-assemble units from the ``__files``/``__addition`` artifacts of an earlier run."""
    setup_logging(None)
    builder = Builder.from_saved(output_dir)
    if base_dir is not None:
        builder.base_dir = Path(base_dir).expanduser().resolve()
    LOGGER.info(f"[rebuild] {len(builder.files)} unit(s) from {builder.output_dir}")
    return builder.build_units()


def show_unit(config_path: str | Path, name: str) -> Any:
    """Merged value of one unit, built in memory without writing artifacts."""
    builder = _builder_from_manifest(config_path, with_log_files=False)
    builder.build_units(write=False)
    return builder.get_unit(name).values


def _builder_from_manifest(config_path: str | Path, with_log_files: bool) -> Builder:
    config_file = Path(config_path).expanduser().resolve()
    load_dotenv_files(config_file.parent)

    cfg, _, project_root = load_config(config_file)
    base_dir, output_dir = _resolve_dirs(cfg, project_root)
    logs_dir = resolve_logs_dir(cfg, base_dir) if with_log_files else None
    setup_logging(logs_dir, resolve_logging_level(cfg))

    return Builder(
        output_dir=output_dir,
        base_dir=base_dir,
        files=resolve_files(cfg, base_dir),
        addition=resolve_addition(cfg),
    )


def _resolve_dirs(cfg: dict, project_root: Path) -> Tuple[Path, Path]:
    base_dir = resolve_base_dir(cfg, project_root)
    return base_dir, resolve_output_dir(cfg, base_dir)
