"""Build manifest loading and resolver helpers.

"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from cfgforge.config.defaults import DEFAULT_MANIFEST
from cfgforge.errors import ManifestError
from cfgforge.utils import env_str, merge_pair, resolve_log_level
from cfgforge.utils.paths import SKIPPABLE_PREFIX

LOGGER = logging.getLogger("cfgforge.config")

def load_config(config_path: str | Path) -> Tuple[Dict[str, Any], Path, Path]:
    """Load a build manifest.

    Args:
        config_path (str | Path): Path to the YAML manifest.

    Returns:
        Tuple[Dict[str, Any], Path, Path]: Manifest merged over defaults, the
        resolved manifest path and the directory holding it.

    Raises:
        ManifestError: The manifest is missing or not a YAML mapping.

    Side Effects / I/O:
        - Reads the manifest file and ``CFGFORGE_*`` environment variables.

    Examples:
        >>> from cfgforge.config.loader import load_config
        >>> cfg, path, project_root = load_config("cfgforge.yaml")

    """
    path = Path(config_path).expanduser().resolve()
    if not path.is_file():
        raise ManifestError(f"Manifest file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
    except yaml.YAMLError as err:
        raise ManifestError(f"Manifest is not valid YAML: {path}: {err}") from err

    if not isinstance(loaded, dict):
        raise ManifestError("Manifest must be a YAML object.")

    cfg = _merge_defaults(loaded)
    _apply_env_overrides(cfg)
    _validate_manifest(cfg)
    return cfg, path, path.parent


def _merge_defaults(loaded: Dict[str, Any]) -> Dict[str, Any]:
    cfg = deepcopy(DEFAULT_MANIFEST)
    for key, value in loaded.items():
        # unit lists are taken as given, not appended to the (empty) defaults
        if key in {"files", "addition"}:
            cfg[key] = value
        else:
            cfg[key] = merge_pair(cfg.get(key), value)
    return cfg


def _apply_env_overrides(cfg: Dict[str, Any]) -> None:
    base_dir = env_str("CFGFORGE_BASE_DIR")
    if base_dir:
        cfg["base_dir"] = base_dir
    output_dir = env_str("CFGFORGE_OUTPUT_DIR")
    if output_dir:
        cfg["output_dir"] = output_dir
    log_level = env_str("CFGFORGE_LOG_LEVEL")
    if log_level:
        logging_cfg = cfg.setdefault("logging", {})
        if not isinstance(logging_cfg, dict):
            logging_cfg = {}
            cfg["logging"] = logging_cfg
        logging_cfg["level"] = log_level


def _validate_manifest(cfg: Dict[str, Any]) -> None:
    files = cfg.get("files")
    if not isinstance(files, dict):
        raise ManifestError("Manifest 'files' must map unit names to lists of fragment paths.")
    for name, paths in files.items():
        if not isinstance(name, str) or not name:
            raise ManifestError(f"Unit names must be non-empty strings, got {name!r}.")
        if isinstance(paths, str):
            continue
        if not isinstance(paths, list) or not all(isinstance(item, str) for item in paths):
            raise ManifestError(f"Fragments of unit '{name}' must be a list of paths.")
    if not isinstance(cfg.get("addition"), dict):
        raise ManifestError("Manifest 'addition' must be a mapping.")
    if not isinstance(cfg.get("logging"), dict):
        raise ManifestError("Manifest 'logging' must be a mapping.")


def resolve_base_dir(cfg: Dict[str, Any], project_root: Path) -> Path:
    raw = str(cfg.get("base_dir") or "").strip()
    if not raw:
        return project_root.resolve()
    return _resolve_against(raw, project_root)


def resolve_output_dir(cfg: Dict[str, Any], base_dir: Path) -> Path:
    raw = str(cfg.get("output_dir") or DEFAULT_MANIFEST["output_dir"]).strip()
    return _resolve_against(raw, base_dir)


def resolve_files(cfg: Dict[str, Any], base_dir: Path) -> Dict[str, List[str]]:
    """Map unit names to fragment locations made absolute against ``base_dir``.

    The skippable ``?`` prefix is kept in front of the resolved path.
    """
    files: Dict[str, List[str]] = {}
    for name, paths in (cfg.get("files") or {}).items():
        if isinstance(paths, str):
            paths = [paths]
        files[name] = [resolve_location(location, base_dir) for location in paths]
    return files


def resolve_location(location: str, base_dir: Path) -> str:
    skippable = SKIPPABLE_PREFIX if location.startswith(SKIPPABLE_PREFIX) else ""
    raw = location[len(skippable) :]
    return skippable + str(_resolve_against(raw, base_dir))


def resolve_addition(cfg: Dict[str, Any]) -> Dict[str, Any]:
    addition = cfg.get("addition")
    return deepcopy(addition) if isinstance(addition, dict) else {}


def resolve_logs_dir(cfg: Dict[str, Any], base_dir: Path) -> Path:
    logging_cfg = cfg.get("logging") if isinstance(cfg.get("logging"), dict) else {}
    raw = str(logging_cfg.get("dir") or DEFAULT_MANIFEST["logging"]["dir"]).strip()
    return _resolve_against(raw, base_dir)


def resolve_logging_level(cfg: Dict[str, Any]) -> int:
    logging_cfg = cfg.get("logging") if isinstance(cfg.get("logging"), dict) else {}
    return resolve_log_level(str(logging_cfg.get("level") or "INFO"))


def _resolve_against(raw: str, root: Path) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()
