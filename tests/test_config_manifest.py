"""Tests for build manifest loading and resolvers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from cfgforge.config.loader import (
    load_config,
    resolve_addition,
    resolve_base_dir,
    resolve_files,
    resolve_logging_level,
    resolve_logs_dir,
    resolve_output_dir,
)
from cfgforge.errors import ManifestError


def _write_manifest(tmp_path: Path, payload: Any) -> Path:
    path = tmp_path / "cfgforge.yaml"
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    cfg, path, project_root = load_config(_write_manifest(tmp_path, {"files": {"web": ["web.yaml"]}}))
    root = tmp_path.resolve()

    assert path == root / "cfgforge.yaml"
    assert project_root == root
    assert resolve_base_dir(cfg, project_root) == root
    assert resolve_output_dir(cfg, root) == root / "config" / "assembled"
    assert resolve_logs_dir(cfg, root) == root / ".cfgforge" / "logs"
    assert resolve_logging_level(cfg) == logging.INFO
    assert resolve_addition(cfg) == {}


def test_resolve_files_makes_locations_absolute_and_keeps_skippable_prefix(tmp_path: Path) -> None:
    payload: Dict[str, Any] = {
        "base_dir": "app",
        "files": {
            "web": ["config/web.yaml", "?config/web-local.yaml", "/etc/app/web.yaml"],
            "params": "config/params.yaml",
        },
    }
    cfg, _, project_root = load_config(_write_manifest(tmp_path, payload))
    base_dir = resolve_base_dir(cfg, project_root)

    assert base_dir == tmp_path.resolve() / "app"
    assert resolve_files(cfg, base_dir) == {
        "web": [
            str(base_dir / "config" / "web.yaml"),
            "?" + str(base_dir / "config" / "web-local.yaml"),
            "/etc/app/web.yaml",
        ],
        "params": [str(base_dir / "config" / "params.yaml")],
    }


def test_load_config_keeps_logging_defaults_for_partial_sections(tmp_path: Path) -> None:
    cfg, _, _ = load_config(_write_manifest(tmp_path, {"logging": {"level": "debug"}}))

    assert cfg["logging"] == {"dir": ".cfgforge/logs", "level": "debug"}
    assert resolve_logging_level(cfg) == logging.DEBUG


def test_load_config_env_overrides(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CFGFORGE_OUTPUT_DIR", "build/config")
    monkeypatch.setenv("CFGFORGE_BASE_DIR", str(tmp_path / "elsewhere"))
    monkeypatch.setenv("CFGFORGE_LOG_LEVEL", "WARNING")

    cfg, _, project_root = load_config(_write_manifest(tmp_path, {"output_dir": "ignored"}))
    base_dir = resolve_base_dir(cfg, project_root)

    assert base_dir == (tmp_path / "elsewhere").resolve()
    assert resolve_output_dir(cfg, base_dir) == base_dir / "build" / "config"
    assert resolve_logging_level(cfg) == logging.WARNING


def test_load_config_rejects_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="YAML object"):
        load_config(_write_manifest(tmp_path, ["web.yaml"]))


@pytest.mark.parametrize(
    "payload",
    [
        {"files": ["web.yaml"]},
        {"files": {"web": [1, 2]}},
        {"files": {"web": {"a": "b"}}},
        {"addition": ["x"]},
        {"logging": "debug"},
    ],
)
def test_load_config_rejects_invalid_sections(tmp_path: Path, payload: Dict[str, Any]) -> None:
    with pytest.raises(ManifestError):
        load_config(_write_manifest(tmp_path, payload))


def test_resolve_logging_level_falls_back_to_info() -> None:
    assert resolve_logging_level({"logging": {"level": "chatty"}}) == logging.INFO
