"""Rendering and writing of assembled configuration artifacts.

An artifact is a standalone Python module. Importing or running it computes
``base_dir`` from the artifact's own location, optionally pulls in the sibling
``dotenv``, ``defines`` and ``params`` artifacts, and binds the assembled value
to the module global ``config``.
"""

from __future__ import annotations

import logging
import math
import os
import runpy
import tempfile
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from cfgforge.config.defaults import (
    DEFINES_UNIT,
    DOTENV_UNIT,
    PARAMS_UNIT,
    is_system_unit,
)
from cfgforge.errors import FailedWriteError
from cfgforge.utils.paths import UNIX_SEP, normalize_path, replace_markers

LOGGER = logging.getLogger("cfgforge.emit")

HEADER = "# Generated by cfgforge. Do not edit."
BASEDIR_CONSTANT = "CFGFORGE_BASEDIR"
ARTIFACT_SUFFIX = ".py"
INDENT = 4

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ArtifactOptions:
    with_env: bool = True
    with_defines: bool = True
    with_params: bool = True

    @classmethod
    def for_unit(cls, name: str) -> "ArtifactOptions":
        """Preamble selection for a unit, so no artifact requires itself or a later one."""
        system = is_system_unit(name)
        return cls(
            with_env=not (system or name == DOTENV_UNIT),
            with_defines=not (system or name in {DOTENV_UNIT, DEFINES_UNIT}),
            with_params=not (system or name in {DOTENV_UNIT, DEFINES_UNIT, PARAMS_UNIT}),
        )


def find_depth(output_path: PathLike, base_dir: PathLike) -> int:
    """Count directory levels between the artifact's directory and ``base_dir``."""
    out_dir = normalize_path(output_path).rpartition(UNIX_SEP)[0]
    base = normalize_path(base_dir)
    if out_dir != base and not out_dir.startswith(base + UNIX_SEP):
        LOGGER.warning(f"[emit] {output_path} is outside of base dir {base_dir}")
    return out_dir[len(base) :].count(UNIX_SEP)


def base_dir_expression(depth: int) -> str:
    if depth > 0:
        return f"str(_here.parents[{depth - 1}])"
    return "str(_here)"


def render_value(value: Any, level: int = 0) -> str:
    """Render a configuration tree as a Python literal.

    Args:
        value (Any): Tree to render.
        level (int): Current nesting level, used for indentation.

    Returns:
        str: Source text evaluating to an equal tree.

    Examples:
        >>> from cfgforge.io.artifact import render_value
        >>> print(render_value({"a": [1, "x"]}))
        {
            'a': [
                1,
                'x',
            ],
        }

    """
    pad = " " * (INDENT * (level + 1))
    closing = " " * (INDENT * level)
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        lines = [f"{pad}{render_value(key)}: {render_value(item, level + 1)}," for key, item in value.items()]
        return "{\n" + "\n".join(lines) + "\n" + closing + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = [f"{pad}{render_value(item, level + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + "\n" + closing + "]"
    if isinstance(value, float) and not math.isfinite(value):
        return f"float({str(value)!r})"
    if value is None or isinstance(value, (bool, int, float, str)):
        return repr(value)
    # dates and other YAML scalars are kept as their text
    return repr(str(value))


def render_artifact(data: Any, depth: int, options: ArtifactOptions = ArtifactOptions()) -> str:
    blocks = {
        "header": HEADER,
        "imports": "import os\nimport runpy\nfrom pathlib import Path",
        "base_dir": f"_here = Path(__file__).resolve().parent\nbase_dir = {base_dir_expression(depth)}",
        "guard": f"os.environ.setdefault({BASEDIR_CONSTANT!r}, base_dir)",
        "dotenv": (
            f"for _key, _value in {_require(DOTENV_UNIT)}.items():\n"
            "    os.environ.setdefault(_key, str(_value))"
            if options.with_env
            else ""
        ),
        "defines": f"defines = {_require(DEFINES_UNIT)}" if options.with_defines else "",
        "params": f"params = {_require(PARAMS_UNIT)}" if options.with_params else "",
        "content": f"config = {render_value(data)}",
    }
    return replace_markers("\n\n".join(block for block in blocks.values() if block)) + "\n"


def _require(name: str) -> str:
    return f"runpy.run_path(str(_here / {name + ARTIFACT_SUFFIX!r}))['config']"


def put_file(path: PathLike, content: str) -> bool:
    """Write ``content`` to ``path`` unless the file already holds it.

    Args:
        path (PathLike): Target file.
        content (str): Full file content.

    Returns:
        bool: ``True`` when the file was written, ``False`` when it was unchanged.

    Raises:
        FailedWriteError: The directory or the file could not be written.

    Side Effects / I/O:
        - Creates missing parent directories.
        - Replaces the file atomically, so a failed write keeps the previous content.

    """
    path = Path(path)
    encoded = content.encode("utf-8")
    try:
        if path.is_file() and path.read_bytes() == encoded:
            return False
    except OSError as err:
        LOGGER.debug(f"[emit] Cannot compare existing {path}: {err}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    except OSError as err:
        raise FailedWriteError(path, str(err)) from err

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(encoded)
        os.replace(tmp_name, path)
    except OSError as err:
        with suppress(OSError):
            os.unlink(tmp_name)
        raise FailedWriteError(path, str(err)) from err
    return True


def write_artifact(
    path: PathLike,
    data: Any,
    base_dir: PathLike,
    options: ArtifactOptions = ArtifactOptions(),
) -> bool:
    depth = find_depth(path, base_dir)
    written = put_file(path, render_artifact(data, depth, options))
    if written:
        LOGGER.info(f"[emit] Wrote {path}")
    else:
        LOGGER.debug(f"[emit] Unchanged {path}")
    return written


def run_artifact(path: PathLike) -> Dict[str, Any]:
    """Run an emitted artifact and return its module globals."""
    return runpy.run_path(str(path))


def load_artifact(path: PathLike) -> Any:
    return run_artifact(path)["config"]
