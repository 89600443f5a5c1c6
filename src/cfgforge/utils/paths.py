"""Base directory marker substitution.

Absolute paths under the project base directory are replaced by
``BASE_DIR_MARKER`` in merged trees, and the marker is turned back into a
runtime ``base_dir`` expression once the tree is rendered as source.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Any, Union

UNIX_SEP = "/"
BASE_DIR_MARKER = "<<<base-dir>>>"
SKIPPABLE_PREFIX = "?"


def normalize_path(path: Union[str, "os.PathLike[str]"], sep: str = UNIX_SEP) -> str:
    """Normalize directory separators to ``sep`` and drop trailing ones.

    Forced to the Unix separator by default so prefix matching works the same
    on Windows paths.
    """
    text = os.fspath(path)
    return text.replace("/", sep).replace("\\", sep).rstrip(sep)


def substitute_path(path: str, root: str, marker: str = BASE_DIR_MARKER) -> str:
    skippable = SKIPPABLE_PREFIX if path.startswith(SKIPPABLE_PREFIX) else ""
    if skippable:
        path = path[len(SKIPPABLE_PREFIX) :]

    prefix = root + UNIX_SEP
    if path == root:
        result = marker
    elif path.startswith(prefix):
        result = marker + path[len(root) :]
    else:
        result = path

    return skippable + result


def substitute_paths(data: Any, root: str, marker: str = BASE_DIR_MARKER) -> Any:
    """Return a copy of ``data`` with every string under ``root`` marked.

    Args:
        data (Any): Configuration tree.
        root (str): Already normalized base directory.
        marker (str): Token replacing ``root``.

    Returns:
        Any: New tree; non-string scalars are returned as is.

    Preconditions / Invariants:
        - Applying the substitution twice gives the same tree as applying it once.

    Examples:
        >>> from cfgforge.utils.paths import substitute_paths
        >>> substitute_paths({"p": "?/proj/x", "n": 1}, "/proj")
        {'p': '?<<<base-dir>>>/x', 'n': 1}

    """
    if isinstance(data, str):
        return substitute_path(data, root, marker)
    if isinstance(data, Mapping):
        return {key: substitute_paths(value, root, marker) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [substitute_paths(item, root, marker) for item in data]
    return data


def substitute_output_dirs(data: Any, base_dir: Union[str, "os.PathLike[str]"]) -> Any:
    return substitute_paths(data, normalize_path(base_dir), BASE_DIR_MARKER)


def replace_markers(content: str, variable: str = "base_dir", marker: str = BASE_DIR_MARKER) -> str:
    """Turn marked string literals in rendered source into concatenations.

    ``'<marker>/etc'`` becomes ``base_dir + '/etc'`` and ``'?<marker>/etc'``
    becomes ``'?' + base_dir + '/etc'``. Must run on rendered text, after the
    tree has been serialized. Only literals that open at a value position
    (line indentation, after ``: ``, ``= ``, ``, `` or an opening bracket) are
    rewritten, so a quote inside another string is left alone.
    """
    pattern = re.compile(
        r"(?P<lead>^[ \t]*|: |= |, |[\[({])(?P<quote>['\"])(?P<skip>"
        + re.escape(SKIPPABLE_PREFIX)
        + r")?"
        + re.escape(marker),
        re.MULTILINE,
    )

    def _rewrite(match: "re.Match[str]") -> str:
        lead, quote = match.group("lead"), match.group("quote")
        if match.group("skip"):
            return f"{lead}{quote}{SKIPPABLE_PREFIX}{quote} + {variable} + {quote}"
        return f"{lead}{variable} + {quote}"

    return pattern.sub(_rewrite, content)
