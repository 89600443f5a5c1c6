"""Fragment readers.

A reader turns one fragment file into a configuration tree. Readers are picked
by file name through :func:`get_reader`; the rest of cfgforge only relies on
``FragmentReader.read``.
"""

from __future__ import annotations

import json
import logging
import runpy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, Union

import yaml

from cfgforge.errors import FragmentError, InvalidFragmentError, UnsupportedFragmentError
from cfgforge.utils.env import parse_dotenv
from cfgforge.utils.paths import SKIPPABLE_PREFIX

LOGGER = logging.getLogger("cfgforge.readers")

Reporter = Callable[[str], None]
PathLike = Union[str, Path]


class FragmentReader:
    """Base reader: subclasses implement :meth:`parse`."""

    def __init__(self, context: Optional[Dict[str, Any]] = None) -> None:
        self.context: Dict[str, Any] = dict(context or {})

    def read(self, path: PathLike) -> Any:
        path = Path(path)
        try:
            data = self.parse(path)
        except FragmentError:
            raise
        except Exception as err:
            raise InvalidFragmentError(f"Cannot parse fragment {path}: {err}") from err
        if data is None:
            return {}
        if not isinstance(data, (Mapping, list)):
            raise InvalidFragmentError(
                f"Fragment root must be a mapping or a list, got {type(data).__name__}: {path}"
            )
        return data

    def parse(self, path: Path) -> Any:
        raise NotImplementedError


class YamlReader(FragmentReader):
    def parse(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)


class JsonReader(FragmentReader):
    def parse(self, path: Path) -> Any:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return None
        return json.loads(text)


class DotEnvReader(FragmentReader):
    def parse(self, path: Path) -> Any:
        return parse_dotenv(path.read_text(encoding="utf-8"))


class PythonReader(FragmentReader):
    """Execute a Python fragment and take its ``config`` global.

    The reader context (values of already built special units such as
    ``params``) is handed to the fragment as initial globals.
    """

    variable = "config"

    def parse(self, path: Path) -> Any:
        namespace = runpy.run_path(str(path), init_globals=dict(self.context))
        return namespace.get(self.variable)


_READERS: Dict[str, Type[FragmentReader]] = {
    ".yaml": YamlReader,
    ".yml": YamlReader,
    ".json": JsonReader,
    ".env": DotEnvReader,
    ".py": PythonReader,
}


def get_reader(path: PathLike, context: Optional[Dict[str, Any]] = None) -> FragmentReader:
    """Return a reader instance for ``path`` based on its file name.

    Args:
        path (PathLike): Fragment file path.
        context (Optional[Dict[str, Any]]): Values exposed to readers that can use them.

    Returns:
        FragmentReader: Reader bound to ``context``.

    Raises:
        UnsupportedFragmentError: No reader handles the file's extension.

    Examples:
        >>> from cfgforge.io.readers import get_reader
        >>> type(get_reader("config/web.yaml")).__name__
        'YamlReader'

    """
    path = Path(path)
    if path.name == ".env" or path.name.startswith(".env."):
        return DotEnvReader(context)
    reader_cls = _READERS.get(path.suffix.lower())
    if reader_cls is None:
        raise UnsupportedFragmentError(f"Unsupported fragment format '{path.suffix}': {path}")
    return reader_cls(context)


def read_fragment(
    location: str,
    context: Optional[Dict[str, Any]] = None,
    reporter: Optional[Reporter] = None,
) -> Any:
    """Read one fragment location, honouring the skippable ``?`` prefix.

    Missing skippable fragments are silently empty. Other missing fragments are
    reported through ``reporter`` (or the readers logger) and also read as empty.
    """
    skippable = location.startswith(SKIPPABLE_PREFIX)
    if skippable:
        location = location[len(SKIPPABLE_PREFIX) :]

    path = Path(location)
    if not path.exists():
        if not skippable:
            _report(f"[fragment] Non existent config file {path}", reporter)
        return {}

    LOGGER.debug(f"[fragment] Reading {path}")
    return get_reader(path, context).read(path)


def _report(message: str, reporter: Optional[Reporter]) -> None:
    if reporter is not None:
        reporter(message)
    else:
        LOGGER.warning(message)
