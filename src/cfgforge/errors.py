"""Exception hierarchy for cfgforge.

Missing fragments are not errors: they are reported as warnings and replaced
by empty fragments. Everything that stops a unit from being assembled derives
from :class:`CfgforgeError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class CfgforgeError(Exception):
    """Base class for all cfgforge failures."""


class ManifestError(CfgforgeError):
    """The build manifest is missing or structurally invalid."""


class FragmentError(CfgforgeError):
    """A fragment file exists but cannot be turned into a configuration tree."""


class UnsupportedFragmentError(FragmentError):
    """No reader is registered for the fragment's file format."""


class InvalidFragmentError(FragmentError):
    """The fragment parsed, but its root is neither a mapping nor a list."""


class FailedWriteError(CfgforgeError):
    """An assembled artifact could not be written.

    The previous artifact at ``path`` (if any) is left untouched.
    """

    def __init__(self, path: Union[str, Path], reason: str = "") -> None:
        self.path = Path(path)
        message = f"Failed write file {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
