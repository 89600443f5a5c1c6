"""Public package entrypoints for cfgforge.

This module defines the stable, top-level APIs intended for external callers.
"""

from __future__ import annotations

from cfgforge.pipeline import Builder, BuildReport, ConfigUnit
from cfgforge.pipeline.runner import rebuild, run, show_unit
from cfgforge.utils.merge import merge_trees
from cfgforge.utils.paths import substitute_output_dirs

__all__ = [
    "Builder",
    "BuildReport",
    "ConfigUnit",
    "merge_trees",
    "rebuild",
    "run",
    "show_unit",
    "substitute_output_dirs",
]
__version__ = "0.1.0"
