from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from cfgforge.config.defaults import DOTENV_UNIT, SPECIAL_UNITS, is_system_unit
from cfgforge.io.artifact import write_artifact
from cfgforge.io.readers import read_fragment
from cfgforge.utils.merge import merge_trees
from cfgforge.utils.paths import substitute_output_dirs

if TYPE_CHECKING:
    from cfgforge.pipeline.builder import Builder

LOGGER = logging.getLogger("cfgforge.pipeline")

CREATED = "created"
LOADED = "loaded"
BUILT = "built"
WRITTEN = "written"


class ConfigUnit:
    """One named output configuration: its fragments, merged value and artifact.

    Moves through ``created -> loaded -> built -> written``. ``build`` can be
    re-run from the loaded fragments and ``write`` is idempotent.
    """

    def __init__(self, builder: "Builder", name: str) -> None:
        self.builder = builder
        self.name = name
        self.sources: List[Any] = []
        self.values: Any = {}
        self.state = CREATED
        self.changed: Optional[bool] = None

    def clone(self, builder: "Builder") -> "ConfigUnit":
        unit = ConfigUnit(builder, self.name)
        unit.sources = list(self.sources)
        unit.values = self.values
        unit.state = self.state
        return unit

    @property
    def is_special(self) -> bool:
        return self.name in SPECIAL_UNITS

    @property
    def receives_context(self) -> bool:
        return not (self.is_special or self.name == DOTENV_UNIT or is_system_unit(self.name))

    @property
    def is_built(self) -> bool:
        return self.state in {BUILT, WRITTEN}

    def get_output_path(self) -> Path:
        return self.builder.get_output_path(self.name)

    def load(self, paths: Iterable[str] = ()) -> "ConfigUnit":
        context = self.builder.reader_context()
        sources = []
        for path in paths:
            fragment = read_fragment(path, context=context, reporter=self.builder.reporter)
            if fragment:
                sources.append(fragment)
        self.sources = sources
        self.state = LOADED
        return self

    def build(self) -> "ConfigUnit":
        merged = merge_trees(*self.sources)
        extra = self.builder.context_fragments() if self.receives_context else []
        if extra and not isinstance(merged, Mapping):
            # a list root has no keys to hold the addition or special values
            LOGGER.debug(f"[unit] {self.name}: list root, context not merged")
            extra = []
        self.values = substitute_output_dirs(merge_trees(merged, *extra), self.builder.base_dir)
        self.state = BUILT
        LOGGER.debug(f"[unit] {self.name}: merged {len(self.sources)} fragment(s) + {len(extra)} context")
        return self

    def write(self) -> "ConfigUnit":
        self.changed = write_artifact(
            self.get_output_path(),
            self.values,
            self.builder.base_dir,
            self.builder.artifact_options(self.name),
        )
        self.state = WRITTEN
        return self
