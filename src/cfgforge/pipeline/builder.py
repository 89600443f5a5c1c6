"""Run-wide assembly of configuration units.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from cfgforge.config.defaults import (
    ADDITION_UNIT,
    AUXILIARY_UNITS,
    DEFINES_UNIT,
    DOTENV_UNIT,
    FILES_UNIT,
    PARAMS_UNIT,
    SPECIAL_UNITS,
)
from cfgforge.errors import CfgforgeError
from cfgforge.io.artifact import ARTIFACT_SUFFIX, ArtifactOptions, load_artifact, run_artifact
from cfgforge.pipeline.unit import ConfigUnit

LOGGER = logging.getLogger("cfgforge.pipeline")

Reporter = Callable[[str], None]
PathLike = Union[str, Path]


@dataclass
class BuildReport:
    written: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class Builder:
    """Shared state of one assembly run.

    Holds the output and base directories, the ``addition`` merged into every
    ordinary unit and the units built so far. Special units (``defines``,
    ``params``) have to be built before the units that receive their values.
    """

    def __init__(
        self,
        output_dir: PathLike,
        base_dir: PathLike,
        files: Optional[Mapping[str, Sequence[str]]] = None,
        addition: Optional[Dict[str, Any]] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.output_dir = Path(output_dir).expanduser().resolve()
        self.base_dir = Path(base_dir).expanduser().resolve()
        self.files: Dict[str, List[str]] = {name: list(paths) for name, paths in (files or {}).items()}
        self.addition: Dict[str, Any] = dict(addition or {})
        self.reporter = reporter
        self.units: Dict[str, ConfigUnit] = {}
        self.failed: Dict[str, str] = {}

    def get_output_path(self, name: str) -> Path:
        return self.output_dir / f"{name}{ARTIFACT_SUFFIX}"

    def get_unit(self, name: str) -> ConfigUnit:
        try:
            return self.units[name]
        except KeyError:
            raise CfgforgeError(f"Unknown config unit '{name}'") from None

    def reader_context(self) -> Dict[str, Any]:
        """Values of the built special units, handed to fragment readers."""
        return {
            name: self.units[name].values
            for name in SPECIAL_UNITS
            if name in self.units and self.units[name].is_built
        }

    def context_fragments(self) -> List[Any]:
        """Trees appended after an ordinary unit's own fragments, lowest precedence first."""
        return [self.addition] + [{name: values} for name, values in self.reader_context().items()]

    def artifact_options(self, name: str) -> ArtifactOptions:
        """Preambles for ``name``, without the siblings whose build failed in this run."""
        options = ArtifactOptions.for_unit(name)
        return replace(
            options,
            with_env=options.with_env and DOTENV_UNIT not in self.failed,
            with_defines=options.with_defines and DEFINES_UNIT not in self.failed,
            with_params=options.with_params and PARAMS_UNIT not in self.failed,
        )

    def ordered_units(self, files: Mapping[str, Sequence[str]]) -> List[Tuple[str, List[str]]]:
        ordered = [(name, list(files.get(name, []))) for name in AUXILIARY_UNITS]
        ordered.extend((name, list(paths)) for name, paths in files.items() if name not in AUXILIARY_UNITS)
        return ordered

    def build_unit(self, name: str, paths: Sequence[str], write: bool = True) -> ConfigUnit:
        unit = ConfigUnit(self, name).load(paths).build()
        self.units[name] = unit
        self.failed.pop(name, None)
        if write:
            unit.write()
        return unit

    def build_units(
        self,
        files: Optional[Mapping[str, Sequence[str]]] = None,
        write: bool = True,
    ) -> BuildReport:
        """Load, merge and write every unit of ``files`` (defaults to ``self.files``).

        Args:
            files (Optional[Mapping[str, Sequence[str]]]): Unit name to fragment locations.
            write (bool): Emit artifacts; ``False`` only builds values in memory.

        Returns:
            BuildReport: Names of written and unchanged units plus failures.

        Side Effects / I/O:
            - Reads fragment files and writes one artifact per unit.

        Preconditions / Invariants:
            - ``dotenv``, ``defines`` and ``params`` are always built, first and in
              that order, so every artifact's sibling requires resolve.
            - A failing unit does not stop the remaining ones.
            - Artifacts written after a failed auxiliary unit omit its preamble.

        """
        if files is None:
            files = self.files
        report = BuildReport()
        for name, paths in self.ordered_units(files):
            try:
                unit = self.build_unit(name, paths, write=write)
            except CfgforgeError as err:
                LOGGER.error(f"[build] {name}: {err}")
                report.failed[name] = self.failed[name] = str(err)
                if name in AUXILIARY_UNITS:
                    LOGGER.warning(f"[build] Later artifacts are written without the {name} preamble")
                continue
            if unit.changed:
                report.written.append(name)
            elif write:
                report.unchanged.append(name)
        LOGGER.info(
            f"[build] {len(report.written)} written, {len(report.unchanged)} unchanged, "
            f"{len(report.failed)} failed in {self.output_dir}"
        )
        return report

    def save_files(self) -> None:
        """Persist the fragment map and the addition next to the artifacts."""
        for name, data in ((FILES_UNIT, self.files), (ADDITION_UNIT, self.addition)):
            unit = ConfigUnit(self, name)
            unit.sources = [data] if data else []
            unit.build().write()

    def load_files(self) -> None:
        self.files = self._load_saved(FILES_UNIT)
        self.addition = self._load_saved(ADDITION_UNIT)

    def _load_saved(self, name: str) -> Dict[str, Any]:
        path = self.get_output_path(name)
        if not path.is_file():
            return {}
        data = load_artifact(path)
        return dict(data) if isinstance(data, Mapping) else {}

    @classmethod
    def from_saved(cls, output_dir: PathLike, reporter: Optional[Reporter] = None) -> "Builder":
        """Recreate a builder from the ``__files`` artifact of a previous run.

        The base directory is the one the artifact computes for its own location.
        """
        output_dir = Path(output_dir).resolve()
        path = output_dir / f"{FILES_UNIT}{ARTIFACT_SUFFIX}"
        if not path.is_file():
            raise CfgforgeError(f"No saved build found: {path}")
        base_dir = run_artifact(path)["base_dir"]
        builder = cls(output_dir, base_dir, reporter=reporter)
        builder.load_files()
        return builder
