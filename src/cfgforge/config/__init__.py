from cfgforge.config.defaults import (
    ADDITION_UNIT,
    AUXILIARY_UNITS,
    DEFAULT_MANIFEST,
    DEFINES_UNIT,
    DOTENV_UNIT,
    FILES_UNIT,
    PARAMS_UNIT,
    SPECIAL_UNITS,
    is_system_unit,
)
from cfgforge.config.loader import (
    load_config,
    resolve_addition,
    resolve_base_dir,
    resolve_files,
    resolve_logging_level,
    resolve_logs_dir,
    resolve_output_dir,
)

__all__ = [
    "ADDITION_UNIT",
    "AUXILIARY_UNITS",
    "DEFAULT_MANIFEST",
    "DEFINES_UNIT",
    "DOTENV_UNIT",
    "FILES_UNIT",
    "PARAMS_UNIT",
    "SPECIAL_UNITS",
    "is_system_unit",
    "load_config",
    "resolve_addition",
    "resolve_base_dir",
    "resolve_files",
    "resolve_logging_level",
    "resolve_logs_dir",
    "resolve_output_dir",
]
