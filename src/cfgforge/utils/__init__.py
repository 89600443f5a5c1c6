from cfgforge.utils.env import env_str, load_dotenv_files, parse_dotenv
from cfgforge.utils.logging import resolve_log_level, setup_logging
from cfgforge.utils.merge import merge_pair, merge_trees
from cfgforge.utils.paths import (
    BASE_DIR_MARKER,
    normalize_path,
    replace_markers,
    substitute_output_dirs,
    substitute_path,
    substitute_paths,
)

__all__ = [
    "env_str",
    "load_dotenv_files",
    "parse_dotenv",
    "resolve_log_level",
    "setup_logging",
    "merge_pair",
    "merge_trees",
    "BASE_DIR_MARKER",
    "normalize_path",
    "replace_markers",
    "substitute_output_dirs",
    "substitute_path",
    "substitute_paths",
]
