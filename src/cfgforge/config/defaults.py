"""Default build manifest and well-known unit names for cfgforge.

"""

from __future__ import annotations

from typing import Any, Dict

DOTENV_UNIT = "dotenv"
DEFINES_UNIT = "defines"
PARAMS_UNIT = "params"

# merged values of these units are injected into every ordinary unit
SPECIAL_UNITS = (DEFINES_UNIT, PARAMS_UNIT)
# always built first, in this order
AUXILIARY_UNITS = (DOTENV_UNIT, DEFINES_UNIT, PARAMS_UNIT)

SYSTEM_PREFIX = "__"
FILES_UNIT = "__files"
ADDITION_UNIT = "__addition"


def is_system_unit(name: str) -> bool:
    return name.startswith(SYSTEM_PREFIX)


DEFAULT_MANIFEST: Dict[str, Any] = {
    "base_dir": "",
    "output_dir": "config/assembled",
    "files": {},
    "addition": {},
    "logging": {
        "dir": ".cfgforge/logs",
        "level": "INFO",
    },
}
