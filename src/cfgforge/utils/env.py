"""Environment variable and dotenv helpers.

"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

ENV_PREFIX = "CFGFORGE_"

def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Env str.

    Args:
        name (str): Environment variable name.
        default (Optional[str]): Returned when the variable is unset or blank.

    Returns:
        Optional[str]: Stripped value of the variable, or ``default``.

    Side Effects / I/O:
        - Reads environment variables.

    Examples:
        >>> from cfgforge.utils.env import env_str
        >>> env_str("CFGFORGE_OUTPUT_DIR")

    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()

def parse_dotenv(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("\"'")
        if key:
            values[key] = value
    return values

def load_dotenv_files(project_root: Path, prefix: str = ENV_PREFIX) -> None:
    """Load ``prefix``-ed keys from ``project_root/.env`` into the environment.

    Variables already present in the environment win over the file.
    """
    _load_dotenv_file(project_root / ".env", prefix)

def _load_dotenv_file(path: Path, prefix: str) -> None:
    if not path.exists():
        return
    for key, value in parse_dotenv(path.read_text(encoding="utf-8")).items():
        if key.startswith(prefix) and key not in os.environ:
            os.environ[key] = value
