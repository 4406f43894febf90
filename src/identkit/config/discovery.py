"""Config file discovery.

Walk-up finder, similar to how git finds .git/. In each directory an
``identkit.toml`` wins; otherwise a ``pyproject.toml`` counts only when it
carries a ``[tool.identkit]`` table. The IDENTKIT_CONFIG env var bypasses
the search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "identkit.toml"
CONFIG_ENV_VAR = "IDENTKIT_CONFIG"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = ("tool", "identkit")


def _identkit_table(data: dict[str, Any]) -> dict[str, Any] | None:
    table: Any = data
    for key in PYPROJECT_TABLE:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    return dict(table) if isinstance(table, dict) else None


def _has_identkit_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        # Someone else's broken pyproject is not our config.
        return False
    return _identkit_table(data) is not None


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest config file above *start* (default: cwd), or None.

    IDENTKIT_CONFIG, when set, is used as-is (None if the file is missing).
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_identkit_table(pyproject):
            return pyproject
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Read identkit settings from *path*.

    A ``pyproject.toml`` contributes its ``[tool.identkit]`` table (empty when
    absent); any other file is read whole. Raises ``tomllib.TOMLDecodeError``
    on invalid TOML.
    """
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        return _identkit_table(data) or {}
    return data
