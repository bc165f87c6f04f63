"""Config file discovery.

Walk-up finder locates the nearest ``pyproject.toml``, similar to how git
finds .git/. The ``REFLECTKIT_CONFIG`` env var points at an explicit file.
Settings live in its ``[tool.reflectkit]`` table.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from reflectkit.errors import InvalidArgumentError

CONFIG_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "REFLECTKIT_CONFIG"
TOOL_TABLE = "reflectkit"


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for pyproject.toml.

    Returns the path to the file, or None if not found.
    Checks REFLECTKIT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_tool_table(path: Path | None) -> dict[str, Any]:
    """Return the ``[tool.reflectkit]`` table of *path*, or ``{}``.

    Raises:
        InvalidArgumentError: the file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    raw = path.read_text(encoding="utf-8")
    try:
        data: dict[str, Any] = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise InvalidArgumentError(msg) from exc
    return dict(data.get("tool", {}).get(TOOL_TABLE, {}))
