"""Unified settings: init kwargs, env vars, and pyproject.toml in one object.

Priority chain (highest to lowest):
  1. Init kwargs: passed by the embedding application
  2. Env vars: ``REFLECTKIT_*`` prefix
  3. TOML table: ``[tool.reflectkit]`` of the discovered ``pyproject.toml``
  4. Code defaults

Settings only affect logging; the reflective operations take no
configuration.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from reflectkit.config.discovery import find_pyproject, load_tool_table
from reflectkit.errors import InvalidArgumentError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the ``[tool.reflectkit]`` table of a pyproject.toml."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = load_tool_table(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full table for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class ReflectSettings(BaseSettings):
    """Settings for reflectkit's logging.

    Attributes:
        project_root: Directory discovery started from (parent of the
            discovered ``pyproject.toml``, or CWD if none was found).
        config_path: The pyproject.toml that was read, if any.
        verbose: Emit reflectkit DEBUG records (find-style failures).
        log_json: Render log records as JSON lines.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "REFLECTKIT_",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        project_root: Path | None = None,
        **overrides: Any,
    ) -> ReflectSettings:
        """Discover ``pyproject.toml`` and build settings.

        An explicit *config_path* wins over walk-up discovery from
        *project_root*. *overrides* take priority over every other source.

        Raises:
            InvalidArgumentError: the TOML is malformed, or a source supplies
                an unknown key or a value of the wrong type.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_pyproject(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        except ValidationError as exc:
            msg = f"Invalid reflectkit settings (config: {toml_path}): {exc}"
            raise InvalidArgumentError(msg) from exc
        finally:
            _tls.toml_path = None
