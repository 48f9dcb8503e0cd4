"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CONTACTCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``contactctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The TOML path is handed to the source through a thread-local because
pydantic-settings builds sources inside the model constructor.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from contactctl.config.discovery import find_config
from contactctl.config.models import ContactsConfig, OutputConfig, StorageConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings sections from a ``contactctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is not None and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


_tls = threading.local()


class ContactSettings(BaseSettings):
    """Settings for one contactctl invocation, frozen after construction.

    Attributes:
        data_root: Directory holding ``.contactctl/`` (parent of the config
            file, or CWD when there is none).
        config_path: The config file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CONTACTCTL_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    strict: bool = False

    # --- TOML sections ---
    storage: StorageConfig = Field(default_factory=StorageConfig)
    contacts: ContactsConfig = Field(default_factory=ContactsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def strict_missing(self) -> bool:
        """Whether not-found and too-few-to-merge should be reported as errors."""
        return self.strict or self.contacts.strict_missing

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> ContactSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* wins over discovery. Without an explicit
        *data_root*, the config file's directory (or the CWD) is used.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(data_root)

        if data_root is None:
            data_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(data_root=data_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
