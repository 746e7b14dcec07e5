"""Spatial generator configuration.

Typed access to the project-level ``.spatial.yml`` file. The document is
validated with Pydantic v2 models and exposed through :class:`ConfigStore`,
which is constructed once per invocation and passed to the flag resolver
and the generator engine.

Shape of the file::

    generators:
      defaults:
        logging: true
      overrides:
        make:query:
          tracing: true
    project:
      namespace: App
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from spatialgen.errors import ConfigParseError
from spatialgen.utils import print_warning

CONFIG_FILENAME = ".spatial.yml"
ROOT_ENV_VAR = "SPATIAL_ROOT"


class GeneratorSettings(BaseModel):
    """The ``generators`` section: global defaults plus per-command overrides."""

    model_config = ConfigDict(extra="ignore")

    defaults: dict[str, Any] = Field(default_factory=dict)
    overrides: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("defaults", mode="before")
    @classmethod
    def _empty_defaults(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("overrides", mode="before")
    @classmethod
    def _empty_overrides(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            # ``make:query:`` with no body parses as None.
            return {name: ({} if body is None else body) for name, body in value.items()}
        return value


class ProjectSettings(BaseModel):
    """The optional ``project`` section (namespace, paths, ...).

    Unknown keys are kept so callers can read project-specific settings
    without a schema change.
    """

    model_config = ConfigDict(extra="allow")

    namespace: str | None = None
    paths: dict[str, str] = Field(default_factory=dict)


class SpatialConfig(BaseModel):
    """The whole configuration document."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    generators: GeneratorSettings = Field(default_factory=GeneratorSettings)
    project: ProjectSettings = Field(default_factory=ProjectSettings)

    @classmethod
    def parse_text(cls, text: str) -> "SpatialConfig":
        """Parse YAML text into a validated document.

        Raises:
            ConfigParseError: If the YAML is malformed or has the wrong shape.
        """
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigParseError(f"Invalid {CONFIG_FILENAME} file: {exc}") from exc

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigParseError(
                f"Invalid {CONFIG_FILENAME} file: expected a mapping at the top level"
            )

        # YAML ``generators:`` with no body parses as None.
        cleaned = {key: value for key, value in raw.items() if value is not None}
        try:
            return cls.model_validate(cleaned)
        except ValidationError as exc:
            raise ConfigParseError(f"Invalid {CONFIG_FILENAME} file: {exc}") from exc


def resolve_project_root(root: str | Path | None = None) -> Path:
    """Pick the project root: explicit argument, ``SPATIAL_ROOT``, or the cwd."""
    if root is not None:
        return Path(root)
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)
    return Path.cwd()


class ConfigStore:
    """Loads ``.spatial.yml`` once and answers generator-default queries.

    A missing file yields an empty document silently; an unreadable or
    invalid file prints a warning and yields an empty document. Neither case
    ever raises past this class.
    """

    def __init__(self, project_root: str | Path) -> None:
        self.project_root = Path(project_root)
        self._document: SpatialConfig | None = None

    @property
    def config_path(self) -> Path:
        """Path of the configuration file for this project."""
        return self.project_root / CONFIG_FILENAME

    def exists(self) -> bool:
        """Return ``True`` if the project has a configuration file."""
        return self.config_path.is_file()

    def load(self) -> SpatialConfig:
        """Return the configuration document, reading the file on first use."""
        if self._document is not None:
            return self._document

        if not self.exists():
            self._document = SpatialConfig()
            return self._document

        try:
            try:
                text = self.config_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise ConfigParseError(f"Could not read {CONFIG_FILENAME}: {exc}") from exc
            self._document = SpatialConfig.parse_text(text)
        except ConfigParseError as exc:
            print_warning(f"Warning: {exc.message}")
            self._document = SpatialConfig()

        return self._document

    def get_generator_defaults(self, command_id: str) -> dict[str, Any]:
        """Global defaults merged with the overrides for *command_id*.

        Override keys win over default keys of the same name. The returned
        dict is a fresh copy on every call.
        """
        generators = self.load().generators
        merged = dict(generators.defaults)
        merged.update(generators.overrides.get(command_id, {}))
        return merged

    def get_project_config(self) -> dict[str, Any]:
        """The ``project`` section as a plain dict."""
        return self.load().project.model_dump()

    def reset(self) -> None:
        """Forget the cached document so the next ``load`` re-reads the file."""
        self._document = None
