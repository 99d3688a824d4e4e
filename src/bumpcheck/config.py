"""Configuration management using Pydantic Settings.

Loads ``BUMPCHECK_*`` environment variables (and a ``.env`` file) and
provides defaults for checking a Maven project. Values not set through the
environment or constructor can also come from a YAML file.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def normalize_log_level(value: str) -> str:
    """Upper-case ``value`` and check it is a known logging level."""
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


class Config(BaseSettings):
    """bumpcheck configuration.

    Precedence, highest first: constructor arguments, ``BUMPCHECK_*``
    environment variables, the YAML config file, field defaults.

    The YAML file is ``CONFIG_FILE`` when set, otherwise the first of
    ``./.bumpcheck.yml`` and ``~/.bumpcheck/config.yml`` that exists.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUMPCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        validate_assignment=True,
    )

    # git
    GIT_EXECUTABLE: str = "git"
    """Name or path of the git binary."""

    PROCESS_TIMEOUT_SECONDS: Optional[float] = 60.0
    """Kill a git process after this many seconds. ``None`` or <= 0 waits forever."""

    # Descriptor
    DESCRIPTOR_FILE: str = "pom.xml"
    """Descriptor path, relative to the repository root."""

    VERSION_FIELD: str = "version"
    """Top-level descriptor element holding the version."""

    REVISION: str = "HEAD~0"
    """Revision the working copy is compared against (``HEAD~n``, commit id or tag)."""

    TEMP_FILE_NAME: str = ".bumpcheck-previous-pom.xml"
    """File name of the exported previous descriptor, inside the working directory."""

    # Logging
    LOG_LEVEL: str = "INFO"
    """Python logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    CONFIG_FILE: Optional[str] = None
    """Explicit YAML config file. Disables the default search locations."""

    def __init__(self, **data) -> None:
        super().__init__(**data)
        self._load_file_config()

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        return normalize_log_level(value)

    def _config_paths(self) -> list[Path]:
        if self.CONFIG_FILE:
            return [Path(self.CONFIG_FILE).expanduser()]
        return [
            Path.cwd() / ".bumpcheck.yml",
            Path.home() / ".bumpcheck" / "config.yml",
        ]

    def _load_file_config(self) -> None:
        """Apply YAML values to fields not set by arguments or environment.

        Values are validated on assignment; a badly typed value raises
        :class:`pydantic.ValidationError` like a bad constructor argument.
        """
        config_file_path = next((p for p in self._config_paths() if p.is_file()), None)
        if config_file_path is None:
            if self.CONFIG_FILE:
                logger.warning(f"Config file not found: {self.CONFIG_FILE}")
            return

        try:
            with open(config_file_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_file_path}: {e}")
            return

        if not isinstance(file_config, dict):
            logger.warning(f"Ignoring {config_file_path}: expected a mapping at top level")
            return

        applied = []
        for key, value in file_config.items():
            name = str(key).upper()
            if name == "CONFIG_FILE" or name not in type(self).model_fields:
                logger.warning(f"Unknown config key in {config_file_path}: {key}")
                continue
            if name in self.model_fields_set:
                continue
            setattr(self, name, value)
            applied.append(name)

        logger.info(f"Loaded config from {config_file_path}: {', '.join(applied) or 'no overrides'}")


def get_config(**overrides) -> Config:
    """Build a :class:`Config`, dropping ``None`` overrides so defaults apply."""
    return Config(**{k: v for k, v in overrides.items() if v is not None})
