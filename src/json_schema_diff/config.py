"""Configuration management for json-schema-diff.

Settings come from three places, highest priority first:
  1. Environment variables prefixed with JSON_SCHEMA_DIFF_
  2. The config file at $JSON_SCHEMA_DIFF_CONFIG_DIR/config.json
     (default ~/.json-schema-diff/config.json)
  3. Field defaults

Command-line flags are applied on top by the CLI.
"""

import json
import os
from pathlib import Path
from typing import Literal, Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from json_schema_diff.errors import ConfigError
from json_schema_diff.schema.model import DiffPolicy

CONFIG_DIR_ENV = "JSON_SCHEMA_DIFF_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class DiffConfig(BaseSettings):
    """Settings for json-schema-diff."""

    model_config = SettingsConfigDict(
        env_prefix="JSON_SCHEMA_DIFF_",
        extra="ignore",
    )

    log_level: LogLevel = Field(default="WARNING", description="Log level for stderr output")
    log_file: Optional[Path] = Field(default=None, description="Optional DEBUG log file")
    format_changes_breaking: bool = Field(
        default=False,
        description="Treat format additions, removals and changes as breaking",
    )
    pattern_changes_breaking: bool = Field(
        default=True,
        description="Treat pattern additions, removals and changes as breaking",
    )
    output_format: Literal["json", "table"] = Field(
        default="json", description="Output format for the diff command"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment overrides values loaded from the config file
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def policy(self) -> DiffPolicy:
        return DiffPolicy(
            format_breaking=self.format_changes_breaking,
            pattern_breaking=self.pattern_changes_breaking,
        )


class ConfigManager:
    """Locates and loads the json-schema-diff config file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        if config_dir is None:
            env_dir = os.getenv(CONFIG_DIR_ENV)
            config_dir = Path(env_dir) if env_dir else Path.home() / ".json-schema-diff"
        self.config_dir = config_dir
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self._config: DiffConfig | None = None

    @property
    def config(self) -> DiffConfig:
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> DiffConfig:
        """Load settings from the config file (if any) and the environment.

        Raises:
            ConfigError: If the config file exists but is not a JSON object.
        """
        file_values: dict = {}
        if self.config_file.exists():
            try:
                file_values = json.loads(self.config_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to read config file {self.config_file}: {e}") from e
            if not isinstance(file_values, dict):
                raise ConfigError(f"Config file {self.config_file} must contain a JSON object")
            logger.debug(f"Loaded config from {self.config_file}")

        try:
            return DiffConfig(**file_values)
        except ValueError as e:
            raise ConfigError(f"Invalid settings in {self.config_file}: {e}") from e

