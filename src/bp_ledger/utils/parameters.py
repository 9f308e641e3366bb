"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

import hashlib
from pathlib import Path

import pytz
import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bp_ledger.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """Durable ledger storage configuration."""

    data_dir: str = "data"
    storage_key: str = Field(default="bp_entries", pattern=r"^[A-Za-z0-9_.-]+$")


class ProcessingConfig(BaseModel):
    """Reading processing configuration."""

    timezone: str = "Europe/Berlin"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value


class RecordIDConfig(BaseModel):
    """Reading ID generation configuration."""

    algorithm: str = "sha256"
    length: int = Field(default=16, ge=8, le=64)

    @field_validator("algorithm")
    @classmethod
    def _fixed_length_digest(cls, value: str) -> str:
        # shake digests need an explicit length and are not usable here
        if value not in hashlib.algorithms_available or value.startswith("shake"):
            raise ValueError(f"Unsupported hash algorithm: {value}")
        return value


class OutputConfig(BaseModel):
    """Output configuration."""

    dir: str = "output"
    export_file_template: str = "blutdruck_daten_{date}.json"
    protocol_csv: str = "blutdruck_protokoll.csv"
    indent: int = 2


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    record_id: RecordIDConfig = Field(default_factory=RecordIDConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="BPL_", case_sensitive=False)


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            if not isinstance(config_dict, dict):
                raise ConfigurationError(
                    f"Configuration root must be a mapping: {self.config_path}"
                )

            self.config = AppConfig(**config_dict)

        except ConfigurationError:
            raise
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get ledger storage configuration."""
        return self.config.storage

    def get_processing_config(self) -> ProcessingConfig:
        """Get reading processing configuration."""
        return self.config.processing

    def get_record_id_config(self) -> RecordIDConfig:
        """Get reading ID generation configuration."""
        return self.config.record_id

    def get_output_config(self) -> OutputConfig:
        """Get output configuration."""
        return self.config.output

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging
