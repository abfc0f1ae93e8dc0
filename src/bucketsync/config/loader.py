"""Configuration loader for JSON/YAML files and environment variables."""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml
from pydantic import ValidationError

from .schema import SyncOptions
from ..exceptions import ConfigurationError
from ..utils.logging import LoggerMixin


_TRUE_VALUES = ("true", "1", "yes")


class ConfigLoader(LoggerMixin):
    """Loads and validates sync options from files, dicts and the environment."""

    def load_from_file(self, file_path: Union[str, Path]) -> SyncOptions:
        """Load sync options from a JSON or YAML file.

        Args:
            file_path: Path to configuration file

        Returns:
            Validated SyncOptions object

        Raises:
            ConfigurationError: If file cannot be loaded or validated
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}")

        self.logger.info("Loading configuration from file", file_path=str(file_path))

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if file_path.suffix.lower() in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif file_path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unsupported file format: {file_path.suffix}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML format: {e}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON format: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {file_path}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: Dict[str, Any]) -> SyncOptions:
        """Load sync options from a dictionary, applying environment overrides."""
        data = self._apply_env_overrides(data)

        try:
            options = SyncOptions(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid sync options: {e}")

        self.logger.info(
            "Configuration loaded",
            parallel=options.parallel,
            delete=options.delete,
            dry_run=options.dry_run,
            patterns=len(options.patterns)
        )

        return options

    def _apply_env_overrides(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration data.

        Environment variables use the format: BUCKETSYNC_<KEY>
        For example: BUCKETSYNC_PARALLEL, BUCKETSYNC_DRY_RUN
        """
        env_overrides: Dict[str, Any] = {}

        if os.getenv("BUCKETSYNC_PARALLEL"):
            try:
                env_overrides["parallel"] = int(os.getenv("BUCKETSYNC_PARALLEL"))
            except ValueError:
                self.logger.warning("Invalid BUCKETSYNC_PARALLEL value, ignoring")

        for key in ("delete", "dry_run", "guess_mime"):
            value = os.getenv(f"BUCKETSYNC_{key.upper()}")
            if value:
                env_overrides[key] = value.lower() in _TRUE_VALUES

        for key in ("acl", "content_type"):
            value = os.getenv(f"BUCKETSYNC_{key.upper()}")
            if value:
                env_overrides[key] = value

        if env_overrides:
            self.logger.info("Applied environment variable overrides", overrides=list(env_overrides.keys()))
            data = {**data, **env_overrides}

        return data


def load_options(config_file: Optional[str] = None) -> SyncOptions:
    """Load sync options from a file when given, otherwise from the environment.

    Raises:
        ConfigurationError: If the file or the environment defaults are invalid
    """
    config_file = config_file or os.getenv("BUCKETSYNC_CONFIG_FILE")
    if config_file:
        return ConfigLoader().load_from_file(config_file)
    try:
        return SyncOptions.from_settings()
    except ValueError as e:
        raise ConfigurationError(f"Invalid sync defaults in environment: {e}")
