"""Config loader for YAML configuration files."""

import os
from pathlib import Path
from typing import Any

import yaml

from wasifu.config.models import WasifuConfig

CONFIG_ENV_VAR = "WASIFU_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "wasifu.yaml"


class ConfigLoader:
    """Load WasifuConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> WasifuConfig:
        """Load configuration from YAML file.

        Relative file paths inside the config resolve against the config
        file's directory.

        Args:
            path: Path to a config directory or wasifu.yaml file

        Returns:
            Parsed WasifuConfig instance
        """
        config_path = Path(path)

        if config_path.is_dir():
            yaml_file = config_path / DEFAULT_CONFIG_FILE
            if not yaml_file.exists():
                yaml_file = config_path / "config.yaml"
            if not yaml_file.exists():
                raise FileNotFoundError(f"No config files found in {config_path}")
        else:
            yaml_file = config_path
            if not yaml_file.exists():
                raise FileNotFoundError(f"Config file not found: {yaml_file}")

        with open(yaml_file, encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        config = WasifuConfig.model_validate(data)
        return _resolve_paths(config, yaml_file.parent.resolve())

    @staticmethod
    def from_env() -> WasifuConfig:
        """Load from $WASIFU_CONFIG_PATH, ./wasifu.yaml, or defaults."""
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if not config_path and os.path.exists(DEFAULT_CONFIG_FILE):
            config_path = DEFAULT_CONFIG_FILE

        if not config_path:
            return WasifuConfig()
        return ConfigLoader.load(config_path)


def _resolve_paths(config: WasifuConfig, base: Path) -> WasifuConfig:
    settings = config.settings

    data_path = settings.reference_data.path
    if data_path and not Path(data_path).is_absolute():
        settings.reference_data.path = str(base / data_path)

    persistence = settings.persistence
    if persistence.backend == "sqlite" and persistence.path != ":memory:":
        if not Path(persistence.path).is_absolute():
            persistence.path = str(base / persistence.path)

    log_file = settings.logging.json_file
    if log_file and not Path(log_file).is_absolute():
        settings.logging.json_file = str(base / log_file)

    return config
