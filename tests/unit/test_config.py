"""Unit tests for configuration models and loader"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from wasifu.config import ConfigLoader, FlowSettings, WasifuConfig
from wasifu.config.loader import CONFIG_ENV_VAR
from wasifu.core.constants import FlowVariant


def test_defaults():
    config = WasifuConfig()

    flow = config.settings.flow
    assert flow.variant == FlowVariant.EXTENDED
    assert flow.county_choices is None
    assert flow.ward_choices == ["Sub 1", "ub"]
    assert flow.max_retries is None
    assert config.settings.persistence.backend == "memory"


def test_unsupported_version_rejected():
    with pytest.raises(ValueError, match="Unsupported config version"):
        WasifuConfig(version="9.9")


def test_empty_county_choices_rejected():
    with pytest.raises(ValidationError):
        FlowSettings(county_choices=[])


def test_max_retries_must_be_positive():
    with pytest.raises(ValidationError):
        FlowSettings(max_retries=0)


def test_load_file_resolves_relative_paths(tmp_path):
    """
    GIVEN a config file with relative paths
    WHEN it is loaded
    THEN paths resolve against the config directory
    """
    # Arrange
    path = tmp_path / "wasifu.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "version": "1.0",
                "settings": {
                    "flow": {"variant": "basic", "max_retries": 3},
                    "reference_data": {"path": "data/counties.json"},
                    "persistence": {"backend": "sqlite", "path": "state/wasifu.db"},
                    "logging": {"json_file": "logs/wasifu.log"},
                },
            }
        ),
        encoding="utf-8",
    )

    # Act
    config = ConfigLoader.load(path)

    # Assert
    settings = config.settings
    base = tmp_path.resolve()
    assert settings.flow.variant == FlowVariant.BASIC
    assert settings.flow.max_retries == 3
    assert Path(settings.reference_data.path) == base / "data" / "counties.json"
    assert Path(settings.persistence.path) == base / "state" / "wasifu.db"
    assert Path(settings.logging.json_file) == base / "logs" / "wasifu.log"


def test_load_directory(tmp_path):
    (tmp_path / "wasifu.yaml").write_text("version: '1.0'\n", encoding="utf-8")

    config = ConfigLoader.load(tmp_path)

    assert config.version == "1.0"


def test_load_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "wasifu.yaml"
    path.write_text("", encoding="utf-8")

    assert ConfigLoader.load(path) == WasifuConfig()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        ConfigLoader.load(tmp_path / "nope.yaml")


def test_empty_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="No config files found"):
        ConfigLoader.load(tmp_path)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "wasifu.yaml"
    path.write_text("settings: [unclosed", encoding="utf-8")

    with pytest.raises(yaml.YAMLError):
        ConfigLoader.load(path)


def test_from_env(tmp_path, monkeypatch):
    # Arrange
    path = tmp_path / "custom.yaml"
    path.write_text(yaml.safe_dump({"settings": {"flow": {"variant": "basic"}}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    # Act
    config = ConfigLoader.from_env()

    # Assert
    assert config.settings.flow.variant == FlowVariant.BASIC


def test_from_env_without_config_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)

    assert ConfigLoader.from_env() == WasifuConfig()
