# tests/unit/test_config.py: Unit tests for configuration loading and validation.

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from regionbuild.config import StrategyConfig, load_config
from regionbuild.util.errors import ConfigError


@pytest.fixture
def mock_config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Creates a mock XDG config directory structure and sets the environment variable."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    config_dir = tmp_path / "regionbuild"
    config_dir.mkdir()
    return config_dir


def test_load_valid_config(mock_config_dir: Path):
    """Tests that a valid configuration file is loaded and parsed correctly."""
    config_content = """
included_regions: |
  src/**
  docs/**/*.md
excluded_branch: "  main  "
fail_policy: open
cache:
  capacity: 16
  ttl_sec: 300
repo:
  path: "~/work/project"
  remote: origin
"""
    (mock_config_dir / "strategy.yaml").write_text(config_content)

    config = load_config()

    assert config.regions == ["src/**", "docs/**/*.md"]
    assert config.excluded_branch == "main"
    assert config.fail_policy == "open"
    assert config.fails_open is True
    assert config.cache.capacity == 16
    assert config.cache.ttl_sec == 300
    assert config.repo.path == Path(os.path.expanduser("~/work/project")).resolve()
    assert config.repo.remote == "origin"


def test_region_list_is_joined(tmp_path: Path):
    path = tmp_path / "strategy.yaml"
    path.write_text('included_regions:\n  - "src/**"\n  - " docs/** "\n')
    config = load_config(path)
    assert config.included_regions == 'src/**\n docs/** '
    assert config.regions == ["src/**", "docs/**"]


def test_default_values_are_applied(tmp_path: Path):
    """Tests that default values are correctly applied to the config."""
    path = tmp_path / "strategy.yaml"
    path.write_text("")

    config = load_config(path)

    assert config.regions == []
    assert config.excluded_branch == ""
    assert config.fail_policy == "closed"
    assert config.fails_open is False
    assert config.cache.capacity == 256
    assert config.cache.ttl_sec is None
    assert config.logging.level == "INFO"
    assert config.logging.json_format is True


def test_load_config_not_found(tmp_path: Path, monkeypatch):
    """Tests that a ConfigError is raised if the config file doesn't exist."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(ConfigError, match="Configuration file not found"):
        load_config()


def test_config_parse_error(tmp_path: Path):
    path = tmp_path / "strategy.yaml"
    path.write_text("included_regions: [unterminated\n")
    with pytest.raises(ConfigError, match="Error parsing YAML"):
        load_config(path)


@pytest.mark.parametrize("content", [
    "fail_policy: sometimes",
    "cache:\n  capacity: 0",
    "cache:\n  ttl_sec: -1",
])
def test_config_validation_error(tmp_path: Path, content):
    """Tests that a ConfigError is raised on an invalid configuration."""
    path = tmp_path / "strategy.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError, match="Configuration validation failed"):
        load_config(path)


def test_model_rejects_unknown_policy():
    with pytest.raises(ValidationError):
        StrategyConfig(fail_policy="maybe")
    assert StrategyConfig(excluded_branch=None).excluded_branch == ""
