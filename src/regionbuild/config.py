# src/regionbuild/config.py: Pydantic models for configuration.
# This module defines the schema for the 'strategy.yaml' configuration file:
# the included regions, the excluded branch, the fail policy applied when a
# decision cannot be computed, the change-set cache bounds and the git
# repository the CLI reads history from.

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import parse_regions
from .util.errors import ConfigError
from .util.paths import expand_path, get_default_config_path


class CacheConfig(BaseModel):
    capacity: int = Field(256, gt=0)
    ttl_sec: Optional[float] = Field(None, gt=0)


class RepoConfig(BaseModel):
    path: Path = Path(".")
    remote: Optional[str] = None

    @field_validator("path", mode="before")
    @classmethod
    def _expand(cls, value):
        return expand_path(value)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_format: bool = Field(True, alias="json")


class StrategyConfig(BaseModel):
    """Root configuration model."""
    included_regions: str = ""
    excluded_branch: str = ""
    fail_policy: Literal["closed", "open"] = "closed"
    cache: CacheConfig = Field(default_factory=CacheConfig)
    repo: RepoConfig = Field(default_factory=RepoConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("included_regions", mode="before")
    @classmethod
    def _join_region_list(cls, value: Union[str, List[str], None]):
        # A YAML list is accepted as one region per item.
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(item) for item in value)
        return value

    @field_validator("excluded_branch", mode="before")
    @classmethod
    def _trim_branch(cls, value: Optional[str]):
        return (value or "").strip()

    @property
    def regions(self) -> List[str]:
        return parse_regions(self.included_regions)

    @property
    def fails_open(self) -> bool:
        return self.fail_policy == "open"


def load_config(path: Optional[Path] = None) -> StrategyConfig:
    """
    Load, parse, and validate the strategy configuration file.

    Args:
        path: The path to the configuration file. If None, uses the default path.

    Raises:
        ConfigError: If the file is not found, cannot be read, or fails validation.
    """
    config_path = Path(path) if path else get_default_config_path()
    if not config_path.is_file():
        raise ConfigError(
            f"Configuration file not found. Please create it at '{config_path}'."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration: {e}") from e

    try:
        return StrategyConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
