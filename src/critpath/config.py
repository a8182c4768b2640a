"""Unified configuration loader.

A single YAML file (critpath_config.yaml) holds the engine settings and the
options for critical path summaries.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from . import context
from .engine import EngineConfig
from .exceptions import ParseError

CONFIG_FILE_NAME = "critpath_config.yaml"


class SummarySort(str, Enum):
    """Ordering of tasks in a critical path summary."""

    EARLIEST_START = "earliest_start"
    ID = "id"
    TITLE = "title"


class SummaryConfig(BaseModel):
    """Configuration for critical path summaries."""

    sort_by: SummarySort = SummarySort.EARLIEST_START
    # More dependencies than this marks a task as high risk
    risk_dependency_threshold: int = Field(default=2, ge=0)


class UnifiedConfig(BaseModel):
    """Unified configuration for the engine and its reports."""

    engine: EngineConfig = Field(default_factory=EngineConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from a YAML file.

    An empty file yields the default configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ParseError: If the file is not valid YAML or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse config {config_path}: {e}") from e

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ParseError(f"Config {config_path} must contain a dictionary at the root level")

    try:
        return UnifiedConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"Invalid config {config_path}: {e}") from e


def discover_config(
    snapshot_path: Path | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig:
    """Discover configuration from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Snapshot directory / critpath_config.yaml
    4. Current directory / critpath_config.yaml

    Falls back to the default configuration if nothing is found.
    """
    if config_path and config_path.exists():
        return load_unified_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_unified_config(ctx_config)

    if snapshot_path is not None:
        dir_config = Path(snapshot_path).parent / CONFIG_FILE_NAME
        if dir_config.exists():
            return load_unified_config(dir_config)

    cwd_config = Path(CONFIG_FILE_NAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return UnifiedConfig()
