"""Pydantic configuration models for greenhouse simulation.

This module defines the configuration schema for greenhouse simulations
using Pydantic v2 models. Configuration can be loaded from YAML or JSON files.

The configuration hierarchy:
- SimulationConfig (top-level)
  - ClockConfig
  - LayoutConfig
  - DatasetConfig
  - OutputConfig
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from growhouse_sim.physics.constants import (
    DEFAULT_BASE_TICK_INTERVAL_MS,
    DEFAULT_START_DAY,
    MAX_SPEED,
)


class ClockConfig(BaseModel):
    """Simulated clock configuration."""

    model_config = ConfigDict(frozen=True)

    start_day: Annotated[int, Field(ge=0, description="Simulated start day")] = (
        DEFAULT_START_DAY
    )
    base_tick_interval_ms: Annotated[
        float,
        Field(gt=0, description="Real time per simulated minute at 1x speed"),
    ] = DEFAULT_BASE_TICK_INTERVAL_MS
    speed: Annotated[
        float, Field(gt=0, le=MAX_SPEED, description="Speed multiplier")
    ] = 1.0


class LayoutConfig(BaseModel):
    """Greenhouse layout configuration."""

    model_config = ConfigDict(frozen=True)

    greenhouse_count: Annotated[int, Field(ge=1, le=100)] = 4
    tables_per_greenhouse: Annotated[int, Field(ge=1, le=100)] = 8


class DatasetConfig(BaseModel):
    """Daily climate data source configuration."""

    source: Literal["file", "synthetic"] = Field(default="synthetic")
    file: str | None = Field(default=None, description="Path to climate CSV file")
    delimiter: str = Field(default=";", min_length=1, max_length=1)

    # Synthetic climate parameters
    year: int = 2024
    mean_temperature: float = 10.0
    annual_amplitude: Annotated[float, Field(ge=0)] = 9.0

    @model_validator(mode="after")
    def validate_file_source(self) -> DatasetConfig:
        """Ensure a file source names its file."""
        if self.source == "file" and not self.file:
            msg = "Dataset source 'file' requires a 'file' path"
            raise ValueError(msg)
        return self


class OutputConfig(BaseModel):
    """Output configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class SimulationConfig(BaseModel):
    """Top-level simulation configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="Greenhouse Simulation")
    duration_minutes: Annotated[int, Field(gt=0)] = 1440

    clock: ClockConfig = Field(default_factory=ClockConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> SimulationConfig:
    """Load simulation configuration from YAML or JSON file.

    Args:
        path: Path to configuration file.

    Returns:
        Validated SimulationConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If configuration is invalid.
    """
    path = Path(path)

    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return SimulationConfig.model_validate(data or {})


def save_config(config: SimulationConfig, path: str | Path) -> None:
    """Save simulation configuration to YAML or JSON file.

    Args:
        config: Configuration to save.
        path: Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with path.open("w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def validate_config(data: dict[str, Any]) -> SimulationConfig:
    """Validate configuration data without loading from file.

    Raises:
        ValueError: If configuration is invalid.
    """
    return SimulationConfig.model_validate(data)
