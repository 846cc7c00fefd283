"""Configuration and settings for the wave propagation system."""

from enum import Enum
from pathlib import Path
from typing import Self

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from surge.core.constants import (
    DEFAULT_CFL_1D,
    DEFAULT_CFL_2D,
    SHORE_CLIFF_HEIGHT,
    TSUNAMI_1D_DISPLACEMENT,
    TSUNAMI_1D_DISPLACEMENT_END,
    TSUNAMI_1D_DISPLACEMENT_START,
)
from surge.core.exceptions import ConfigurationError
from surge.core.types import Precision
from surge.solvers.riemann import SolverKind


class SetupKind(str, Enum):
    """Initial condition scenarios."""

    DAM_BREAK_1D = "dam_break_1d"
    DAM_BREAK_2D = "dam_break_2d"
    DISCONTINUITY_1D = "discontinuity_1d"
    SUBCRITICAL_FLOW_1D = "subcritical_flow_1d"
    SUPERCRITICAL_FLOW_1D = "supercritical_flow_1d"
    TSUNAMI_EVENT_1D = "tsunami_event_1d"
    TSUNAMI_EVENT_2D = "tsunami_event_2d"
    ARTIFICIAL_TSUNAMI_2D = "artificial_tsunami_2d"

    @property
    def is_one_dimensional(self) -> bool:
        return self.value.endswith("_1d")


class SolverSettings(BaseSettings):
    """Riemann solver and time step configuration."""

    model_config = SettingsConfigDict(env_prefix="SOLVER_")

    kind: SolverKind = SolverKind.FWAVE

    # Courant factor; None picks 0.5 in 1D and 0.45 in 2D
    cfl_factor: float | None = Field(default=None, gt=0.0, le=0.5)

    # Precision of every grid array in the run
    precision: Precision = Precision.FLOAT64

    def resolved_cfl_factor(self, one_dimensional: bool) -> float:
        """Courant factor to use for a grid of the given dimension."""
        if self.cfl_factor is not None:
            return self.cfl_factor
        return DEFAULT_CFL_1D if one_dimensional else DEFAULT_CFL_2D


class GridSettings(BaseSettings):
    """Cartesian grid configuration."""

    model_config = SettingsConfigDict(env_prefix="GRID_")

    # Interior cells per axis; ny == 1 runs the 1D engine
    nx: int = Field(default=100, ge=1)
    ny: int = Field(default=1, ge=1)

    # Edge length of a square cell (m)
    cell_size: float = Field(default=1.0, gt=0.0)

    @property
    def one_dimensional(self) -> bool:
        return self.ny == 1


class SetupSettings(BaseSettings):
    """Initial condition configuration."""

    model_config = SettingsConfigDict(env_prefix="SETUP_")

    kind: SetupKind = SetupKind.DAM_BREAK_1D

    # Dam break / discontinuity states (left = inner for the 2D dam)
    height_left: float = Field(default=10.0, ge=0.0)
    height_right: float = Field(default=5.0, ge=0.0)
    momentum_left: float = 0.0
    momentum_right: float = 0.0
    bathymetry_left: float = 0.0
    bathymetry_right: float = 0.0

    # Position of the discontinuity (m); None places it at the domain centre
    location: float | None = None

    # Circular dam (m); None centres it in the domain
    center_x: float | None = None
    center_y: float | None = None
    radius: float = Field(default=10.0, gt=0.0)

    # Tsunami event data
    bathymetry_file: Path | None = None
    displacement_file: Path | None = None
    shore_cliff_height: float = Field(default=SHORE_CLIFF_HEIGHT, gt=0.0)
    displacement: float = TSUNAMI_1D_DISPLACEMENT
    displacement_start: float = TSUNAMI_1D_DISPLACEMENT_START
    displacement_end: float = TSUNAMI_1D_DISPLACEMENT_END

    @model_validator(mode="after")
    def check_data_files(self) -> Self:
        """Tsunami events need their data files."""
        if self.kind in (SetupKind.TSUNAMI_EVENT_1D, SetupKind.TSUNAMI_EVENT_2D):
            if self.bathymetry_file is None:
                raise ValueError(f"setup '{self.kind.value}' requires bathymetry_file")
        if self.kind == SetupKind.TSUNAMI_EVENT_2D and self.displacement_file is None:
            raise ValueError("setup 'tsunami_event_2d' requires displacement_file")
        if self.displacement_end <= self.displacement_start:
            raise ValueError("displacement_end must be greater than displacement_start")
        return self


class StationSettings(BaseModel):
    """A fixed sampling location (m from the domain origin)."""

    name: str
    x: float = Field(ge=0.0)
    y: float = Field(default=0.0, ge=0.0)


class FrameFormat(str, Enum):
    """File format of output frames."""

    CSV = "csv"
    NETCDF = "netcdf"


class OutputSettings(BaseSettings):
    """Frame, station and checkpoint output configuration."""

    model_config = SettingsConfigDict(env_prefix="OUTPUT_")

    directory: Path = Path("output")
    frame_format: FrameFormat = FrameFormat.CSV

    # Frames spread evenly over the run; 0 disables frame output
    num_frames: int = Field(default=10, ge=0)

    # Write every n-th cell along each axis
    frame_stride: int = Field(default=1, ge=1)
    write_bathymetry: bool = True

    stations: list[StationSettings] = Field(default_factory=list)

    # Station sampling interval (simulated seconds)
    station_interval: float = Field(default=1.0, gt=0.0)

    # Checkpoint every n time steps; None disables periodic checkpoints
    checkpoint_interval_steps: int | None = Field(default=None, ge=1)
    checkpoint_path: Path | None = None


class SimulationSettings(BaseSettings):
    """Simulation loop configuration."""

    model_config = SettingsConfigDict(env_prefix="SIM_")

    # Hard cap on time steps; None runs until max_duration
    max_steps: int | None = Field(default=None, ge=1)

    # Simulated end time (seconds)
    max_duration: float = Field(default=20.0, gt=0.0)

    # Raise NumericalBreakdownError instead of stopping when no finite step exists
    strict: bool = False


class Settings(BaseSettings):
    """Master configuration aggregating all subsystems."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    solver: SolverSettings = Field(default_factory=SolverSettings)
    grid: GridSettings = Field(default_factory=GridSettings)
    setup: SetupSettings = Field(default_factory=SetupSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    # Debug logging
    debug: bool = False

    @model_validator(mode="after")
    def check_dimensions(self) -> Self:
        """1D setups run on a single row of cells."""
        if self.setup.kind.is_one_dimensional and not self.grid.one_dimensional:
            raise ValueError(
                f"setup '{self.setup.kind.value}' is one-dimensional but grid.ny = {self.grid.ny}"
            )
        domain_x = self.grid.nx * self.grid.cell_size
        domain_y = self.grid.ny * self.grid.cell_size
        for station in self.output.stations:
            if station.x >= domain_x or station.y >= domain_y:
                raise ValueError(f"station '{station.name}' lies outside the domain")
        return self

    @property
    def cfl_factor(self) -> float:
        return self.solver.resolved_cfl_factor(self.grid.one_dimensional)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Settings":
        """Load settings from a YAML file.

        Values in the file take precedence over environment variables.

        Args:
            path: YAML document with top-level sections matching the fields
                of this class (``solver``, ``grid``, ``setup``, ...).

        Raises:
            ConfigurationError: If the file is missing, unknown sections are
                present or any value fails validation.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {path}")

        unknown = sorted(set(raw) - set(cls.model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections in {path}: {', '.join(unknown)}")

        try:
            return cls(**raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {path}:\n{exc}") from exc


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration:\n{exc}") from exc
