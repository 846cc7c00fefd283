"""Simulation orchestration and result handling."""

import json
import logging
import math
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from surge.core.config import FrameFormat, Settings, get_settings
from surge.core.exceptions import CheckpointError, NumericalBreakdownError
from surge.io.checkpoint import RunState, load_checkpoint, save_checkpoint
from surge.io.csv_io import write_frame
from surge.io.netcdf_io import append_time_frame
from surge.io.station import Station
from surge.patches.base import WavePropagation
from surge.patches.wave_propagation_1d import WavePropagation1d
from surge.patches.wave_propagation_2d import WavePropagation2d
from surge.setups.base import Setup
from surge.setups.checkpoint import CheckPointSetup
from surge.setups.factory import create_setup
from surge.solvers.riemann import SolverKind

logger = logging.getLogger(__name__)

TerminationReason = Literal["max_steps", "max_duration", "no_fluid"]


class SimulationResult(BaseModel):
    """Summary of a simulation run."""

    setup: str | None
    solver: str
    grid_shape: tuple[int, int]
    cell_size_meters: float
    cfl_factor: float

    n_steps: int
    simulation_time: float
    wall_time_seconds: float
    termination_reason: TerminationReason

    frames: list[str]
    station_files: list[str]
    checkpoint: str | None = None

    def to_dict(self) -> dict:
        """Export to dictionary for JSON serialization."""
        return self.model_dump()

    def save(self, path: Path) -> None:
        """Save results to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


@dataclass
class SimulationRunner:
    """Main simulation driver.

    Builds (or restores) a patch, then repeats CFL time step, outflow
    boundaries and wave propagation until a step or time limit is hit or
    the grid runs out of water.
    """

    settings: Settings = field(default_factory=get_settings)

    # Initialized lazily
    patch: WavePropagation | None = None
    run_state: RunState | None = None
    stations: list[Station] = field(default_factory=list)
    setup: Setup | None = None

    _frames: list[str] = field(default_factory=list, init=False)

    def _create_patch(self, solver: SolverKind, cfl_factor: float, dtype) -> WavePropagation:
        grid = self.settings.grid
        if grid.one_dimensional:
            return WavePropagation1d(grid.nx, solver=solver, cfl_factor=cfl_factor, dtype=dtype)
        return WavePropagation2d(grid.nx, grid.ny, solver=solver, cfl_factor=cfl_factor, dtype=dtype)

    def initialize(self, resume: Path | None = None, regrid: bool = False) -> None:
        """Create the patch from the configured setup or from a checkpoint.

        Args:
            resume: Checkpoint to continue from instead of the setup.
            regrid: Resample the checkpoint onto the configured grid when
                their sizes differ.
        """
        if resume is not None:
            self.patch, self.run_state, self.stations = load_checkpoint(resume)
            self.setup = None
            grid = self.settings.grid
            if regrid and self.patch.grid_shape != (grid.nx, grid.ny):
                self._regrid()
            return

        grid = self.settings.grid
        solver = self.settings.solver

        self.patch = self._create_patch(solver.kind, self.settings.cfl_factor, solver.precision.dtype)
        self.setup = create_setup(self.settings.setup, grid)
        self.patch.init_with_setup(self.setup, scale=grid.cell_size)

        self.run_state = RunState(
            cell_size_meters=grid.cell_size,
            cfl_factor=self.settings.cfl_factor,
            solver=solver.kind,
            setup=self.settings.setup.kind.value,
        )
        self.stations = [
            Station.at_position(s.name, s.x, s.y, grid.cell_size, self.settings.output.station_interval)
            for s in self.settings.output.stations
        ]

    def _regrid(self) -> None:
        """Resample the restored patch onto the configured grid size."""
        stored = self.patch
        state = self.run_state
        grid = self.settings.grid
        logger.info(
            "Resampling checkpoint grid %d x %d onto %d x %d cells", *stored.grid_shape, grid.nx, grid.ny
        )

        arrays = stored.raw_arrays()
        patch = self._create_patch(state.solver, state.cfl_factor, stored.dtype)
        patch.init_with_setup(
            CheckPointSetup(arrays["h"], arrays["hu"], arrays.get("hv"), arrays["b"]),
            scale=state.cell_size_meters,
        )

        for station in self.stations:
            if station.ix >= grid.nx or station.iy >= grid.ny:
                raise CheckpointError(
                    f"Station {station.name} at cell ({station.ix}, {station.iy}) lies outside the "
                    f"resampled {grid.nx} x {grid.ny} grid"
                )
        self.patch = patch

    def _expected_steps(self) -> int:
        """Steps the run is expected to take, for spreading frames evenly."""
        limit = self.settings.simulation.max_steps
        state = self.run_state

        dt = self.patch.compute_max_timestep(state.cell_size_meters)
        remaining = self.settings.simulation.max_duration - state.simulation_time
        estimate = None
        if math.isfinite(dt) and dt > 0.0:
            estimate = state.time_step_index + max(math.ceil(remaining / dt), 0)

        if limit is not None and estimate is not None:
            return max(min(limit, estimate), 1)
        return max(limit or estimate or 1, 1)

    def _frame_index(self, step: int, expected_steps: int) -> int:
        num_frames = self.settings.output.num_frames
        return min(step * (num_frames - 1) // max(expected_steps, 1), num_frames - 1)

    def _write_frame(self, index: int, step: int) -> Path:
        output = self.settings.output
        patch = self.patch
        state = self.run_state
        bathymetry = patch.bathymetry if output.write_bathymetry else None

        if output.frame_format == FrameFormat.NETCDF:
            displacement = None
            if index == 0 and self.setup is not None:
                x, y = patch.cell_coordinates(state.cell_size_meters, state.cell_size_meters)
                displacement = patch._interior(self.setup.displacement(x, y))
            return append_time_frame(
                output.directory / "solution.nc",
                index,
                state.simulation_time,
                state.cell_size_meters,
                height=patch.height,
                momentum_x=patch.momentum_x,
                momentum_y=patch.momentum_y,
                bathymetry=bathymetry,
                displacement=displacement,
                step=output.frame_stride,
            )

        return write_frame(
            output.directory / f"solution_{index}.csv",
            state.cell_size_meters,
            height=patch.height,
            momentum_x=patch.momentum_x,
            momentum_y=patch.momentum_y,
            bathymetry=bathymetry,
            stride=output.frame_stride,
        )

    def _write_frame_if_due(self, step: int, force: bool = False) -> None:
        state = self.run_state
        if self.settings.output.num_frames == 0:
            return
        index = self._frame_index(step, state.expected_steps)
        if index <= state.last_frame and not force:
            return
        if force:
            index = max(index, state.last_frame + 1)

        path = self._write_frame(index, step)
        state.last_frame = index
        if str(path) not in self._frames:
            self._frames.append(str(path))
        logger.info(
            "  simulation time / #time steps: %.4f / %d -> %s [%d]",
            state.simulation_time,
            step,
            path.name,
            index,
        )

    def _record_stations(self) -> None:
        t = self.run_state.simulation_time
        for station in self.stations:
            if station.needs_update(t):
                station.record_state(self.patch, t)

    def _checkpoint_path(self) -> Path:
        output = self.settings.output
        return output.checkpoint_path or output.directory / "checkpoint.npz"

    def _save_checkpoint(self) -> str:
        return str(save_checkpoint(self._checkpoint_path(), self.patch, self.run_state, self.stations))

    def run(self, resume: Path | None = None, regrid: bool = False) -> SimulationResult:
        """Run the simulation to completion.

        Args:
            resume: Optional checkpoint to continue from.
            regrid: Resample the checkpoint onto the configured grid size.

        Returns:
            Summary of the run.

        Raises:
            NumericalBreakdownError: If ``simulation.strict`` is set and no
                finite time step exists.
        """
        if self.patch is None or resume is not None:
            self.initialize(resume, regrid=regrid)

        settings = self.settings
        output = settings.output
        patch = self.patch
        state = self.run_state
        dx = state.cell_size_meters
        max_steps = settings.simulation.max_steps
        max_duration = settings.simulation.max_duration

        nx, ny = patch.grid_shape
        logger.info("#####################################################")
        logger.info("Solving the shallow water equations")
        logger.info("  setup:       %s", state.setup or "unknown")
        logger.info("  solver:      %s", state.solver.value)
        logger.info("  grid:        %d x %d cells of %.4g m", nx, ny, dx)
        logger.info("  precision:   %s", patch.dtype)
        logger.info("  cfl factor:  %.3f", state.cfl_factor)
        logger.info("  end time:    %.4g s", max_duration)
        if resume is not None:
            logger.info("  resumed:     step %d, t = %.4f s", state.time_step_index, state.simulation_time)
        logger.info("#####################################################")

        # A resumed run keeps its frame schedule until it is used up
        if state.expected_steps is None or state.time_step_index >= state.expected_steps:
            state.expected_steps = self._expected_steps()
        checkpoint = None
        wall_start = time.perf_counter()

        self._record_stations()
        self._write_frame_if_due(state.time_step_index)

        while True:
            if max_steps is not None and state.time_step_index >= max_steps:
                reason: TerminationReason = "max_steps"
                break
            if state.simulation_time >= max_duration:
                reason = "max_duration"
                break

            dt = patch.compute_max_timestep(dx)
            if not math.isfinite(dt) or dt <= 0.0:
                if settings.simulation.strict:
                    raise NumericalBreakdownError(dt)
                logger.warning(
                    "No finite time step at t = %.4f s (got %s); stopping", state.simulation_time, dt
                )
                reason = "no_fluid"
                break

            patch.set_ghost_outflow()
            patch.time_step(dt / dx)

            state.simulation_time += dt
            state.time_step_index += 1

            self._record_stations()
            self._write_frame_if_due(state.time_step_index)

            interval = output.checkpoint_interval_steps
            if interval is not None and state.time_step_index % interval == 0:
                checkpoint = self._save_checkpoint()

        logger.info("Finished after %d steps (%s)", state.time_step_index, reason)
        if state.last_frame < output.num_frames - 1:
            self._write_frame_if_due(state.time_step_index, force=True)

        station_files = [str(station.write(output.directory)) for station in self.stations]
        if output.checkpoint_interval_steps is not None or output.checkpoint_path is not None:
            checkpoint = self._save_checkpoint()

        return SimulationResult(
            setup=state.setup,
            solver=state.solver.value,
            grid_shape=(nx, ny),
            cell_size_meters=dx,
            cfl_factor=state.cfl_factor,
            n_steps=state.time_step_index,
            simulation_time=state.simulation_time,
            wall_time_seconds=time.perf_counter() - wall_start,
            termination_reason=reason,
            frames=list(self._frames),
            station_files=station_files,
            checkpoint=checkpoint,
        )
