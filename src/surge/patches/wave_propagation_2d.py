"""Two-dimensional wave propagation patch with dimensional splitting."""

import time

import jax.numpy as jnp
from jax import Array

from surge.core.constants import DEFAULT_CFL_2D
from surge.patches.base import WavePropagation
from surge.patches.boundary import ghost_outflow_2d
from surge.patches.cfl import cfl_time_step, max_wave_speed_2d
from surge.patches.sweep import dimensional_split_step
from surge.solvers.riemann import SolverKind


class WavePropagation2d(WavePropagation):
    """An nx × ny block of square cells framed by one layer of ghost cells.

    Arrays have shape (ny + 2, nx + 2), so the stride between rows is
    nx + 2 and interior cell (ix, iy) lives at [iy + 1, ix + 1]. A time
    step applies an x-sweep to every row followed by a y-sweep to every
    column, ghost rows and columns included.
    """

    def __init__(
        self,
        nx: int,
        ny: int,
        solver: SolverKind = SolverKind.FWAVE,
        cfl_factor: float = DEFAULT_CFL_2D,
        dtype=jnp.float64,
    ):
        if nx < 1 or ny < 1:
            raise ValueError(f"grid must have at least one cell per axis, got ({nx}, {ny})")
        self.nx = nx
        self.ny = ny
        super().__init__((ny + 2, nx + 2), solver, cfl_factor, dtype)

    @classmethod
    def from_arrays(
        cls,
        h: Array,
        hu: Array,
        hv: Array,
        b: Array,
        solver: SolverKind = SolverKind.FWAVE,
        cfl_factor: float = DEFAULT_CFL_2D,
        dtype=None,
    ) -> "WavePropagation2d":
        """Patch over ghost-inclusive (ny + 2, nx + 2) arrays, without any setup."""
        h = jnp.asarray(h)
        ny, nx = h.shape[0] - 2, h.shape[1] - 2
        patch = cls(
            nx,
            ny,
            solver=solver,
            cfl_factor=cfl_factor,
            dtype=dtype if dtype is not None else h.dtype,
        )
        patch.load_arrays(h=h, hu=hu, hv=hv, b=b)
        return patch

    @property
    def ndim(self) -> int:
        return 2

    @property
    def grid_shape(self) -> tuple[int, int]:
        return self.nx, self.ny

    @property
    def stride(self) -> int:
        return self.nx + 2

    def _index(self, ix: int, iy: int) -> tuple[int, ...]:
        return (iy + 1, ix + 1)

    def _interior(self, q: Array) -> Array:
        return q[1:-1, 1:-1]

    def cell_coordinates(self, scale_x: float, scale_y: float) -> tuple[Array, Array]:
        x = (jnp.arange(self.nx + 2, dtype=self.dtype) - 0.5) * scale_x
        y = (jnp.arange(self.ny + 2, dtype=self.dtype) - 0.5) * scale_y
        xx, yy = jnp.meshgrid(x, y)
        return xx, yy

    def set_ghost_outflow(self) -> None:
        """Copy the interior border into the ghost frame, corners included."""
        h, hu, hv, b = ghost_outflow_2d(
            self._arena.current_h,
            self._arena.current_hu,
            self._arena.current_hv,
            self._arena.b,
        )
        self._arena.replace_current(h=h, hu=hu, hv=hv, b=b)

    def time_step(self, scaling: float) -> None:
        """Advance one dimensionally split step with Δt/Δx = scaling."""
        started = time.perf_counter() if self._timing_enabled() else None

        h_new, hu_new, hv_new = dimensional_split_step(
            self._arena.current_h,
            self._arena.current_hu,
            self._arena.current_hv,
            self._arena.b,
            scaling,
            solver=self.solver,
        )
        self._arena.commit(h_new, hu_new, hv_new)

        if started is not None:
            self._log_step_time(started, h_new)

    def compute_max_timestep(self, cell_size_meters: float = 1.0) -> float:
        """Largest stable Δt for square cells, inf if no cell holds water."""
        max_speed = max_wave_speed_2d(
            self._arena.current_h,
            self._arena.current_hu,
            self._arena.current_hv,
        )
        return cfl_time_step(max_speed, cell_size_meters, self.cfl_factor)
