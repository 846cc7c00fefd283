"""One-dimensional wave propagation patch."""

import time

import jax.numpy as jnp
from jax import Array

from surge.core.constants import DEFAULT_CFL_1D
from surge.patches.base import WavePropagation
from surge.patches.boundary import ghost_outflow_1d
from surge.patches.cfl import cfl_time_step, max_wave_speed_1d
from surge.patches.sweep import sweep_interfaces
from surge.solvers.riemann import SolverKind


class WavePropagation1d(WavePropagation):
    """A row of n cells with one ghost cell at either end.

    Arrays have shape (n + 2,); interior cell ix lives at index ix + 1 and
    interface i separates array cells i and i + 1 (i = 0..n).
    """

    def __init__(
        self,
        n_cells: int,
        solver: SolverKind = SolverKind.FWAVE,
        cfl_factor: float = DEFAULT_CFL_1D,
        dtype=jnp.float64,
    ):
        if n_cells < 1:
            raise ValueError(f"n_cells must be positive, got {n_cells}")
        self.n_cells = n_cells
        super().__init__((n_cells + 2,), solver, cfl_factor, dtype)

    @classmethod
    def from_arrays(
        cls,
        h: Array,
        hu: Array,
        b: Array,
        solver: SolverKind = SolverKind.FWAVE,
        cfl_factor: float = DEFAULT_CFL_1D,
        dtype=None,
    ) -> "WavePropagation1d":
        """Patch over ghost-inclusive (n + 2,) arrays, without any setup."""
        h = jnp.asarray(h)
        patch = cls(
            h.shape[0] - 2,
            solver=solver,
            cfl_factor=cfl_factor,
            dtype=dtype if dtype is not None else h.dtype,
        )
        patch.load_arrays(h=h, hu=hu, b=b)
        return patch

    @property
    def ndim(self) -> int:
        return 1

    @property
    def grid_shape(self) -> tuple[int, int]:
        return self.n_cells, 1

    @property
    def stride(self) -> int:
        return self.n_cells + 2

    def _index(self, ix: int, iy: int = 0) -> tuple[int, ...]:
        return (ix + 1,)

    def _interior(self, q: Array) -> Array:
        return q[1:-1]

    def cell_coordinates(self, scale_x: float, scale_y: float = 1.0) -> tuple[Array, Array]:
        x = (jnp.arange(self.n_cells + 2, dtype=self.dtype) - 0.5) * scale_x
        return x, jnp.zeros_like(x)

    def set_ghost_outflow(self) -> None:
        """Copy the outermost interior cells into the ghost cells."""
        h, hu, b = ghost_outflow_1d(self._arena.current_h, self._arena.current_hu, self._arena.b)
        self._arena.replace_current(h=h, hu=hu, b=b)

    def _interface_mask(self, update_radius: int) -> Array:
        middle = self.n_cells // 2 + 1
        start = max(middle - update_radius, 0)
        end = min(middle + update_radius, self.n_cells + 1)
        index = jnp.arange(self.n_cells + 1)
        return (index >= start) & (index < end)

    def time_step(self, scaling: float, update_radius: int | None = None) -> None:
        """Advance one step.

        Args:
            scaling: Δt/Δx
            update_radius: If given, only interfaces within this many
                interfaces of the domain centre are evaluated; cells out of
                reach keep their values.
        """
        mask = None if update_radius is None else self._interface_mask(update_radius)
        started = time.perf_counter() if self._timing_enabled() else None

        h_new, hu_new = sweep_interfaces(
            self._arena.current_h,
            self._arena.current_hu,
            self._arena.b,
            scaling,
            solver=self.solver,
            interface_mask=mask,
        )
        self._arena.commit(h_new, hu_new)

        if started is not None:
            self._log_step_time(started, h_new)

    def compute_max_timestep(self, cell_size_meters: float = 1.0, update_radius: int | None = None) -> float:
        """Largest stable Δt, inf if no cell holds water.

        With ``update_radius`` only the interior cells around the domain
        centre are considered.
        """
        cell_mask = None
        if update_radius is not None:
            middle = self.n_cells // 2
            start = max(middle - update_radius, 0)
            end = min(middle + update_radius, self.n_cells)
            index = jnp.arange(self.n_cells)
            cell_mask = (index >= start) & (index < end)

        max_speed = max_wave_speed_1d(self._arena.current_h, self._arena.current_hu, cell_mask)
        return cfl_time_step(max_speed, cell_size_meters, self.cfl_factor)
