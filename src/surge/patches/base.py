"""Common interface of the wave propagation patches."""

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
from jax import Array

from surge.core.constants import TIMING_LOG_CELL_THRESHOLD
from surge.patches.grid import StateArena
from surge.solvers.riemann import SolverKind

if TYPE_CHECKING:
    from surge.setups.base import Setup

logger = logging.getLogger(__name__)


class WavePropagation(ABC):
    """A Cartesian patch of cells advanced by the wave propagation method.

    Interior cells are addressed with zero-based (ix, iy) coordinates; the
    ghost layer surrounding them is only reachable through ``raw_arrays``.
    """

    def __init__(
        self,
        shape: tuple[int, ...],
        solver: SolverKind,
        cfl_factor: float,
        dtype,
    ):
        self.solver = SolverKind(solver)
        self.cfl_factor = cfl_factor
        self.dtype = jnp.dtype(dtype)
        self._arena = StateArena.allocate(shape, self.dtype, with_hv=self.ndim == 2)

    # Geometry

    @property
    @abstractmethod
    def ndim(self) -> int:
        ...

    @property
    @abstractmethod
    def grid_shape(self) -> tuple[int, int]:
        """Interior cell counts (nx, ny)."""

    @property
    @abstractmethod
    def stride(self) -> int:
        """Ghost-inclusive row length of the underlying arrays."""

    @abstractmethod
    def _index(self, ix: int, iy: int) -> tuple[int, ...]:
        """Array index of an interior cell."""

    @abstractmethod
    def _interior(self, q: Array) -> Array:
        """View of the interior cells of a ghost-inclusive array."""

    @abstractmethod
    def cell_coordinates(self, scale_x: float, scale_y: float) -> tuple[Array, Array]:
        """Coordinates (ix - 0.5)·scale of every cell, ghosts included."""

    @property
    def cell_count(self) -> int:
        nx, ny = self.grid_shape
        return nx * ny

    # Stepping

    @abstractmethod
    def set_ghost_outflow(self) -> None:
        ...

    @abstractmethod
    def time_step(self, scaling: float) -> None:
        ...

    @abstractmethod
    def compute_max_timestep(self, cell_size_meters: float = 1.0) -> float:
        ...

    # Read access to the active slot

    @property
    def arena(self) -> StateArena:
        return self._arena

    @property
    def height(self) -> Array:
        return self._interior(self._arena.current_h)

    @property
    def momentum_x(self) -> Array:
        return self._interior(self._arena.current_hu)

    @property
    def momentum_y(self) -> Array | None:
        hv = self._arena.current_hv
        return None if hv is None else self._interior(hv)

    @property
    def bathymetry(self) -> Array:
        return self._interior(self._arena.b)

    def cell_state(self, ix: int, iy: int = 0) -> tuple[float, float, float]:
        """(h, hu, hv) of one interior cell; hv is 0 on 1D patches."""
        index = self._index(ix, iy)
        hv = self._arena.current_hv
        return (
            float(self._arena.current_h[index]),
            float(self._arena.current_hu[index]),
            0.0 if hv is None else float(hv[index]),
        )

    def raw_arrays(self) -> dict[str, Array]:
        """Ghost-inclusive arrays of the active slot."""
        arrays = {"h": self._arena.current_h, "hu": self._arena.current_hu, "b": self._arena.b}
        if self._arena.current_hv is not None:
            arrays["hv"] = self._arena.current_hv
        return arrays

    # Write access to the active slot

    def set_height(self, ix: int, iy: int, value: float) -> None:
        self._arena.replace_current(h=self._arena.current_h.at[self._index(ix, iy)].set(value))

    def set_momentum_x(self, ix: int, iy: int, value: float) -> None:
        self._arena.replace_current(hu=self._arena.current_hu.at[self._index(ix, iy)].set(value))

    def set_momentum_y(self, ix: int, iy: int, value: float) -> None:
        if self._arena.current_hv is None:
            raise ValueError("1D patches carry no y-momentum")
        self._arena.replace_current(hv=self._arena.current_hv.at[self._index(ix, iy)].set(value))

    def set_bathymetry(self, ix: int, iy: int, value: float) -> None:
        self._arena.replace_current(b=self._arena.b.at[self._index(ix, iy)].set(value))

    def load_arrays(self, h: Array, hu: Array, b: Array, hv: Array | None = None) -> None:
        """Replace the whole state with ghost-inclusive arrays."""
        shape = self._arena.shape
        for name, q in (("h", h), ("hu", hu), ("b", b), ("hv", hv)):
            if q is not None and tuple(q.shape) != shape:
                raise ValueError(f"array '{name}' has shape {tuple(q.shape)}, expected {shape}")
        if self.ndim == 2 and hv is None:
            hv = jnp.zeros(shape, dtype=self.dtype)
        self._arena = StateArena.from_arrays(
            jnp.asarray(h, dtype=self.dtype),
            jnp.asarray(hu, dtype=self.dtype),
            None if self.ndim == 1 else jnp.asarray(hv, dtype=self.dtype),
            jnp.asarray(b, dtype=self.dtype),
        )

    # Initial conditions

    def init_with_setup(self, setup: "Setup", scale: float = 1.0) -> None:
        """Evaluate a setup on every cell, ghosts included.

        Stored bathymetry is the setup's bathymetry plus its displacement.

        Args:
            setup: Initial condition provider
            scale: Cell size in the setup's length unit
        """
        setup.set_init_scale(scale, scale)
        x, y = self.cell_coordinates(scale, scale)

        h = setup.height(x, y)
        hu = setup.momentum_x(x, y)
        b = setup.bathymetry(x, y) + setup.displacement(x, y)
        hv = setup.momentum_y(x, y) if self.ndim == 2 else None

        self.load_arrays(h=h, hu=hu, b=b, hv=hv)
        logger.debug(
            "Initialized %s (%d cells) from %s", type(self).__name__, self.cell_count, type(setup).__name__
        )

    # Diagnostics

    def _timing_enabled(self) -> bool:
        return self.cell_count > TIMING_LOG_CELL_THRESHOLD and logger.isEnabledFor(logging.DEBUG)

    def _log_step_time(self, started: float, result: Array) -> None:
        jax.block_until_ready(result)
        logger.debug("%s step: %.2f ms", type(self).__name__, (time.perf_counter() - started) * 1000.0)
