"""CFL time step control.

The stable time step is bounded by the fastest signal on the grid:

  Δt = CFL · Δx / max_i(|u_i| + √(g · max(h_i, h_neighbours)))

Using the largest height among a cell and its face neighbours bounds
the Roe celerity of every interface the cell takes part in.
"""

import math

import jax.numpy as jnp
from jax import jit

from surge.core.constants import GRAVITY


def _signal_speed(h_cell, impulse, h_max):
    wet = h_cell > 0.0
    velocity = jnp.where(wet, impulse / jnp.where(wet, h_cell, 1.0), 0.0)
    return jnp.where(wet, velocity + jnp.sqrt(GRAVITY * jnp.maximum(h_max, 0.0)), 0.0)


@jit
def max_wave_speed_1d(
    h: jnp.ndarray,
    hu: jnp.ndarray,
    cell_mask: jnp.ndarray | None = None,
) -> jnp.ndarray:
    """Largest signal speed over the interior of a [n + 2] grid.

    Args:
        h: Water height [n + 2]
        hu: Momentum [n + 2]
        cell_mask: Optional boolean [n] restricting the interior cells considered

    Returns:
        Maximum speed, 0 if no considered cell holds water.
    """
    h_cell = h[1:-1]
    h_max = jnp.maximum(jnp.maximum(h[:-2], h_cell), h[2:])
    speed = _signal_speed(h_cell, jnp.abs(hu[1:-1]), h_max)
    if cell_mask is not None:
        speed = jnp.where(cell_mask, speed, 0.0)
    return jnp.max(speed)


@jit
def max_wave_speed_2d(h: jnp.ndarray, hu: jnp.ndarray, hv: jnp.ndarray) -> jnp.ndarray:
    """Largest signal speed over the interior of a [ny + 2, nx + 2] grid."""
    h_cell = h[1:-1, 1:-1]
    h_max = jnp.maximum(
        jnp.maximum(jnp.maximum(h[1:-1, :-2], h[1:-1, 2:]), jnp.maximum(h[:-2, 1:-1], h[2:, 1:-1])),
        h_cell,
    )
    impulse = jnp.maximum(jnp.abs(hu[1:-1, 1:-1]), jnp.abs(hv[1:-1, 1:-1]))
    return jnp.max(_signal_speed(h_cell, impulse, h_max))


def cfl_time_step(max_speed, cell_size_meters: float, cfl_factor: float) -> float:
    """Convert a maximum signal speed into a time step.

    Returns inf when nothing moves (no water) and nan if the state holds
    non-finite values; callers must stop on a non-finite result.
    """
    max_speed = float(max_speed)
    if math.isnan(max_speed):
        return math.nan
    if max_speed <= 0.0:
        return math.inf
    return cfl_factor * cell_size_meters / max_speed
