"""Steady flow over a submerged hump.

Both setups start from a constant discharge over a parabolic bump
centred at x = 10 m; depending on the Froude number the flow is
subcritical or transitions to supercritical across the hump.
"""

import jax.numpy as jnp
from jax import Array

from surge.setups.base import Setup, full_like

HUMP_START = 8.0
HUMP_END = 12.0
HUMP_CENTER = 10.0
HUMP_CURVATURE = 0.05


class _HumpFlow(Setup):
    crest: float
    floor: float
    discharge: float

    def bathymetry(self, x: Array, y: Array) -> Array:
        on_hump = (x >= HUMP_START) & (x <= HUMP_END)
        hump = self.crest - HUMP_CURVATURE * (x - HUMP_CENTER) ** 2
        return jnp.where(on_hump, hump, self.floor) + full_like(x, 0.0)

    def height(self, x: Array, y: Array) -> Array:
        return -self.bathymetry(x, y)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, self.discharge)


class SubcriticalFlow1d(_HumpFlow):
    """Froude number below 1 everywhere."""

    crest = -1.8
    floor = -2.0
    discharge = 4.42


class SupercriticalFlow1d(_HumpFlow):
    """Flow accelerating past critical speed over the hump."""

    crest = -0.13
    floor = -0.33
    discharge = 0.18
