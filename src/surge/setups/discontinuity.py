"""Arbitrary 1D Riemann problem as an initial condition."""

import jax.numpy as jnp
from jax import Array

from surge.setups.base import Setup, full_like


class Discontinuity1d(Setup):
    """Piecewise constant height, momentum and bathymetry split at ``location``."""

    def __init__(
        self,
        height_left: float,
        height_right: float,
        momentum_left: float,
        momentum_right: float,
        location: float,
        bathymetry_left: float = 0.0,
        bathymetry_right: float = 0.0,
    ):
        super().__init__()
        self.height_left = height_left
        self.height_right = height_right
        self.momentum_left = momentum_left
        self.momentum_right = momentum_right
        self.location = location
        self.bathymetry_left = bathymetry_left
        self.bathymetry_right = bathymetry_right

    def _split(self, x: Array, left: float, right: float) -> Array:
        return jnp.where(x < self.location, left, right) + full_like(x, 0.0)

    def height(self, x: Array, y: Array) -> Array:
        return self._split(x, self.height_left, self.height_right)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return self._split(x, self.momentum_left, self.momentum_right)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return self._split(x, self.bathymetry_left, self.bathymetry_right)
