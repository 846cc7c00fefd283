"""Dam break setups: still water separated by a removed wall."""

import jax.numpy as jnp
from jax import Array

from surge.setups.base import Setup, full_like


class DamBreak1d(Setup):
    """Two water columns meeting at ``location`` along x."""

    def __init__(
        self,
        height_left: float,
        height_right: float,
        location: float,
        bathymetry: float = 0.0,
    ):
        super().__init__()
        self.height_left = height_left
        self.height_right = height_right
        self.location = location
        self.base_bathymetry = bathymetry

    def height(self, x: Array, y: Array) -> Array:
        return jnp.where(x < self.location, self.height_left, self.height_right) + full_like(x, 0.0)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return full_like(x, self.base_bathymetry)


class DamBreak2d(Setup):
    """A circular column of water of ``radius`` around (center_x, center_y)."""

    def __init__(
        self,
        height_inner: float,
        height_outer: float,
        center_x: float,
        center_y: float,
        radius: float,
        bathymetry: float = -20.0,
    ):
        super().__init__()
        self.height_inner = height_inner
        self.height_outer = height_outer
        self.center_x = center_x
        self.center_y = center_y
        self.radius = radius
        self.base_bathymetry = bathymetry

    def height(self, x: Array, y: Array) -> Array:
        dx = x - self.center_x
        dy = y - self.center_y
        inside = dx * dx + dy * dy < self.radius * self.radius
        return jnp.where(inside, self.height_inner, self.height_outer) + full_like(x, 0.0)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return full_like(x, self.base_bathymetry)
