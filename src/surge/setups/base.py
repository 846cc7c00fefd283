"""Initial condition providers.

A setup maps cell coordinates to the initial water height, momenta,
bathymetry and seafloor displacement. All functions are vectorized:
they accept coordinate arrays of any (matching) shape and return arrays
of that shape.
"""

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array


def full_like(x, value) -> Array:
    """Array of x's shape filled with value."""
    return jnp.full(jnp.shape(x), value, dtype=jnp.result_type(float))


class Setup(ABC):
    """Base class of all initial condition providers."""

    def __init__(self):
        self._init_scale = (1.0, 1.0)

    @property
    def init_scale(self) -> tuple[float, float]:
        """Cell size (x, y) of the grid being initialized."""
        return self._init_scale

    def set_init_scale(self, scale_x: float, scale_y: float) -> None:
        self._init_scale = (scale_x, scale_y)

    @abstractmethod
    def height(self, x: Array, y: Array) -> Array:
        ...

    @abstractmethod
    def momentum_x(self, x: Array, y: Array) -> Array:
        ...

    @abstractmethod
    def bathymetry(self, x: Array, y: Array) -> Array:
        ...

    def momentum_y(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def displacement(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)
