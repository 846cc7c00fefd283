"""Type definitions for grid arrays and solver results."""

from enum import Enum
from typing import TypeAlias

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

# Engine arrays may be float32 or float64, chosen per run
jax.config.update("jax_enable_x64", True)

# Array types
FloatArray: TypeAlias = Array | np.ndarray
ArrayLike: TypeAlias = FloatArray | list[float] | tuple[float, ...]

# ((h_update_left, hu_update_left), (h_update_right, hu_update_right))
NetUpdates: TypeAlias = tuple[tuple[Array, Array], tuple[Array, Array]]


class Precision(str, Enum):
    """Floating point precision of all grid arrays in a run."""

    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def dtype(self) -> jnp.dtype:
        return jnp.dtype(self.value)
