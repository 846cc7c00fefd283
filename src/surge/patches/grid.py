"""Two-slot storage of the grid quantities.

Heights and momenta live in two buffers each. A time step reads the
active slot and commits its results into the other one, after which the
slots swap roles. Bathymetry is static apart from boundary copies and
has a single buffer.
"""

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array


@dataclass
class StateArena:
    """Double-buffered grid state with an explicit active slot.

    Arrays include the ghost layer: shape (n + 2,) in 1D and
    (ny + 2, nx + 2) in 2D. ``hv`` is None for 1D grids.
    """

    h: list[Array]
    hu: list[Array]
    hv: list[Array] | None
    b: Array
    active: int = 0

    @classmethod
    def allocate(cls, shape: tuple[int, ...], dtype, with_hv: bool) -> "StateArena":
        """Zero-initialized arena for the given ghost-inclusive shape."""
        def pair() -> list[Array]:
            return [jnp.zeros(shape, dtype=dtype), jnp.zeros(shape, dtype=dtype)]

        return cls(
            h=pair(),
            hu=pair(),
            hv=pair() if with_hv else None,
            b=jnp.zeros(shape, dtype=dtype),
        )

    @classmethod
    def from_arrays(cls, h: Array, hu: Array, hv: Array | None, b: Array) -> "StateArena":
        """Arena whose active slot holds the given arrays."""
        return cls(
            h=[h, jnp.zeros_like(h)],
            hu=[hu, jnp.zeros_like(hu)],
            hv=[hv, jnp.zeros_like(hv)] if hv is not None else None,
            b=b,
        )

    @property
    def shape(self) -> tuple[int, ...]:
        return self.b.shape

    @property
    def dtype(self):
        return self.b.dtype

    # Read views of the active slot

    @property
    def current_h(self) -> Array:
        return self.h[self.active]

    @property
    def current_hu(self) -> Array:
        return self.hu[self.active]

    @property
    def current_hv(self) -> Array | None:
        return None if self.hv is None else self.hv[self.active]

    def replace_current(
        self,
        h: Array | None = None,
        hu: Array | None = None,
        hv: Array | None = None,
        b: Array | None = None,
    ) -> None:
        """Overwrite quantities of the active slot in place (setters, boundaries)."""
        if h is not None:
            self.h[self.active] = h
        if hu is not None:
            self.hu[self.active] = hu
        if hv is not None and self.hv is not None:
            self.hv[self.active] = hv
        if b is not None:
            self.b = b

    def commit(self, h: Array, hu: Array, hv: Array | None = None) -> None:
        """Store step results in the inactive slot and make it active.

        Quantities not passed are carried over unchanged.
        """
        target = 1 - self.active
        self.h[target] = h
        self.hu[target] = hu
        if self.hv is not None:
            self.hv[target] = hv if hv is not None else self.hv[self.active]
        self.active = target
