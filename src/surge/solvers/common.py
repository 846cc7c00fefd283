"""Shared pieces of the approximate Riemann solvers.

Both solvers linearize the 1D shallow water equations around Roe-averaged
states and decompose the jump between two cells into two waves with the
eigenvectors (1, λ1) and (1, λ2). Every function here is elementwise and
works equally on scalars or on whole rows of interfaces.
"""

import jax.numpy as jnp
from jax import Array

from surge.core.constants import GRAVITY


def safe_velocity(h: Array, hu: Array) -> Array:
    """Particle velocity hu / h, defined as 0 where the cell holds no water."""
    wet = h > 0.0
    return jnp.where(wet, hu / jnp.where(wet, h, 1.0), 0.0)


def valid_interface(h_l: Array, h_r: Array) -> Array:
    """Mask of interfaces with non-negative heights and some water."""
    return (h_l >= 0.0) & (h_r >= 0.0) & (h_l + h_r > 0.0)


def roe_eigenvalues(h_l: Array, h_r: Array, u_l: Array, u_r: Array) -> tuple[Array, Array]:
    """Roe eigenvalues λ1,2 = ū ∓ √(g h̄).

    h̄ is the arithmetic mean height and ū the √h-weighted mean velocity.
    """
    sqrt_h_l = jnp.sqrt(jnp.maximum(h_l, 0.0))
    sqrt_h_r = jnp.sqrt(jnp.maximum(h_r, 0.0))
    sqrt_sum = sqrt_h_l + sqrt_h_r

    roe_height = 0.5 * (h_l + h_r)
    roe_velocity = jnp.where(
        sqrt_sum > 0.0,
        (u_l * sqrt_h_l + u_r * sqrt_h_r) / jnp.where(sqrt_sum > 0.0, sqrt_sum, 1.0),
        0.0,
    )
    celerity = jnp.sqrt(GRAVITY * jnp.maximum(roe_height, 0.0))

    return roe_velocity - celerity, roe_velocity + celerity


def invert_eigenbasis(
    jump_0: Array,
    jump_1: Array,
    speed_1: Array,
    speed_2: Array,
) -> tuple[Array, Array]:
    """Solve [[1, 1], [λ1, λ2]] · (α1, α2) = (jump_0, jump_1).

    The system is singular when λ1 == λ2 (no water); strengths are 0 there.
    """
    det = speed_2 - speed_1
    regular = det != 0.0
    inv_det = jnp.where(regular, 1.0 / jnp.where(regular, det, 1.0), 0.0)

    alpha_1 = (speed_2 * jump_0 - jump_1) * inv_det
    alpha_2 = (jump_1 - speed_1 * jump_0) * inv_det
    return alpha_1, alpha_2


def split_waves(
    speed_1: Array,
    wave_1: tuple[Array, Array],
    speed_2: Array,
    wave_2: tuple[Array, Array],
) -> tuple[tuple[Array, Array], tuple[Array, Array]]:
    """Accumulate waves into left/right-going net updates.

    A wave with negative speed updates the left cell, otherwise the right
    cell. Both waves may land on the same side (supersonic flow).
    """
    to_left_1 = speed_1 < 0.0
    to_left_2 = speed_2 < 0.0

    left = tuple(
        jnp.where(to_left_1, w1, 0.0) + jnp.where(to_left_2, w2, 0.0)
        for w1, w2 in zip(wave_1, wave_2)
    )
    right = tuple(
        jnp.where(to_left_1, 0.0, w1) + jnp.where(to_left_2, 0.0, w2)
        for w1, w2 in zip(wave_1, wave_2)
    )
    return left, right
