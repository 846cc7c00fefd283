"""Roe approximate Riemann solver for the 1D shallow water equations.

Decomposes the jump in the conserved quantities (h, hu) into two waves
along the eigenvectors of the Roe-linearized flux Jacobian. Each wave
contributes λp·αp·(1, λp) to the cell it travels into.

This solver carries no bathymetry source term; use F-Wave for
non-flat sea floors.
"""

import jax.numpy as jnp
from jax import Array, jit

from surge.core.types import NetUpdates
from surge.solvers.common import (
    invert_eigenbasis,
    roe_eigenvalues,
    safe_velocity,
    split_waves,
    valid_interface,
)


@jit
def roe_wave_speeds(h_l: Array, h_r: Array, u_l: Array, u_r: Array) -> tuple[Array, Array]:
    """Roe eigenvalues from heights and particle velocities (not momenta)."""
    return roe_eigenvalues(h_l, h_r, u_l, u_r)


@jit
def roe_wave_strengths(
    h_l: Array,
    h_r: Array,
    hu_l: Array,
    hu_r: Array,
    speed_1: Array,
    speed_2: Array,
) -> tuple[Array, Array]:
    """Wave strengths α = R⁻¹ · (hR - hL, huR - huL)."""
    return invert_eigenbasis(h_r - h_l, hu_r - hu_l, speed_1, speed_2)


@jit
def roe_net_updates(h_l: Array, h_r: Array, hu_l: Array, hu_r: Array) -> NetUpdates:
    """Compute Roe net updates at one or many interfaces.

    Args:
        h_l: Water height left of the interface
        h_r: Water height right of the interface
        hu_l: Momentum left of the interface
        hu_r: Momentum right of the interface

    Returns:
        ((dh_l, dhu_l), (dh_r, dhu_r)): Net updates to the left and right
        cell, zero for degenerate input.
    """
    valid = valid_interface(h_l, h_r)

    speed_1, speed_2 = roe_eigenvalues(h_l, h_r, safe_velocity(h_l, hu_l), safe_velocity(h_r, hu_r))
    alpha_1, alpha_2 = invert_eigenbasis(h_r - h_l, hu_r - hu_l, speed_1, speed_2)

    left, right = split_waves(
        speed_1, (speed_1 * alpha_1, speed_1 * speed_1 * alpha_1),
        speed_2, (speed_2 * alpha_2, speed_2 * speed_2 * alpha_2),
    )

    (dh_l, dhu_l), (dh_r, dhu_r) = left, right
    return (
        (jnp.where(valid, dh_l, 0.0), jnp.where(valid, dhu_l, 0.0)),
        (jnp.where(valid, dh_r, 0.0), jnp.where(valid, dhu_r, 0.0)),
    )
