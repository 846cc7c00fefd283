"""F-Wave approximate Riemann solver for the 1D shallow water equations.

The F-Wave method decomposes the jump in the flux function (rather than
the jump in the conserved quantities) into waves along the Roe
eigenvectors. Bathymetry enters as a source term folded into the flux
jump, which keeps lakes at rest exactly at rest.

For the 1D shallow water equations with bathymetry b:
  ∂h/∂t + ∂(hu)/∂x = 0
  ∂(hu)/∂t + ∂(hu² + gh²/2)/∂x = -gh ∂b/∂x

The flux jump between left state L and right state R:
  Δf = (huR - huL,
        huR·uR - huL·uL + g/2·(hR² - hL²) + g·h̄·(bR - bL))

References:
- Bale, LeVeque, Mitran, Rossmanith (2002). A wave propagation method for
  conservation laws and balance laws with spatially varying flux functions.
- LeVeque, R.J. (2002). Finite Volume Methods for Hyperbolic Problems.
"""

import jax.numpy as jnp
from jax import jit

from surge.core.constants import GRAVITY
from surge.core.types import NetUpdates
from surge.solvers.common import (
    invert_eigenbasis,
    roe_eigenvalues,
    safe_velocity,
    split_waves,
    valid_interface,
)


@jit
def fwave_net_updates(
    h_l: jnp.ndarray,
    h_r: jnp.ndarray,
    hu_l: jnp.ndarray,
    hu_r: jnp.ndarray,
    b_l: jnp.ndarray = 0.0,
    b_r: jnp.ndarray = 0.0,
) -> NetUpdates:
    """Compute F-Wave net updates at one or many interfaces.

    All arguments broadcast against each other, so the same call handles a
    single interface or a full row of them.

    Args:
        h_l: Water height left of the interface
        h_r: Water height right of the interface
        hu_l: Momentum left of the interface
        hu_r: Momentum right of the interface
        b_l: Bathymetry left of the interface
        b_r: Bathymetry right of the interface

    Returns:
        ((dh_l, dhu_l), (dh_r, dhu_r)): Net updates to the left and right
        cell. All zero where the input is degenerate (a negative height or
        no water on either side).
    """
    valid = valid_interface(h_l, h_r)

    u_l = safe_velocity(h_l, hu_l)
    u_r = safe_velocity(h_r, hu_r)

    speed_1, speed_2 = roe_eigenvalues(h_l, h_r, u_l, u_r)

    # Flux jump including the bathymetry source term
    roe_height = 0.5 * (h_l + h_r)
    df_h = hu_r - hu_l
    df_hu = (
        hu_r * u_r
        - hu_l * u_l
        + 0.5 * GRAVITY * (h_r * h_r - h_l * h_l)
        + GRAVITY * roe_height * (b_r - b_l)
    )

    alpha_1, alpha_2 = invert_eigenbasis(df_h, df_hu, speed_1, speed_2)

    # F-waves are already flux differences: Z = α · (1, λ)
    left, right = split_waves(
        speed_1, (alpha_1, alpha_1 * speed_1),
        speed_2, (alpha_2, alpha_2 * speed_2),
    )

    (dh_l, dhu_l), (dh_r, dhu_r) = left, right
    return (
        (jnp.where(valid, dh_l, 0.0), jnp.where(valid, dhu_l, 0.0)),
        (jnp.where(valid, dh_r, 0.0), jnp.where(valid, dhu_r, 0.0)),
    )
