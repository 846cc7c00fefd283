"""Runtime selection between the approximate Riemann solvers."""

from enum import Enum

from surge.core.types import NetUpdates
from surge.solvers.fwave import fwave_net_updates
from surge.solvers.roe import roe_net_updates


class SolverKind(str, Enum):
    """Approximate Riemann solver used at every cell interface."""

    FWAVE = "fwave"  # Flux decomposition, bathymetry aware
    ROE = "roe"  # Conserved-quantity decomposition, flat bottom


def net_updates(kind: SolverKind, h_l, h_r, hu_l, hu_r, b_l=0.0, b_r=0.0) -> NetUpdates:
    """Dispatch to the selected solver.

    ``kind`` must be static under ``jit``. The Roe solver ignores bathymetry.
    """
    if SolverKind(kind) == SolverKind.ROE:
        return roe_net_updates(h_l, h_r, hu_l, hu_r)
    return fwave_net_updates(h_l, h_r, hu_l, hu_r, b_l, b_r)
