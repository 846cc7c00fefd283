"""Approximate Riemann solvers for the 1D shallow water equations."""

from surge.solvers.fwave import fwave_net_updates
from surge.solvers.riemann import SolverKind, net_updates
from surge.solvers.roe import roe_net_updates, roe_wave_speeds, roe_wave_strengths

__all__ = [
    "SolverKind",
    "fwave_net_updates",
    "net_updates",
    "roe_net_updates",
    "roe_wave_speeds",
    "roe_wave_strengths",
]
