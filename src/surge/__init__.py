"""Surge: wave propagation for the shallow water equations.

A JAX-accelerated finite-volume engine that advances water height and
momentum on 1D and 2D Cartesian grids using F-Wave or Roe approximate
Riemann solvers, with bathymetry, dry-cell reflection and outflow
boundaries.
"""

__version__ = "0.1.0"
