"""Wave propagation patches: grid storage, boundaries, sweeps and time step control."""

from surge.patches.base import WavePropagation
from surge.patches.grid import StateArena
from surge.patches.wave_propagation_1d import WavePropagation1d
from surge.patches.wave_propagation_2d import WavePropagation2d

__all__ = ["StateArena", "WavePropagation", "WavePropagation1d", "WavePropagation2d"]
