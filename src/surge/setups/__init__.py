"""Initial condition providers."""

from surge.setups.base import Setup
from surge.setups.checkpoint import CheckPointSetup
from surge.setups.dam_break import DamBreak1d, DamBreak2d
from surge.setups.discontinuity import Discontinuity1d
from surge.setups.factory import create_setup
from surge.setups.flows import SubcriticalFlow1d, SupercriticalFlow1d
from surge.setups.tsunami_event import ArtificialTsunami2d, Raster, TsunamiEvent1d, TsunamiEvent2d

__all__ = [
    "ArtificialTsunami2d",
    "CheckPointSetup",
    "DamBreak1d",
    "DamBreak2d",
    "Discontinuity1d",
    "Raster",
    "Setup",
    "SubcriticalFlow1d",
    "SupercriticalFlow1d",
    "TsunamiEvent1d",
    "TsunamiEvent2d",
    "create_setup",
]
