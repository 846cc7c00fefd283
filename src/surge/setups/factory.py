"""Construction of setups from configuration."""

import logging

from surge.core.config import GridSettings, SetupKind, SetupSettings
from surge.core.exceptions import ConfigurationError
from surge.setups.base import Setup
from surge.setups.dam_break import DamBreak1d, DamBreak2d
from surge.setups.discontinuity import Discontinuity1d
from surge.setups.flows import SubcriticalFlow1d, SupercriticalFlow1d
from surge.setups.tsunami_event import ArtificialTsunami2d, TsunamiEvent1d, TsunamiEvent2d

logger = logging.getLogger(__name__)


def create_setup(setup: SetupSettings, grid: GridSettings) -> Setup:
    """Build the initial condition provider selected by ``setup.kind``.

    Positions left unset default to the centre of the domain described
    by ``grid``.
    """
    width = grid.nx * grid.cell_size
    height = grid.ny * grid.cell_size
    location = setup.location if setup.location is not None else 0.5 * width

    logger.debug("Creating setup %s", setup.kind.value)

    match setup.kind:
        case SetupKind.DAM_BREAK_1D:
            return DamBreak1d(setup.height_left, setup.height_right, location, setup.bathymetry_left)
        case SetupKind.DAM_BREAK_2D:
            return DamBreak2d(
                setup.height_left,
                setup.height_right,
                setup.center_x if setup.center_x is not None else 0.5 * width,
                setup.center_y if setup.center_y is not None else 0.5 * height,
                setup.radius,
            )
        case SetupKind.DISCONTINUITY_1D:
            return Discontinuity1d(
                setup.height_left,
                setup.height_right,
                setup.momentum_left,
                setup.momentum_right,
                location,
                setup.bathymetry_left,
                setup.bathymetry_right,
            )
        case SetupKind.SUBCRITICAL_FLOW_1D:
            return SubcriticalFlow1d()
        case SetupKind.SUPERCRITICAL_FLOW_1D:
            return SupercriticalFlow1d()
        case SetupKind.TSUNAMI_EVENT_1D:
            return TsunamiEvent1d.from_csv(
                setup.bathymetry_file,
                shore_cliff_height=setup.shore_cliff_height,
                displacement=setup.displacement,
                displacement_start=setup.displacement_start,
                displacement_end=setup.displacement_end,
            )
        case SetupKind.TSUNAMI_EVENT_2D:
            return TsunamiEvent2d.from_files(
                setup.bathymetry_file,
                setup.displacement_file,
                shore_cliff_height=setup.shore_cliff_height,
            )
        case SetupKind.ARTIFICIAL_TSUNAMI_2D:
            return ArtificialTsunami2d()

    raise ConfigurationError(f"Unknown setup kind: {setup.kind}")
