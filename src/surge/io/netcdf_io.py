"""NetCDF time series output.

One file holds every frame of a run: ``height``, ``momentum_x`` and
``momentum_y`` along an unlimited ``time`` dimension, and ``bathymetry``
and ``displacement`` written once with the first frame. Inspect a file
with ``ncdump -h``.
"""

import logging
from pathlib import Path

import netCDF4
import numpy as np

from surge.core.types import ArrayLike

logger = logging.getLogger(__name__)

TIME_VARYING = ("height", "momentum_x", "momentum_y")
STATIC = ("bathymetry", "displacement")


def _coarsen(values: ArrayLike, step: int) -> np.ndarray:
    """Every step-th cell along both axes, dropping incomplete blocks."""
    q = np.atleast_2d(np.asarray(values))
    ny, nx = q.shape
    return q[: (ny // step) * step : step, : (nx // step) * step : step]


def append_time_frame(
    path: Path | str,
    frame_index: int,
    time: float,
    cell_size: float,
    height: ArrayLike | None = None,
    momentum_x: ArrayLike | None = None,
    momentum_y: ArrayLike | None = None,
    bathymetry: ArrayLike | None = None,
    displacement: ArrayLike | None = None,
    step: int = 1,
) -> Path:
    """Append one time frame to a NetCDF file.

    Frame 0 creates (or replaces) the file and defines its variables from
    the quantities passed; later frames reopen it and write the time
    varying quantities at ``frame_index``. Values are stored as float32.

    Args:
        path: Target file
        frame_index: 0 for the first frame, n - 1 for the n-th
        time: Simulation time of the frame in seconds
        cell_size: Δx = Δy in meters
        height, momentum_x, momentum_y: Interior arrays of shape (nx,) or (ny, nx)
        bathymetry, displacement: Static interior arrays, written with frame 0
        step: Coarse output, keeping every step-th cell along each axis

    Returns:
        The path written.
    """
    fields = {
        "height": height,
        "momentum_x": momentum_x,
        "momentum_y": momentum_y,
        "bathymetry": bathymetry,
        "displacement": displacement,
    }
    coarse = {name: _coarsen(values, step) for name, values in fields.items() if values is not None}
    if not any(name in coarse for name in TIME_VARYING):
        raise ValueError("append_time_frame needs height or a momentum")

    path = Path(path)
    first = frame_index <= 0
    if first:
        path.parent.mkdir(parents=True, exist_ok=True)

    with netCDF4.Dataset(path, "w" if first else "a") as ds:
        if first:
            ny, nx = next(iter(coarse.values())).shape
            ds.createDimension("x", nx)
            ds.createDimension("y", ny)
            ds.createDimension("time", None)

            for axis, n in (("x", nx), ("y", ny)):
                var = ds.createVariable(axis, "f4", (axis,))
                var.units = "m"
                var[:] = (np.arange(n) * step + 0.5) * cell_size
            ds.createVariable("time", "f4", ("time",)).units = "s"

            for name, values in coarse.items():
                dims = ("time", "y", "x") if name in TIME_VARYING else ("y", "x")
                var = ds.createVariable(name, "f4", dims)
                var.units = "m" if name in ("height", *STATIC) else "m*m/s"
                if name in STATIC:
                    var[:] = values

        ds.variables["time"][frame_index] = time
        for name in TIME_VARYING:
            if name in coarse:
                ds.variables[name][frame_index, :, :] = coarse[name]

    logger.debug("NetCDF frame %d (t = %.4f s) -> %s", frame_index, time, path)
    return path
