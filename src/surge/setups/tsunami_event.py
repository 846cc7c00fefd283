"""Tsunami setups driven by bathymetry data and a seafloor displacement.

Near the shore line, bathymetry is pushed away from sea level to a
vertical cliff of ``shore_cliff_height``: values with |b| < δ become -δ
in the water and +δ on land. Water fills every submerged cell up to
sea level, at least δ deep; land stays dry.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import jax.numpy as jnp
import numpy as np
import xarray as xr
from jax import Array
from jax.scipy.ndimage import map_coordinates

from surge.core.constants import (
    SHORE_CLIFF_HEIGHT,
    TSUNAMI_1D_DISPLACEMENT,
    TSUNAMI_1D_DISPLACEMENT_END,
    TSUNAMI_1D_DISPLACEMENT_START,
)
from surge.core.exceptions import ConfigurationError
from surge.io.csv_io import read_columns
from surge.setups.base import Setup, full_like

logger = logging.getLogger(__name__)


def clamp_to_cliff(b: Array, delta: float) -> Array:
    """Move bathymetry within δ of sea level onto the cliff edge."""
    return jnp.where(jnp.abs(b) < delta, jnp.where(b < 0.0, -delta, delta), b)


def fill_to_sea_level(b: Array, delta: float) -> Array:
    """Water height for raw bathymetry: max(-b, δ) offshore, 0 on land."""
    return jnp.where(b < 0.0, jnp.maximum(-b, delta), 0.0)


class TsunamiEvent1d(Setup):
    """Bathymetry profile along a track with a sinusoidal seafloor uplift.

    The profile is linearly interpolated and clamped to its end values
    outside the sampled range. Between ``displacement_start`` and
    ``displacement_end`` the seafloor moves by
    ``displacement · sin(2π · (x - start) / (end - start))``.
    """

    def __init__(
        self,
        locations,
        bathymetry,
        shore_cliff_height: float = SHORE_CLIFF_HEIGHT,
        displacement: float = TSUNAMI_1D_DISPLACEMENT,
        displacement_start: float = TSUNAMI_1D_DISPLACEMENT_START,
        displacement_end: float = TSUNAMI_1D_DISPLACEMENT_END,
    ):
        super().__init__()
        locations = np.asarray(locations, dtype=float)
        bathymetry = np.asarray(bathymetry, dtype=float)
        if locations.ndim != 1 or locations.shape != bathymetry.shape or locations.size < 2:
            raise ConfigurationError("bathymetry profile needs at least two matching samples")
        if np.any(np.diff(locations) <= 0.0):
            raise ConfigurationError("bathymetry profile locations must be strictly increasing")

        self.locations = jnp.asarray(locations)
        self.profile = jnp.asarray(bathymetry)
        self.shore_cliff_height = shore_cliff_height
        self.displacement_amplitude = displacement
        self.displacement_start = displacement_start
        self.displacement_end = displacement_end

    @classmethod
    def from_csv(cls, path: Path | str, **kwargs) -> "TsunamiEvent1d":
        """Load a profile with ``track_location`` and ``height`` columns.

        Locations are shifted so the first sample sits at x = 0.
        """
        columns = read_columns(path)
        missing = {"track_location", "height"} - set(columns)
        if missing:
            raise ConfigurationError(f"{path} lacks columns: {', '.join(sorted(missing))}")
        locations = columns["track_location"]
        return cls(locations - locations[0], columns["height"], **kwargs)

    def raw_bathymetry(self, x: Array) -> Array:
        return jnp.interp(x, self.locations, self.profile)

    def height(self, x: Array, y: Array) -> Array:
        return fill_to_sea_level(self.raw_bathymetry(x), self.shore_cliff_height)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return clamp_to_cliff(self.raw_bathymetry(x), self.shore_cliff_height)

    def displacement(self, x: Array, y: Array) -> Array:
        start, end = self.displacement_start, self.displacement_end
        phase = (x - start) / (end - start)
        uplift = self.displacement_amplitude * jnp.sin(2.0 * math.pi * phase)
        return jnp.where((x > start) & (x < end), uplift, 0.0)


@dataclass
class Raster:
    """Regularly sampled 2D field; values[j, i] sits at (x0 + i·dx, y0 + j·dy)."""

    values: Array
    x0: float
    y0: float
    dx: float
    dy: float

    @classmethod
    def from_axes(cls, x, y, z) -> "Raster":
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        z = np.asarray(z, dtype=float)
        if x.size < 2 or y.size < 2:
            raise ConfigurationError("rasters need at least two samples per axis")
        if z.shape != (y.size, x.size):
            raise ConfigurationError(f"raster values have shape {z.shape}, expected {(y.size, x.size)}")
        return cls(jnp.asarray(z), float(x[0]), float(y[0]), float(x[1] - x[0]), float(y[1] - y[0]))

    @classmethod
    def from_npz(cls, path: Path | str) -> "Raster":
        """Load a raster stored as ``x``, ``y`` and ``z`` arrays in a .npz file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Raster file not found: {path}")
        with np.load(path) as data:
            missing = {"x", "y", "z"} - set(data.files)
            if missing:
                raise ConfigurationError(f"{path} lacks arrays: {', '.join(sorted(missing))}")
            return cls.from_axes(data["x"], data["y"], data["z"])

    @classmethod
    def from_netcdf(cls, path: Path | str, variable: str = "z") -> "Raster":
        """Load a gridded variable with ``x`` and ``y`` axes (GMT/GEBCO layout).

        NaN runs are reported but kept.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Raster file not found: {path}")
        with xr.open_dataset(path) as ds:
            if variable not in ds.variables:
                raise ConfigurationError(f"{path} has no variable '{variable}'")
            field = ds[variable]
            if set(field.dims) != {"x", "y"}:
                raise ConfigurationError(f"{path}:{variable} has dimensions {field.dims}, expected (y, x)")
            z = field.transpose("y", "x").values
            x, y = ds["x"].values, ds["y"].values

        n_nan = int(np.isnan(z).sum())
        if n_nan:
            logger.warning("%s:%s contains %d NaN values of %d", path, variable, n_nan, z.size)
        return cls.from_axes(x, y, z)

    @classmethod
    def load(cls, path: Path | str, variable: str = "z") -> "Raster":
        """Load a NetCDF (.nc, .grd) or .npz raster, chosen by file suffix."""
        if Path(path).suffix.lower() in (".nc", ".grd", ".nc4"):
            return cls.from_netcdf(path, variable)
        return cls.from_npz(path)

    def sample(self, x: Array, y: Array) -> Array:
        """Bilinear interpolation, clamped to the border values outside."""
        index_x = (x - self.x0) / self.dx
        index_y = (y - self.y0) / self.dy
        return map_coordinates(self.values, [index_y, index_x], order=1, mode="nearest")


class TsunamiEvent2d(Setup):
    """Bathymetry and displacement from rasters, with shore cliff clamping."""

    def __init__(
        self,
        bathymetry: Raster,
        displacement: Raster,
        shore_cliff_height: float = SHORE_CLIFF_HEIGHT,
    ):
        super().__init__()
        self.bathymetry_raster = bathymetry
        self.displacement_raster = displacement
        self.shore_cliff_height = shore_cliff_height

    @classmethod
    def from_files(
        cls,
        bathymetry_path: Path | str,
        displacement_path: Path | str,
        shore_cliff_height: float = SHORE_CLIFF_HEIGHT,
    ) -> "TsunamiEvent2d":
        return cls(Raster.load(bathymetry_path), Raster.load(displacement_path), shore_cliff_height)

    def height(self, x: Array, y: Array) -> Array:
        return fill_to_sea_level(self.bathymetry_raster.sample(x, y), self.shore_cliff_height)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return clamp_to_cliff(self.bathymetry_raster.sample(x, y), self.shore_cliff_height)

    def displacement(self, x: Array, y: Array) -> Array:
        return self.displacement_raster.sample(x, y)


class ArtificialTsunami2d(Setup):
    """Flat 100 m deep basin with a synthetic displacement in its central 1 km square.

    With x' = (x - 500) / 500 and y' = (y - 500) / 500, the displacement is
    5 · (-sin(π x')) · (1 - y'²) for x', y' in [-1, 1] and 0 elsewhere.
    """

    def __init__(self, center_x: float = 500.0, center_y: float = 500.0):
        super().__init__()
        self.center_x = center_x
        self.center_y = center_y

    def height(self, x: Array, y: Array) -> Array:
        return full_like(x, 100.0)

    def momentum_x(self, x: Array, y: Array) -> Array:
        return full_like(x, 0.0)

    def bathymetry(self, x: Array, y: Array) -> Array:
        return full_like(x, -100.0)

    def displacement(self, x: Array, y: Array) -> Array:
        x_rel = (x - self.center_x) / 500.0
        y_rel = (y - self.center_y) / 500.0
        inside = (jnp.abs(x_rel) <= 1.0) & (jnp.abs(y_rel) <= 1.0)
        return jnp.where(inside, 5.0 * -jnp.sin(math.pi * x_rel) * (1.0 - y_rel * y_rel), 0.0)
