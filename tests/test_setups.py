"""Tests for initial condition providers."""

import math

import jax.numpy as jnp
import numpy as np
import pytest
import xarray as xr

from surge.core.config import GridSettings, SetupKind, SetupSettings
from surge.core.exceptions import ConfigurationError
from surge.patches import WavePropagation1d, WavePropagation2d
from surge.setups import (
    ArtificialTsunami2d,
    CheckPointSetup,
    DamBreak1d,
    DamBreak2d,
    Discontinuity1d,
    Raster,
    SubcriticalFlow1d,
    SupercriticalFlow1d,
    TsunamiEvent1d,
    TsunamiEvent2d,
    create_setup,
)


def at(fn, x, y=0.0) -> float:
    return float(fn(jnp.asarray(x), jnp.asarray(y)))


@pytest.fixture
def tsunami_1d():
    """Profile crossing the shore line with uplift between 6 and 11."""
    data = [-10, -1, 10, 20, 30, 40, -30, -30, -30, -30, -30, -30]
    return TsunamiEvent1d(
        np.arange(len(data)),
        data,
        shore_cliff_height=20.0,
        displacement=10.0,
        displacement_start=6.0,
        displacement_end=11.0,
    )


class TestSimpleSetups:
    """Tests for analytic setups."""

    def test_dam_break_1d(self):
        """Heights split at the dam location, no momentum."""
        setup = DamBreak1d(25.0, 55.0, 3.0)

        assert at(setup.height, 2.0) == 25.0
        assert at(setup.height, 2.0, 5.0) == 25.0
        assert at(setup.height, 4.0) == 55.0
        assert at(setup.momentum_x, 4.0) == 0.0
        assert at(setup.momentum_y, 2.0, 2.0) == 0.0

    def test_dam_break_2d(self):
        """A circular column of water around the centre."""
        setup = DamBreak2d(10.0, 20.0, 0.0, 0.0, 3.0)

        assert at(setup.height, 2.0, 0.0) == 10.0
        assert at(setup.height, 2.0, 1.0) == 10.0
        assert at(setup.height, 4.0, 0.0) == 20.0
        assert at(setup.height, 2.5, 2.5) == 20.0
        assert at(setup.bathymetry, 1.0, 1.0) == -20.0

    def test_discontinuity(self):
        """All quantities switch at the split location."""
        setup = Discontinuity1d(10.0, 5.0, 3.0, -3.0, 4.0, -10.0, -5.0)

        assert at(setup.height, 3.9) == 10.0
        assert at(setup.momentum_x, 3.9) == 3.0
        assert at(setup.bathymetry, 3.9) == -10.0
        assert at(setup.height, 4.0) == 5.0
        assert at(setup.momentum_x, 4.0) == -3.0
        assert at(setup.bathymetry, 4.0) == -5.0

    def test_subcritical_flow(self):
        """Surface at sea level over the hump with constant discharge."""
        setup = SubcriticalFlow1d()

        assert at(setup.bathymetry, 10.0) == pytest.approx(-1.8)
        assert at(setup.bathymetry, 8.0) == pytest.approx(-1.8 - 0.05 * 4.0)
        assert at(setup.bathymetry, 20.0) == pytest.approx(-2.0)
        assert at(setup.height, 10.0) == pytest.approx(1.8)
        assert at(setup.momentum_x, 0.0) == pytest.approx(4.42)

    def test_supercritical_flow(self):
        """Shallower flow with smaller discharge."""
        setup = SupercriticalFlow1d()

        assert at(setup.bathymetry, 10.0) == pytest.approx(-0.13)
        assert at(setup.bathymetry, 13.0) == pytest.approx(-0.33)
        assert at(setup.momentum_x, 5.0) == pytest.approx(0.18)

    def test_artificial_tsunami(self):
        """Displacement is confined to the central square."""
        setup = ArtificialTsunami2d()

        assert at(setup.height, 0.0, 0.0) == 100.0
        assert at(setup.bathymetry, 0.0, 0.0) == -100.0
        assert at(setup.displacement, 500.0, 500.0) == pytest.approx(0.0, abs=1e-12)
        assert at(setup.displacement, 250.0, 500.0) == pytest.approx(5.0)
        assert at(setup.displacement, 750.0, 750.0) == pytest.approx(-5.0 * 0.75)
        assert at(setup.displacement, 1200.0, 500.0) == 0.0


class TestTsunamiEvent1d:
    """Tests for the profile driven tsunami setup."""

    def test_bathymetry_with_cliff(self, tsunami_1d):
        """Values near sea level are pushed onto the cliff."""
        assert at(tsunami_1d.bathymetry, 0.0) == pytest.approx(-20.0)
        assert at(tsunami_1d.bathymetry, 1.0) == pytest.approx(-20.0)
        assert at(tsunami_1d.bathymetry, 2.0) == pytest.approx(20.0)
        assert at(tsunami_1d.bathymetry, 3.0) == pytest.approx(20.0)
        assert at(tsunami_1d.bathymetry, 3.5) == pytest.approx(25.0)
        assert at(tsunami_1d.bathymetry, 4.0) == pytest.approx(30.0)
        assert at(tsunami_1d.bathymetry, 5.0) == pytest.approx(40.0)
        for x in range(6, 12):
            assert at(tsunami_1d.bathymetry, float(x)) == pytest.approx(-30.0)

    def test_interpolation_clamps(self, tsunami_1d):
        """Outside the profile the end values continue."""
        assert at(tsunami_1d.bathymetry, -5.0) == pytest.approx(-20.0)
        assert at(tsunami_1d.bathymetry, 50.0) == pytest.approx(-30.0)

    def test_heights(self, tsunami_1d):
        """Water fills to sea level, at least cliff deep, land stays dry."""
        assert at(tsunami_1d.height, 0.0) == pytest.approx(20.0)
        assert at(tsunami_1d.height, 1.0) == pytest.approx(20.0)
        for x in range(2, 6):
            assert at(tsunami_1d.height, float(x)) == 0.0
        assert at(tsunami_1d.height, 8.0) == pytest.approx(30.0)

    def test_displacement(self, tsunami_1d):
        """A full sine period between start and end, zero outside."""
        assert at(tsunami_1d.displacement, 6.0) == 0.0
        assert at(tsunami_1d.displacement, 7.0) == pytest.approx(10.0 * math.sin(math.radians(72.0)))
        assert at(tsunami_1d.displacement, 8.0) == pytest.approx(10.0 * math.sin(math.radians(144.0)))
        assert at(tsunami_1d.displacement, 9.0) == pytest.approx(-10.0 * math.sin(math.radians(36.0)))
        assert at(tsunami_1d.displacement, 11.0) == 0.0
        assert at(tsunami_1d.displacement, 3.0) == 0.0

    def test_from_csv(self, tmp_path):
        """Profiles are read from track_location/height columns."""
        path = tmp_path / "profile.csv"
        path.write_text(
            "# bathymetry profile\n"
            "track_location,height\n"
            "1000,-100\n"
            "1250,-50\n"
            "1500,10\n"
        )

        setup = TsunamiEvent1d.from_csv(path, shore_cliff_height=20.0)

        assert at(setup.bathymetry, 0.0) == pytest.approx(-100.0)
        assert at(setup.bathymetry, 125.0) == pytest.approx(-75.0)
        assert at(setup.bathymetry, 500.0) == pytest.approx(20.0)

    def test_rejects_short_profile(self):
        """A single sample cannot be interpolated."""
        with pytest.raises(ConfigurationError):
            TsunamiEvent1d([0.0], [-10.0])


class TestTsunamiEvent2d:
    """Tests for the raster driven tsunami setup."""

    @pytest.fixture
    def setup(self):
        x = np.array([0.0, 10.0, 20.0])
        y = np.array([0.0, 10.0])
        bathymetry = Raster.from_axes(x, y, [[-100.0, -50.0, 30.0], [-100.0, -50.0, 30.0]])
        displacement = Raster.from_axes(x, y, [[0.0, 2.0, 0.0], [0.0, 4.0, 0.0]])
        return TsunamiEvent2d(bathymetry, displacement, shore_cliff_height=20.0)

    def test_bilinear_interpolation(self, setup):
        """Values between samples are interpolated along both axes."""
        assert at(setup.bathymetry, 5.0, 5.0) == pytest.approx(-75.0)
        assert at(setup.displacement, 10.0, 5.0) == pytest.approx(3.0)
        assert at(setup.displacement, 5.0, 5.0) == pytest.approx(1.5)

    def test_clamped_outside(self, setup):
        """Beyond the raster the border values continue."""
        assert at(setup.bathymetry, -50.0, -50.0) == pytest.approx(-100.0)
        assert at(setup.bathymetry, 100.0, 100.0) == pytest.approx(30.0)

    def test_shore_handling(self, setup):
        """Heights and cliffs follow the raw bathymetry."""
        assert at(setup.height, 0.0, 0.0) == pytest.approx(100.0)
        assert at(setup.height, 20.0, 0.0) == 0.0
        # raw value at x = 17.5 is 10, within the cliff band on land
        assert at(setup.bathymetry, 17.5, 0.0) == pytest.approx(20.0)

    def test_from_npz(self, tmp_path):
        """Rasters load from x/y/z arrays."""
        path = tmp_path / "bathymetry.npz"
        np.savez(path, x=np.array([0.0, 1.0]), y=np.array([0.0, 1.0]), z=np.ones((2, 2)))

        raster = Raster.from_npz(path)

        assert raster.dx == 1.0
        assert raster.values.shape == (2, 2)

    def test_missing_arrays(self, tmp_path):
        """Incomplete raster files are configuration errors."""
        path = tmp_path / "broken.npz"
        np.savez(path, x=np.array([0.0, 1.0]))

        with pytest.raises(ConfigurationError):
            Raster.from_npz(path)

    def test_from_netcdf(self, tmp_path):
        """GMT style grids load their z variable over the x and y axes."""
        path = tmp_path / "bathymetry.nc"
        z = np.array([[-100.0, -50.0, 30.0], [-90.0, -40.0, 35.0]])
        xr.Dataset(
            {"z": (("y", "x"), z)},
            coords={"x": [100.0, 110.0, 120.0], "y": [0.0, 20.0]},
        ).to_netcdf(path)

        raster = Raster.from_netcdf(path)

        assert (raster.x0, raster.y0, raster.dx, raster.dy) == (100.0, 0.0, 10.0, 20.0)
        np.testing.assert_allclose(np.asarray(raster.values), z)
        assert float(raster.sample(jnp.asarray(105.0), jnp.asarray(10.0))) == pytest.approx(-70.0)

    def test_netcdf_missing_variable(self, tmp_path):
        """Asking for an absent variable is a configuration error."""
        path = tmp_path / "grid.nc"
        xr.Dataset({"elevation": (("y", "x"), np.zeros((2, 2)))}, coords={"x": [0.0, 1.0], "y": [0.0, 1.0]}).to_netcdf(
            path
        )

        with pytest.raises(ConfigurationError, match="z"):
            Raster.from_netcdf(path)

    def test_event_from_netcdf_files(self, tmp_path):
        """Tsunami events pick the NetCDF loader by file suffix."""
        coords = {"x": [0.0, 10.0, 20.0], "y": [0.0, 10.0]}
        bathymetry_path = tmp_path / "bathymetry.nc"
        displacement_path = tmp_path / "displacement.nc"
        xr.Dataset({"z": (("y", "x"), np.full((2, 3), -100.0))}, coords=coords).to_netcdf(bathymetry_path)
        xr.Dataset({"z": (("y", "x"), np.full((2, 3), 1.5))}, coords=coords).to_netcdf(displacement_path)

        setup = TsunamiEvent2d.from_files(bathymetry_path, displacement_path)

        assert at(setup.bathymetry, 5.0, 5.0) == pytest.approx(-100.0)
        assert at(setup.displacement, 5.0, 5.0) == pytest.approx(1.5)


class TestCheckPointSetup:
    """Tests for resampling stored arrays."""

    def test_reproduces_stored_grid(self):
        """Evaluating on the same grid returns the stored arrays."""
        rng = np.random.default_rng(11)
        h = rng.uniform(1.0, 2.0, size=(5, 6))
        b = rng.uniform(-3.0, -2.0, size=(5, 6))
        setup = CheckPointSetup(h=h, hu=np.zeros_like(h), hv=np.ones_like(h), b=b)

        patch = WavePropagation2d(4, 3)
        patch.init_with_setup(setup, scale=2.0)

        np.testing.assert_allclose(np.asarray(patch.arena.current_h), h)
        np.testing.assert_allclose(np.asarray(patch.arena.b), b)
        np.testing.assert_allclose(np.asarray(patch.momentum_y), 1.0)

    def test_clamps_beyond_stored_extent(self):
        """A larger grid repeats the border values of the stored one."""
        setup = CheckPointSetup(h=np.array([1.0, 2.0, 3.0]), hu=np.zeros(3), hv=None, b=np.full(3, -5.0))

        patch = WavePropagation1d(4)
        patch.init_with_setup(setup)

        np.testing.assert_allclose(np.asarray(patch.arena.current_h), [1.0, 2.0, 3.0, 3.0, 3.0, 3.0])


class TestEngineInitialization:
    """Tests for evaluating setups on patches."""

    def test_cell_centres(self):
        """Interior cell ix is evaluated at (ix + 0.5) * scale."""
        patch = WavePropagation1d(10)
        patch.init_with_setup(DamBreak1d(10.0, 5.0, 5.0), scale=1.0)

        h = np.asarray(patch.height)
        assert np.all(h[:5] == 10.0)
        assert np.all(h[5:] == 5.0)

    def test_displacement_added_to_bathymetry(self, tsunami_1d):
        """Stored bathymetry includes the seafloor displacement."""
        patch = WavePropagation1d(12)
        patch.init_with_setup(tsunami_1d)

        x = 6.5
        expected = -30.0 + 10.0 * math.sin(2.0 * math.pi * (x - 6.0) / 5.0)
        assert float(patch.bathymetry[6]) == pytest.approx(expected)


class TestFactory:
    """Tests for building setups from settings."""

    def test_default_location_is_domain_centre(self):
        """Unset dam positions default to the middle of the domain."""
        setup = create_setup(SetupSettings(kind=SetupKind.DAM_BREAK_1D), GridSettings(nx=40, cell_size=0.5))

        assert isinstance(setup, DamBreak1d)
        assert setup.location == pytest.approx(10.0)

    def test_dam_break_2d_centre(self):
        """The circular dam is centred in the 2D domain."""
        setup = create_setup(
            SetupSettings(kind=SetupKind.DAM_BREAK_2D, radius=5.0),
            GridSettings(nx=20, ny=10, cell_size=1.0),
        )

        assert isinstance(setup, DamBreak2d)
        assert (setup.center_x, setup.center_y) == (10.0, 5.0)

    @pytest.mark.parametrize(
        "kind,cls",
        [
            (SetupKind.SUBCRITICAL_FLOW_1D, SubcriticalFlow1d),
            (SetupKind.SUPERCRITICAL_FLOW_1D, SupercriticalFlow1d),
            (SetupKind.ARTIFICIAL_TSUNAMI_2D, ArtificialTsunami2d),
            (SetupKind.DISCONTINUITY_1D, Discontinuity1d),
        ],
    )
    def test_kinds(self, kind, cls):
        """Each kind maps to its setup class."""
        assert isinstance(create_setup(SetupSettings(kind=kind), GridSettings(nx=10)), cls)
