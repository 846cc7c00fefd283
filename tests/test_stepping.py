"""Tests for ghost cell boundaries and CFL time step control."""

import math

import jax.numpy as jnp
import numpy as np
import pytest

from surge.core.constants import GRAVITY
from surge.patches import WavePropagation1d, WavePropagation2d
from surge.patches.boundary import ghost_outflow_1d, ghost_outflow_2d
from surge.patches.cfl import cfl_time_step


class TestGhostOutflow:
    """Tests for zero-gradient boundaries."""

    def test_1d_copies_neighbours(self):
        """Ghost cells take every quantity of the adjacent interior cell."""
        h = jnp.array([0.0, 1.0, 2.0, 3.0, 0.0])
        hu = jnp.array([9.0, 4.0, 5.0, 6.0, 9.0])
        b = jnp.array([0.0, -1.0, -2.0, -3.0, 0.0])

        h, hu, b = ghost_outflow_1d(h, hu, b)

        assert float(h[0]) == 1.0 and float(h[-1]) == 3.0
        assert float(hu[0]) == 4.0 and float(hu[-1]) == 6.0
        assert float(b[0]) == -1.0 and float(b[-1]) == -3.0

    def test_2d_corners_follow_edges(self):
        """Corner ghosts should equal the nearest interior corner cell."""
        rng = np.random.default_rng(3)
        q = jnp.asarray(rng.uniform(size=(5, 6)))

        h, _, _, _ = ghost_outflow_2d(q, q, q, q)

        assert float(h[0, 0]) == float(q[1, 1])
        assert float(h[-1, -1]) == float(q[-2, -2])
        np.testing.assert_array_equal(np.asarray(h[0, 1:-1]), np.asarray(q[1, 1:-1]))
        np.testing.assert_array_equal(np.asarray(h[1:-1, -1]), np.asarray(q[1:-1, -2]))

    def test_idempotent(self):
        """Applying the boundary twice should equal applying it once."""
        rng = np.random.default_rng(7)
        patch = WavePropagation2d(6, 4)
        patch.load_arrays(
            h=rng.uniform(1.0, 5.0, size=(6, 8)),
            hu=rng.uniform(-1.0, 1.0, size=(6, 8)),
            hv=rng.uniform(-1.0, 1.0, size=(6, 8)),
            b=rng.uniform(-5.0, -1.0, size=(6, 8)),
        )

        patch.set_ghost_outflow()
        once = {k: np.asarray(v) for k, v in patch.raw_arrays().items()}
        patch.set_ghost_outflow()
        twice = {k: np.asarray(v) for k, v in patch.raw_arrays().items()}

        for name in once:
            np.testing.assert_array_equal(once[name], twice[name])


class TestTimeStep:
    """Tests for the CFL controller."""

    def test_still_water_1d(self):
        """Still water limits the step by its gravity wave speed."""
        patch = WavePropagation1d(20)
        patch.load_arrays(h=jnp.full(22, 4.0), hu=jnp.zeros(22), b=jnp.full(22, -4.0))

        dt = patch.compute_max_timestep(2.0)

        assert dt == pytest.approx(0.5 * 2.0 / math.sqrt(GRAVITY * 4.0))

    def test_neighbour_height_bounds_speed(self):
        """A tall neighbour raises the signal speed of a shallow cell."""
        h = jnp.full(12, 1.0).at[5].set(9.0)
        hu = jnp.zeros(12).at[4].set(2.0)
        patch = WavePropagation1d(10)
        patch.load_arrays(h=h, hu=hu, b=jnp.full(12, -1.0))

        dt = patch.compute_max_timestep(1.0)

        assert dt == pytest.approx(0.5 / (2.0 + math.sqrt(GRAVITY * 9.0)))

    def test_still_water_2d(self):
        """2D steps use the larger of both momenta and the 2D default factor."""
        patch = WavePropagation2d(5, 5)
        patch.load_arrays(
            h=jnp.full((7, 7), 4.0),
            hu=jnp.full((7, 7), 4.0),
            hv=jnp.full((7, 7), -8.0),
            b=jnp.full((7, 7), -4.0),
        )

        dt = patch.compute_max_timestep(1.0)

        assert dt == pytest.approx(0.45 / (2.0 + math.sqrt(GRAVITY * 4.0)))

    def test_no_water_gives_infinite_step(self):
        """An empty grid has no finite time step."""
        assert math.isinf(WavePropagation1d(10).compute_max_timestep(1.0))
        assert math.isinf(WavePropagation2d(3, 3).compute_max_timestep(1.0))

    def test_nan_propagates(self):
        """Non-finite speeds should not masquerade as a valid step."""
        assert math.isnan(cfl_time_step(float("nan"), 1.0, 0.5))
        assert math.isinf(cfl_time_step(0.0, 1.0, 0.5))

    def test_update_radius_ignores_far_cells(self):
        """With a radius, cells far from the centre do not limit the step."""
        h = jnp.full(102, 1.0).at[5].set(100.0)
        patch = WavePropagation1d(100)
        patch.load_arrays(h=h, hu=jnp.zeros(102), b=jnp.full(102, -1.0))

        full = patch.compute_max_timestep(1.0)
        local = patch.compute_max_timestep(1.0, update_radius=10)

        assert local == pytest.approx(0.5 / math.sqrt(GRAVITY * 1.0))
        assert full < local

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_random_states_stay_positive(self, seed):
        """Stepping with the CFL step should keep heights non-negative."""
        rng = np.random.default_rng(seed)
        n = 64
        h = rng.uniform(2.0, 6.0, size=n + 2)
        hu = rng.uniform(-2.0, 2.0, size=n + 2)
        patch = WavePropagation1d(n)
        patch.load_arrays(h=h, hu=hu, b=np.full(n + 2, -6.0))

        for _ in range(20):
            dt = patch.compute_max_timestep(1.0)
            assert math.isfinite(dt) and dt > 0.0
            patch.set_ghost_outflow()
            patch.time_step(dt)
            assert float(jnp.min(patch.height)) >= 0.0

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_random_2d_states_stay_positive(self, seed):
        """Dimensionally split steps with the CFL step keep heights non-negative."""
        rng = np.random.default_rng(seed)
        shape = (18, 18)
        patch = WavePropagation2d(16, 16)
        patch.load_arrays(
            h=rng.uniform(2.0, 6.0, size=shape),
            hu=rng.uniform(-2.0, 2.0, size=shape),
            hv=rng.uniform(-2.0, 2.0, size=shape),
            b=np.full(shape, -6.0),
        )

        for _ in range(30):
            dt = patch.compute_max_timestep(1.0)
            assert math.isfinite(dt) and dt > 0.0
            patch.set_ghost_outflow()
            patch.time_step(dt)
            assert float(jnp.min(patch.height)) >= 0.0
