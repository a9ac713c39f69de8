"""Unit tests for the path integrator.

Tests cover:
- Emissive hits and escaping rays
- Albedo attenuation of a diffuse bounce
- Energy bounds and the bounce limit
- Determinism for a fixed seed
"""

import numpy as np
import pytest


def _ground(albedo=(0.5, 0.5, 0.5)):
    from sdfpath.geometry.primitives import Plane
    from sdfpath.materials.lambertian import Lambertian

    return Plane().material(Lambertian(albedo))


class TestPathTermination:
    """Tests for paths that end on their first event."""

    def test_emissive_hit_returns_radiance(self):
        """Test that hitting a light returns its radiance exactly."""
        from sdfpath.core.integrator import estimate_radiance
        from sdfpath.geometry.primitives import Sphere
        from sdfpath.materials.emissive import Emissive
        from sdfpath.scene.background import ConstantBackground

        light = Sphere(1.0).material(Emissive((2.0, 1.0, 0.5)))
        colors = estimate_radiance(
            light,
            ConstantBackground((0.0, 0.0, 0.0)),
            origins=[(0.0, -5.0, 0.0)] * 4,
            directions=[(0.0, 1.0, 0.0)] * 4,
        )

        assert np.array_equal(colors, np.tile(np.float32([2.0, 1.0, 0.5]), (4, 1)))

    def test_miss_returns_background(self):
        """Test that an escaping ray returns the background radiance."""
        from sdfpath.core.integrator import estimate_radiance
        from sdfpath.scene.background import ConstantBackground

        colors = estimate_radiance(
            _ground(),
            ConstantBackground((0.25, 0.5, 1.0)),
            origins=[(0.0, 0.0, 1.0)],
            directions=[(0.0, 0.0, 1.0)],
        )

        assert np.array_equal(colors[0], np.float32([0.25, 0.5, 1.0]))

    def test_gradient_background_direction(self):
        """Test that the gradient background depends on the ray's z."""
        from sdfpath.scene.background import GradientBackground, background_radiance

        bg = GradientBackground(horizon=(1.0, 1.0, 1.0), zenith=(0.0, 0.0, 0.0))
        out = background_radiance(bg, [(0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (1.0, 0.0, 0.0)])

        assert np.allclose(out, [[0.0] * 3, [1.0] * 3, [0.5] * 3], atol=1e-6)

    def test_sun_sky_background(self):
        """Test that the sun disc is brighter than the sky."""
        from sdfpath.scene.background import SunSkyBackground, background_radiance

        bg = SunSkyBackground(sun_direction=(0.0, 0.0, 1.0))
        out = background_radiance(bg, [(0.0, 0.0, 1.0), (1.0, 0.0, 0.0)])

        assert np.allclose(out[0], [15.0, 12.75, 11.25], atol=1e-4)
        assert np.allclose(out[1], [0.2, 0.35, 0.5], atol=1e-6)


class TestDiffuseBounces:
    """Tests for Lambertian scattering."""

    def test_single_bounce_is_albedo_times_background(self):
        """Test that every path off an open ground returns albedo * background."""
        from sdfpath.core.integrator import estimate_radiance
        from sdfpath.scene.background import ConstantBackground

        n = 256
        colors = estimate_radiance(
            _ground((0.5, 0.25, 1.0)),
            ConstantBackground((1.0, 1.0, 1.0)),
            origins=[(0.0, 0.0, 5.0)] * n,
            directions=[(0.0, 0.0, -1.0)] * n,
            seed=11,
        )

        assert np.allclose(colors, np.tile([0.5, 0.25, 1.0], (n, 1)), atol=1e-6)

    def test_energy_is_bounded(self, diffuse_scene):
        """Test that albedo <= 1 under a unit background never exceeds 1."""
        from sdfpath.core.integrator import estimate_radiance

        rng = np.random.default_rng(6)
        dirs = rng.normal(size=(512, 3))
        dirs /= np.linalg.norm(dirs, axis=1, keepdims=True)
        origins = np.tile([0.0, -4.0, 1.0], (512, 1))
        colors = estimate_radiance(
            diffuse_scene.scene_map, diffuse_scene.background, origins, dirs, seed=2
        )

        assert np.all(colors >= 0.0)
        assert np.all(colors <= 1.0 + 1e-6)

    def test_closed_room_is_black(self):
        """Test that paths trapped inside a closed diffuse room end black."""
        from sdfpath.core.integrator import MAX_BOUNCES, estimate_radiance
        from sdfpath.geometry.primitives import Sphere
        from sdfpath.materials.lambertian import Lambertian
        from sdfpath.scene.background import ConstantBackground

        room = Sphere(3.0).evert().material(Lambertian((0.9, 0.9, 0.9)))
        colors = estimate_radiance(
            room,
            ConstantBackground((1.0, 1.0, 1.0)),
            origins=[(0.0, 0.0, 0.0)] * 64,
            directions=[(0.0, 0.0, 1.0)] * 64,
        )

        assert MAX_BOUNCES == 6
        assert np.array_equal(colors, np.zeros((64, 3), dtype=np.float32))


class TestDeterminism:
    """Tests for seeded reproducibility."""

    def test_same_seed_same_result(self, diffuse_scene):
        """Test that a fixed seed reproduces the estimate bit for bit."""
        from sdfpath.core.integrator import estimate_radiance

        args = (
            diffuse_scene.scene_map,
            diffuse_scene.background,
            [(0.0, -4.0, 1.0)] * 128,
            [(0.0, 1.0, 0.0)] * 128,
        )

        assert np.array_equal(estimate_radiance(*args, seed=5), estimate_radiance(*args, seed=5))
        assert not np.array_equal(estimate_radiance(*args, seed=5), estimate_radiance(*args, seed=6))

    def test_shape_mismatch(self, diffuse_scene):
        """Test that origins and directions must match."""
        from sdfpath.core.integrator import estimate_radiance

        with pytest.raises(ValueError):
            estimate_radiance(
                diffuse_scene.scene_map,
                diffuse_scene.background,
                [(0.0, 0.0, 1.0)],
                [(0.0, 0.0, 1.0)] * 2,
            )
