"""Unit tests for primitive signed distance fields.

Tests cover:
- Sign convention (negative inside, zero on the surface, positive outside)
- Exact distances for sphere, cuboid, plane and torus
- Plane normal normalization
- Mandelbulb distance estimate in the far field
"""

import math

import numpy as np
import pytest


class TestSphere:
    """Tests for the Sphere primitive."""

    def test_sign_convention(self):
        """Test inside, surface and outside values for a unit sphere."""
        from sdfpath.geometry.primitives import Sphere

        d = Sphere(1.0).evaluate([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(-1.0, abs=1e-6)
        assert d[1] == pytest.approx(0.0, abs=1e-6)
        assert d[2] == pytest.approx(1.0, abs=1e-6)

    def test_offset_center(self):
        """Test that the distance is measured from the center."""
        from sdfpath.geometry.primitives import Sphere

        d = Sphere(0.5, center=(1.0, 2.0, 3.0)).evaluate([(1.0, 2.0, 5.0)])

        assert d[0] == pytest.approx(1.5, abs=1e-6)

    def test_single_point_input(self):
        """Test that a single (x, y, z) point is accepted."""
        from sdfpath.geometry.primitives import Sphere

        d = Sphere(2.0).evaluate((0.0, 3.0, 0.0))

        assert d.shape == (1,)
        assert d[0] == pytest.approx(1.0, abs=1e-6)


class TestCuboid:
    """Tests for the Cuboid primitive."""

    def test_inside_is_distance_to_nearest_face(self):
        """Test that the interior value is minus the distance to the nearest face."""
        from sdfpath.geometry.primitives import Cuboid

        d = Cuboid(half_extents=(1.0, 2.0, 3.0)).evaluate([(0.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(-1.0, abs=1e-6)

    def test_outside_face_and_corner(self):
        """Test exterior distances to a face and to a corner."""
        from sdfpath.geometry.primitives import Cuboid

        box = Cuboid(half_extents=(1.0, 2.0, 3.0))
        d = box.evaluate([(2.0, 0.0, 0.0), (2.0, 3.0, 4.0)])

        assert d[0] == pytest.approx(1.0, abs=1e-6)
        assert d[1] == pytest.approx(math.sqrt(3.0), abs=1e-5)

    def test_surface_is_zero(self):
        """Test that points on the faces evaluate to zero."""
        from sdfpath.geometry.primitives import Cuboid

        d = Cuboid(half_extents=(0.5, 0.5, 0.5), center=(1.0, 0.0, 0.0)).evaluate(
            [(1.5, 0.0, 0.0), (1.0, 0.5, 0.2)]
        )

        assert np.allclose(d, 0.0, atol=1e-6)


class TestPlane:
    """Tests for the Plane primitive."""

    def test_default_is_ground(self):
        """Test that the default plane is z = 0 with the solid below."""
        from sdfpath.geometry.primitives import Plane

        d = Plane().evaluate([(3.0, -4.0, 2.0), (5.0, 5.0, -1.0)])

        assert d[0] == pytest.approx(2.0, abs=1e-6)
        assert d[1] == pytest.approx(-1.0, abs=1e-6)

    def test_normal_is_normalized(self):
        """Test that a non-unit normal gives true distances."""
        from sdfpath.geometry.primitives import Plane

        plane = Plane(normal=(0.0, 0.0, 5.0), point=(0.0, 0.0, 1.0))
        d = plane.evaluate([(0.0, 0.0, 4.0)])

        assert d[0] == pytest.approx(3.0, abs=1e-6)

    def test_diagonal_plane(self):
        """Test a plane through the origin with a diagonal normal."""
        from sdfpath.geometry.primitives import Plane

        d = Plane(normal=(-1.0, 1.0, 0.0)).evaluate([(-1.0, 1.0, 7.0)])

        assert d[0] == pytest.approx(math.sqrt(2.0), abs=1e-5)


class TestTorus:
    """Tests for the Torus primitive (axis along z)."""

    def test_values_on_ring_and_axis(self):
        """Test values at the tube center, the surface and the axis."""
        from sdfpath.geometry.primitives import Torus

        torus = Torus(1.0, 0.25)
        d = torus.evaluate(
            [
                (1.0, 0.0, 0.0),  # tube center
                (0.0, -1.0, 0.25),  # top of the tube
                (0.0, 0.0, 0.0),  # on the axis
                (2.0, 0.0, 0.0),  # outside the ring
            ]
        )

        assert d[0] == pytest.approx(-0.25, abs=1e-6)
        assert d[1] == pytest.approx(0.0, abs=1e-6)
        assert d[2] == pytest.approx(0.75, abs=1e-6)
        assert d[3] == pytest.approx(0.75, abs=1e-6)


class TestMandelbulb:
    """Tests for the Mandelbulb distance estimator."""

    def test_far_field_estimate(self):
        """Test the estimate outside the bailout radius: 0.5 * r * ln(r)."""
        from sdfpath.geometry.primitives import Mandelbulb

        d = Mandelbulb().evaluate([(3.0, 0.0, 0.0), (0.0, 4.0, 0.0)])

        assert d[0] == pytest.approx(0.5 * 3.0 * math.log(3.0), rel=1e-4)
        assert d[1] == pytest.approx(0.5 * 4.0 * math.log(4.0), rel=1e-4)

    def test_estimate_is_positive_and_bounded_outside(self):
        """Test that distant points are outside and not farther than the origin."""
        from sdfpath.geometry.primitives import Mandelbulb

        rng = np.random.default_rng(0)
        dirs = rng.normal(size=(64, 3))
        dirs /= np.linalg.norm(dirs, axis=1, keepdims=True)
        points = 3.0 * dirs
        d = Mandelbulb().evaluate(points)

        assert np.all(d > 0.0)
        assert np.all(d < 3.0)

    def test_center_is_finite_and_inside(self):
        """Test that the estimate at the exact center is a finite interior value."""
        from sdfpath.geometry.primitives import Mandelbulb

        d = Mandelbulb().evaluate([(0.0, 0.0, 0.0)])

        assert np.isfinite(d[0])
        assert d[0] <= 0.0

    def test_repr(self):
        """Test the string representation."""
        from sdfpath.geometry.primitives import Mandelbulb

        assert "power=8.0" in repr(Mandelbulb())
