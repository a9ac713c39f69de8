"""Unit tests for distance field composition operators.

Tests cover:
- Boolean operators (union, smooth union, intersection, difference)
- Distance modifiers (shell, eversion, round)
- Domain transforms (translate, rotate, repeat)
- Fluent composition and NaN propagation for degenerate inputs
"""

import math

import numpy as np
import pytest


def _two_spheres():
    from sdfpath.geometry.primitives import Sphere

    return Sphere(1.0, center=(-2.0, 0.0, 0.0)), Sphere(1.0, center=(2.0, 0.0, 0.0))


class TestBooleanOperators:
    """Tests for union, intersection, difference and smooth union."""

    def test_union_is_min(self):
        """Test that a union takes the nearer child."""
        a, b = _two_spheres()
        d = a.union(b).evaluate([(0.0, 0.0, 0.0), (-2.0, 0.0, 0.0), (2.5, 0.0, 0.0)])

        assert np.allclose(d, [1.0, -1.0, -0.5], atol=1e-6)

    def test_intersection_is_max(self):
        """Test that an intersection takes the farther child."""
        from sdfpath.geometry.primitives import Sphere

        lens = Sphere(1.0, center=(-0.5, 0.0, 0.0)).intersect(Sphere(1.0, center=(0.5, 0.0, 0.0)))
        d = lens.evaluate([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(-0.5, abs=1e-6)
        assert d[1] == pytest.approx(0.5, abs=1e-6)

    def test_difference_removes_solid(self):
        """Test that subtracting a sphere hollows out the center."""
        from sdfpath.geometry.primitives import Sphere

        hollow = Sphere(1.0).subtract(Sphere(0.5))
        d = hollow.evaluate([(0.0, 0.0, 0.0), (0.75, 0.0, 0.0), (2.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(0.5, abs=1e-6)
        assert d[1] == pytest.approx(-0.25, abs=1e-6)
        assert d[2] == pytest.approx(1.0, abs=1e-6)

    def test_smooth_union_with_zero_radius_is_union(self):
        """Test that k <= 0 gives exactly the sharp union."""
        a, b = _two_spheres()
        points = np.random.default_rng(1).uniform(-4.0, 4.0, size=(200, 3))

        sharp = a.union(b).evaluate(points)
        for k in (0.0, -1.0):
            assert np.array_equal(a.smooth_union(b, k).evaluate(points), sharp)

    def test_smooth_union_blends_below_min(self):
        """Test the blend value at the midpoint: d - k / 4."""
        a, b = _two_spheres()
        d = a.smooth_union(b, 0.4).evaluate([(0.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(1.0 - 0.1, abs=1e-6)

    def test_smooth_union_never_exceeds_union(self):
        """Test that the smooth minimum is at most the exact minimum."""
        a, b = _two_spheres()
        points = np.random.default_rng(2).uniform(-4.0, 4.0, size=(200, 3))

        smooth = a.smooth_union(b, 0.5).evaluate(points)
        sharp = a.union(b).evaluate(points)

        assert np.all(smooth <= sharp + 1e-6)


class TestModifiers:
    """Tests for shell, eversion and round."""

    def test_shell(self):
        """Test that a shell is thin around the child surface."""
        from sdfpath.geometry.primitives import Sphere

        d = Sphere(1.0).shell(0.1).evaluate([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.1, 0.0, 0.0)])

        assert np.allclose(d, [0.9, -0.1, 0.0], atol=1e-6)

    def test_eversion_negates(self):
        """Test that eversion swaps inside and outside."""
        from sdfpath.geometry.primitives import Sphere

        points = [(0.0, 0.0, 0.0), (3.0, 0.0, 0.0)]
        sphere = Sphere(1.0)

        assert np.array_equal(sphere.evert().evaluate(points), -sphere.evaluate(points))

    def test_round_inflates(self):
        """Test that rounding subtracts the radius everywhere."""
        from sdfpath.geometry.primitives import Cuboid

        d = Cuboid(half_extents=(0.5, 0.5, 0.5)).round(0.1).evaluate([(1.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(0.4, abs=1e-6)


class TestTransforms:
    """Tests for translate, rotate and repeat."""

    def test_translate(self):
        """Test that a translated sphere is centered at the offset."""
        from sdfpath.geometry.primitives import Sphere

        d = Sphere(1.0).translate((0.0, 0.0, 3.0)).evaluate([(0.0, 0.0, 3.0), (0.0, 0.0, 0.0)])

        assert np.allclose(d, [-1.0, 2.0], atol=1e-6)

    def test_rotate_quarter_turn(self):
        """Test that a quarter turn about z moves the long box axis from x to y."""
        from sdfpath.geometry.primitives import Cuboid

        bar = Cuboid(half_extents=(2.0, 0.5, 0.5)).rotate((0.0, 0.0, 1.0), 0.5 * math.pi)
        d = bar.evaluate([(0.0, 2.0, 0.0), (2.0, 0.0, 0.0)])

        assert d[0] == pytest.approx(0.0, abs=1e-5)
        assert d[1] == pytest.approx(1.5, abs=1e-5)

    def test_rotation_matrix_properties(self):
        """Test that the Rodrigues matrix is a proper rotation."""
        from sdfpath.geometry.operators import rotation_matrix

        r = rotation_matrix((1.0, 2.0, 3.0), 0.7)

        assert np.allclose(r @ r.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(r) == pytest.approx(1.0)
        assert np.allclose(rotation_matrix((0.0, 0.0, 2.0), 0.5 * math.pi) @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])

    def test_zero_axis_propagates_nan(self):
        """Test that a zero rotation axis yields NaN instead of raising."""
        from sdfpath.geometry.operators import rotation_matrix
        from sdfpath.geometry.primitives import Sphere

        assert np.isnan(rotation_matrix((0.0, 0.0, 0.0), 1.0)).any()
        d = Sphere(1.0).rotate((0.0, 0.0, 0.0), 1.0).evaluate([(2.0, 0.0, 0.0)])
        assert np.isnan(d[0])

    def test_repeat_wraps_to_nearest_cell(self):
        """Test that every lattice point carries a copy of the child."""
        from sdfpath.geometry.primitives import Sphere

        grid = Sphere(0.1).repeat((1.0, 1.0, 1.0))
        d = grid.evaluate([(3.0, -2.0, 5.0), (3.5, 0.0, 0.0), (0.2, 0.0, 0.0)])

        assert np.allclose(d, [-0.1, 0.4, 0.1], atol=1e-5)


class TestComposition:
    """Tests for fluent chaining."""

    def test_chained_tree(self):
        """Test a small tree built with the fluent methods."""
        from sdfpath.geometry.operators import Translate
        from sdfpath.geometry.primitives import Cuboid, Plane, Sphere

        body = (
            Sphere(1.0)
            .smooth_union(Cuboid(half_extents=(0.5, 0.5, 2.0)), 0.2)
            .shell(0.05)
            .subtract(Plane(normal=(0.0, 0.0, -1.0)))
            .translate((0.0, 0.0, 1.0))
        )

        assert isinstance(body, Translate)
        # Center of the hollow body is empty space
        assert body.evaluate([(0.0, 0.0, 1.0)])[0] > 0.0
        assert "Shell" in repr(body)
