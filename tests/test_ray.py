"""Unit tests for the Ray dataclass and its helpers.

Tests cover:
- Evaluating points along a ray
- Constructing rays with make_ray
"""

import taichi as ti


class TestRay:
    """Tests for Ray construction and evaluation."""

    def test_ray_at(self):
        """Test that ray_at walks along the direction, forwards and backwards."""
        from sdfpath.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=3)

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -1.0))
            result[0] = ray_at(ray, 0.0)
            result[1] = ray_at(ray, 5.0)
            result[2] = ray_at(ray, -1.0)

        test_kernel()
        for i, expected_z in enumerate((3.0, -2.0, 4.0)):
            r = result[i]
            assert abs(r[0] - 1.0) < 1e-6
            assert abs(r[1] - 2.0) < 1e-6
            assert abs(r[2] - expected_z) < 1e-6

    def test_make_ray_keeps_fields(self):
        """Test that make_ray stores origin and direction unchanged."""
        from sdfpath.core.ray import make_ray, vec3

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.5, -0.5, 2.0), vec3(0.0, 1.0, 0.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        assert list(origin[None]) == [0.5, -0.5, 2.0]
        assert list(direction[None]) == [0.0, 1.0, 0.0]
