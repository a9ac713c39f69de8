"""Primitive signed distance fields.

Each primitive implements the closed-form (or iterative, for the Mandelbulb)
distance estimate of its shape. All closed-form primitives are 1-Lipschitz,
so the returned value never overestimates the distance to the surface and
sphere tracing cannot step through them.

Scenes use a z-up convention: the default plane is the ground z = 0 and the
torus lies in the xy-plane.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from sdfpath.core.ray import vec3
from sdfpath.geometry.base import DistanceField

# Lower bound on |z| in the Mandelbulb iteration
MANDELBULB_MIN_RADIUS = 1e-6


@ti.data_oriented
class Sphere(DistanceField):
    """Sphere of a given radius.

    Attributes:
        center: Center of the sphere (x, y, z).
        radius: Radius of the sphere.
    """

    def __init__(
        self,
        radius: float = 1.0,
        center: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.radius = float(radius)
        self.center = vec3(center[0], center[1], center[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return tm.length(p - self.center) - self.radius

    def __repr__(self) -> str:
        return f"Sphere(radius={self.radius}, center={tuple(self.center.to_list())})"


@ti.data_oriented
class Cuboid(DistanceField):
    """Axis-aligned box given by its half extents.

    Attributes:
        center: Center of the box.
        half_extents: Half of the box size along x, y and z.
    """

    def __init__(
        self,
        half_extents: tuple[float, float, float] = (1.0, 1.0, 1.0),
        center: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.half_extents = vec3(half_extents[0], half_extents[1], half_extents[2])
        self.center = vec3(center[0], center[1], center[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        # Distance to the clamped corner outside, to the nearest face inside
        q = ti.abs(p - self.center) - self.half_extents
        outside = tm.length(ti.max(q, 0.0))
        inside = ti.min(ti.max(q.x, ti.max(q.y, q.z)), 0.0)
        return outside + inside

    def __repr__(self) -> str:
        return (
            f"Cuboid(half_extents={tuple(self.half_extents.to_list())}, "
            f"center={tuple(self.center.to_list())})"
        )


@ti.data_oriented
class Plane(DistanceField):
    """Infinite plane; the solid is the half-space behind the normal.

    Attributes:
        normal: Unit normal pointing out of the solid (normalized on creation).
        point: Any point lying in the plane.
    """

    def __init__(
        self,
        normal: tuple[float, float, float] = (0.0, 0.0, 1.0),
        point: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        n = np.asarray(normal, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            n = n / np.linalg.norm(n)
        self.normal = vec3(n[0], n[1], n[2])
        self.point = vec3(point[0], point[1], point[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return tm.dot(self.normal, p - self.point)

    def __repr__(self) -> str:
        return f"Plane(normal={tuple(self.normal.to_list())}, point={tuple(self.point.to_list())})"


@ti.data_oriented
class Torus(DistanceField):
    """Torus centered at the origin with its axis along z.

    Attributes:
        major_radius: Distance from the axis to the center of the tube.
        minor_radius: Radius of the tube.
    """

    def __init__(self, major_radius: float = 1.0, minor_radius: float = 0.25) -> None:
        self.major_radius = float(major_radius)
        self.minor_radius = float(minor_radius)

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        ring = ti.sqrt(p.x * p.x + p.y * p.y) - self.major_radius
        return ti.sqrt(ring * ring + p.z * p.z) - self.minor_radius

    def __repr__(self) -> str:
        return f"Torus(major_radius={self.major_radius}, minor_radius={self.minor_radius})"


@ti.data_oriented
class Mandelbulb(DistanceField):
    """Mandelbulb fractal centered at the origin.

    Uses the escape-time distance estimator 0.5 * log(r) * r / dr, iterating
    z -> z^power + p in spherical coordinates while tracking the running
    derivative dr. The estimate is a close but not exact lower bound.

    Attributes:
        power: Exponent of the spherical power map (8 for the classic bulb).
        iterations: Maximum number of iterations.
        bailout: Escape radius.
    """

    def __init__(self, power: float = 8.0, iterations: int = 12, bailout: float = 2.0) -> None:
        self.power = float(power)
        self.iterations = int(iterations)
        self.bailout = float(bailout)

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        z = p
        dr = 1.0
        r = ti.max(tm.length(z), MANDELBULB_MIN_RADIUS)
        for _ in range(self.iterations):
            r = ti.max(tm.length(z), MANDELBULB_MIN_RADIUS)
            if r > self.bailout:
                break
            theta = ti.acos(ti.min(ti.max(z.z / r, -1.0), 1.0)) * self.power
            phi = ti.atan2(z.y, z.x) * self.power
            dr = ti.pow(r, self.power - 1.0) * self.power * dr + 1.0
            zr = ti.pow(r, self.power)
            z = zr * vec3(ti.sin(theta) * ti.cos(phi), ti.sin(phi) * ti.sin(theta), ti.cos(theta)) + p
        return 0.5 * ti.log(r) * r / dr

    def __repr__(self) -> str:
        return (
            f"Mandelbulb(power={self.power}, iterations={self.iterations}, "
            f"bailout={self.bailout})"
        )


__all__ = [
    "Sphere",
    "Cuboid",
    "Plane",
    "Torus",
    "Mandelbulb",
]

