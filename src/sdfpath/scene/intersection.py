"""Sphere tracing and surface normal estimation against a scene map.

Sphere tracing marches along a ray by the value of the distance field,
which is a safe step because no surface is closer than that value. The
march stops when the field drops below SURFACE_EPSILON (hit), when the
travelled distance exceeds MAX_TRACE_DISTANCE (miss) or when the step
budget runs out (miss). Rays grazing a surface can need many steps, so the
budget also bounds the work per ray when the field is degenerate (NaN).

Normals are the normalized central-difference gradient of the field.

Example:
    >>> world = Sphere(1.0).material(Lambertian((0.5, 0.5, 0.5)))
    >>> hit = intersect_ray(world, (0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
    >>> round(hit.distance, 2)
    4.0
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.geometry.base import as_points
from sdfpath.materials.base import material_from_record

vec3 = tm.vec3

# A point closer than this to a surface counts as on it
SURFACE_EPSILON = 1e-3

# Rays that travel this far without hitting anything escape the scene
MAX_TRACE_DISTANCE = 100.0

# Upper bound on marching steps per ray
MAX_TRACE_STEPS = 512


@ti.dataclass
class HitRecord:
    """Record of a ray-map intersection.

    Attributes:
        hit: Whether the ray reached a surface (1 if hit, 0 if miss).
        t: Distance travelled along the ray. Only valid if hit == 1.
        position: The point where the march stopped. Only valid if hit == 1.
        kind: MaterialType value of the surface. -1 on a miss.
        color: Albedo or radiance of the surface. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    position: vec3
    kind: ti.i32
    color: vec3


@ti.func
def _make_miss_record() -> HitRecord:
    return HitRecord(
        hit=0,
        t=0.0,
        position=vec3(0.0, 0.0, 0.0),
        kind=-1,
        color=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def intersect(scene_map: ti.template(), origin: vec3, direction: vec3) -> HitRecord:
    """Sphere trace a ray against a scene map.

    Args:
        scene_map: A material map (Tagged, MapUnion, ...).
        origin: The starting point of the ray.
        direction: The unit direction of the ray.

    Returns:
        A HitRecord; on a hit the material is queried at the hit position.
    """
    result = _make_miss_record()
    t = 0.0
    for _ in range(MAX_TRACE_STEPS):
        p = origin + t * direction
        d = scene_map.distance(p)
        if d < SURFACE_EPSILON:
            sample = scene_map.material_at(p)
            result = HitRecord(hit=1, t=t, position=p, kind=sample.kind, color=sample.color)
            break
        t += d
        if t > MAX_TRACE_DISTANCE:
            break
    return result


@ti.func
def estimate_normal(scene_map: ti.template(), p: vec3) -> vec3:
    """Estimate the outward surface normal at a point.

    Args:
        scene_map: Any object with a ``distance`` Taichi function.
        p: A point on (or within SURFACE_EPSILON of) a surface.

    Returns:
        The normalized central-difference gradient of the distance field.
    """
    ex = vec3(SURFACE_EPSILON, 0.0, 0.0)
    ey = vec3(0.0, SURFACE_EPSILON, 0.0)
    ez = vec3(0.0, 0.0, SURFACE_EPSILON)
    gradient = vec3(
        scene_map.distance(p + ex) - scene_map.distance(p - ex),
        scene_map.distance(p + ey) - scene_map.distance(p - ey),
        scene_map.distance(p + ez) - scene_map.distance(p - ez),
    )
    return tm.normalize(gradient)


# =============================================================================
# Host-side batch helpers
# =============================================================================


@ti.kernel
def _trace_rays(
    scene_map: ti.template(),
    origins: ti.types.ndarray(),
    directions: ti.types.ndarray(),
    hits: ti.types.ndarray(),
    ts: ti.types.ndarray(),
    positions: ti.types.ndarray(),
    kinds: ti.types.ndarray(),
    colors: ti.types.ndarray(),
):
    for i in range(origins.shape[0]):
        origin = vec3(origins[i, 0], origins[i, 1], origins[i, 2])
        direction = vec3(directions[i, 0], directions[i, 1], directions[i, 2])
        rec = intersect(scene_map, origin, direction)
        hits[i] = rec.hit
        ts[i] = rec.t
        kinds[i] = rec.kind
        for c in ti.static(range(3)):
            positions[i, c] = rec.position[c]
            colors[i, c] = rec.color[c]


@ti.kernel
def _estimate_normals(scene_map: ti.template(), points: ti.types.ndarray(), out: ti.types.ndarray()):
    for i in range(points.shape[0]):
        n = estimate_normal(scene_map, vec3(points[i, 0], points[i, 1], points[i, 2]))
        for c in ti.static(range(3)):
            out[i, c] = n[c]


@dataclass
class TraceResult:
    """Batch of sphere tracing results, one entry per ray.

    Attributes:
        hit: Boolean array of shape (N,).
        t: Distance along each ray, shape (N,). Meaningless on a miss.
        position: Hit positions, shape (N, 3).
        kind: MaterialType values, shape (N,); -1 on a miss.
        color: Albedo or radiance per hit, shape (N, 3).
    """

    hit: npt.NDArray[np.bool_]
    t: npt.NDArray[np.float32]
    position: npt.NDArray[np.float32]
    kind: npt.NDArray[np.int32]
    color: npt.NDArray[np.float32]


@dataclass
class Hit:
    """A single ray hit seen from the host.

    Attributes:
        position: The hit position (x, y, z).
        distance: Distance travelled along the ray.
        material: The host-side material of the surface.
    """

    position: tuple[float, float, float]
    distance: float
    material: object


def trace_rays(scene_map, origins, directions) -> TraceResult:
    """Sphere trace a batch of rays on the host.

    Args:
        scene_map: A material map.
        origins: Ray origins, shape (N, 3) or a single (x, y, z).
        directions: Unit ray directions with the same shape as ``origins``.

    Returns:
        A TraceResult with one entry per ray.
    """
    o = as_points(origins)
    d = as_points(directions)
    if o.shape != d.shape:
        raise ValueError(f"origins {o.shape} and directions {d.shape} must have the same shape")
    n = o.shape[0]
    hits = np.zeros(n, dtype=np.int32)
    ts = np.zeros(n, dtype=np.float32)
    positions = np.zeros((n, 3), dtype=np.float32)
    kinds = np.zeros(n, dtype=np.int32)
    colors = np.zeros((n, 3), dtype=np.float32)
    _trace_rays(scene_map, o, d, hits, ts, positions, kinds, colors)
    return TraceResult(hit=hits.astype(bool), t=ts, position=positions, kind=kinds, color=colors)


def intersect_ray(scene_map, origin, direction) -> Hit | None:
    """Sphere trace one ray.

    Returns:
        A Hit, or None if the ray escaped or ran out of steps.
    """
    result = trace_rays(scene_map, origin, direction)
    if not result.hit[0]:
        return None
    return Hit(
        position=tuple(float(c) for c in result.position[0]),
        distance=float(result.t[0]),
        material=material_from_record(result.kind[0], tuple(result.color[0].tolist())),
    )


def estimate_normals(scene_map, points) -> npt.NDArray[np.float32]:
    """Estimate surface normals at host-side points, shape (N, 3)."""
    pts = as_points(points)
    out = np.zeros_like(pts)
    _estimate_normals(scene_map, pts, out)
    return out
