"""Path integrator for Monte Carlo light transport on distance fields.

This module estimates the radiance arriving at a point along a direction by
following one random path through the scene:

    - sphere trace the ray against the scene map
    - a ray that escapes picks up the background radiance
    - an emissive surface contributes its radiance and ends the path
    - a Lambertian surface multiplies the throughput by its albedo and the
      path continues in a cosine-weighted direction about the surface normal

Paths are cut off after MAX_BOUNCES surface hits and then contribute black.
There is no Russian roulette and no next-event estimation; lights are only
found by hitting them.

Example:
    >>> from sdfpath.core.integrator import estimate_radiance
    >>> colors = estimate_radiance(
    ...     world, ConstantBackground((1.0, 1.0, 1.0)),
    ...     origins=[(0.0, 0.0, 5.0)], directions=[(0.0, 0.0, -1.0)], seed=3,
    ... )
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.core.sampling import seed_stream
from sdfpath.geometry.base import as_points
from sdfpath.materials.base import MaterialType
from sdfpath.materials.lambertian import scatter_lambertian
from sdfpath.scene.intersection import SURFACE_EPSILON, estimate_normal, intersect

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum number of surface hits along one path
MAX_BOUNCES = 6

# Continuation rays start this many SURFACE_EPSILON above the surface
RAY_OFFSET_SCALE = 2.0


@ti.func
def radiance(
    scene_map: ti.template(),
    background: ti.template(),
    origin: vec3,
    direction: vec3,
    state: ti.u32,
):
    """Estimate the radiance arriving at ``origin`` from ``direction``.

    Args:
        scene_map: The material map of the scene.
        background: Radiance for escaping rays.
        origin: The starting point of the path.
        direction: The unit direction of the first ray.
        state: Random generator state.

    Returns:
        A tuple (color, next_state). The color is non-negative and unbounded.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Throughput (product of albedos along the path)
    throughput = vec3(1.0, 1.0, 1.0)

    ray_origin = origin
    ray_direction = direction
    next_state = state

    # Cleared once the path has ended; surviving all bounces leaves color black
    active = 1

    for _ in range(MAX_BOUNCES):
        if active == 1:
            rec = intersect(scene_map, ray_origin, ray_direction)

            if rec.hit == 0:
                color = throughput * background.radiance(ray_direction)
                active = 0
            elif rec.kind == int(MaterialType.EMISSIVE):
                color = throughput * rec.color
                active = 0
            else:
                normal = estimate_normal(scene_map, rec.position)
                scattered, attenuation, next_state = scatter_lambertian(rec.color, normal, next_state)
                throughput *= attenuation
                ray_origin = rec.position + RAY_OFFSET_SCALE * SURFACE_EPSILON * normal
                ray_direction = scattered

    return color, next_state


# =============================================================================
# Host-side batch helper
# =============================================================================


@ti.kernel
def _estimate_radiance(
    scene_map: ti.template(),
    background: ti.template(),
    seed: ti.i32,
    origins: ti.types.ndarray(),
    directions: ti.types.ndarray(),
    out: ti.types.ndarray(),
):
    for i in range(origins.shape[0]):
        state = seed_stream(seed, i)
        origin = vec3(origins[i, 0], origins[i, 1], origins[i, 2])
        direction = vec3(directions[i, 0], directions[i, 1], directions[i, 2])
        color, state = radiance(scene_map, background, origin, direction, state)
        for c in ti.static(range(3)):
            out[i, c] = color[c]


def estimate_radiance(
    scene_map,
    background,
    origins,
    directions,
    seed: int = 0,
) -> npt.NDArray[np.float32]:
    """Estimate radiance along host-side rays, one path per ray.

    Args:
        scene_map: The material map of the scene.
        background: Radiance for escaping rays.
        origins: Ray origins, shape (N, 3) or a single (x, y, z).
        directions: Unit ray directions with the same shape as ``origins``.
        seed: Seed; ray i uses random stream i.

    Returns:
        Array of shape (N, 3) with one radiance sample per ray.
    """
    o = as_points(origins)
    d = as_points(directions)
    if o.shape != d.shape:
        raise ValueError(f"origins {o.shape} and directions {d.shape} must have the same shape")
    out = np.zeros_like(o)
    _estimate_radiance(scene_map, background, seed, o, d, out)
    return out
