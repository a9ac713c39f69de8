"""Core rendering module.

This module contains the fundamental building blocks of the path tracer:

Components:
    ray: Ray data structure and vector utilities
    sampling: Per-stream random numbers, disk and cosine hemisphere sampling
    integrator: Path integrator (radiance estimate along one camera ray)
    renderer: Frame renderer with progressive, row-parallel accumulation

The integrator walks an explicitly bounded bounce loop: sphere trace, shade
(absorb or emit), draw a cosine-weighted direction, repeat until a light is
hit, the ray escapes or the bounce budget is exhausted.
"""

from .ray import (
    Ray,
    build_onb_from_normal,
    local_to_world,
    make_ray,
    ray_at,
    vec3,
)
from .sampling import (
    cosine_hemisphere_samples,
    next_float,
    sample_cosine_hemisphere,
    sample_unit_disk,
    seed_stream,
    uniform_samples,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from sdfpath.core.integrator or sdfpath.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "build_onb_from_normal",
    "local_to_world",
    "seed_stream",
    "next_float",
    "sample_unit_disk",
    "sample_cosine_hemisphere",
    "uniform_samples",
    "cosine_hemisphere_samples",
]
