"""Lambertian (ideal diffuse) material.

The Lambertian BRDF is constant, f_r = albedo / pi. Sampling the scattered
direction with density cos(theta) / pi makes the path weight

    f_r * cos(theta) / pdf = albedo

so a bounce off a diffuse surface only multiplies the throughput by the
albedo. The integrator relies on this and applies no explicit cosine or pdf
factor.

Example:
    >>> ground = Lambertian((0.5, 0.5, 0.5))
    >>> ground.kind
    <MaterialType.LAMBERTIAN: 0>
"""

from dataclasses import dataclass, field

import taichi as ti
import taichi.math as tm

from sdfpath.core.sampling import sample_cosine_hemisphere
from sdfpath.materials.base import MaterialType, validate_color

vec3 = tm.vec3


@dataclass(frozen=True)
class Lambertian:
    """Ideal diffuse reflector.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: tuple[float, float, float]
    kind: MaterialType = field(default=MaterialType.LAMBERTIAN, init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_color("albedo", self.albedo, upper=1.0))

    @property
    def color(self) -> tuple[float, float, float]:
        """Color carried into kernels (the albedo)."""
        return self.albedo


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, state: ti.u32):
    """Sample a scattered direction off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        normal: The surface normal at the hit point (normalized).
        state: Current random generator state.

    Returns:
        A tuple (scattered_direction, attenuation, next_state) where the
        attenuation equals the albedo.
    """
    scattered_direction, next_state = sample_cosine_hemisphere(normal, state)
    return scattered_direction, albedo, next_state
