"""Background radiance for rays that leave the scene.

A background maps an escaping ray direction to radiance. Each background is
a ``ti.data_oriented`` object with a ``radiance(direction)`` Taichi function
and is compiled into the render kernel together with the scene map.

Backgrounds assume the scene's z-up convention.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from sdfpath.materials.base import validate_color

vec3 = tm.vec3


def _vec(values) -> vec3:
    return vec3(float(values[0]), float(values[1]), float(values[2]))


@ti.data_oriented
class ConstantBackground:
    """Uniform radiance from every direction.

    Attributes:
        color: Radiance returned for every escaping ray.
    """

    def __init__(self, color: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        self.color_rgb = validate_color("color", color)
        self.color = _vec(self.color_rgb)

    @ti.func
    def radiance(self, direction: vec3) -> vec3:
        return self.color

    def __repr__(self) -> str:
        return f"ConstantBackground(color={self.color_rgb})"


@ti.data_oriented
class SunSkyBackground:
    """Uniform sky with a bright disc-shaped sun.

    Directions within the cone cos(angle) > ``sun_cos_threshold`` around the
    sun direction receive ``sun_color * sun_intensity``; all others receive
    ``sky_color * sky_intensity``.

    Attributes:
        sun_direction: Direction towards the sun (normalized on creation).
        sun_cos_threshold: Cosine of the angular radius of the sun.
        sun_color: Sun color, scaled by ``sun_intensity``.
        sky_color: Sky color, scaled by ``sky_intensity``.
    """

    def __init__(
        self,
        sun_direction: tuple[float, float, float] = (1.0, 0.0, 0.5),
        sun_cos_threshold: float = 0.95,
        sun_color: tuple[float, float, float] = (1.0, 0.85, 0.75),
        sun_intensity: float = 15.0,
        sky_color: tuple[float, float, float] = (0.4, 0.7, 1.0),
        sky_intensity: float = 0.5,
    ) -> None:
        direction = np.asarray(sun_direction, dtype=np.float64)
        direction = direction / np.linalg.norm(direction)
        self.sun_direction = _vec(direction)
        self.sun_cos_threshold = float(sun_cos_threshold)
        self.sun_radiance = _vec(np.asarray(validate_color("sun_color", sun_color)) * sun_intensity)
        self.sky_radiance = _vec(np.asarray(validate_color("sky_color", sky_color)) * sky_intensity)

    @ti.func
    def radiance(self, direction: vec3) -> vec3:
        result = self.sky_radiance
        if tm.dot(direction, self.sun_direction) > self.sun_cos_threshold:
            result = self.sun_radiance
        return result

    def __repr__(self) -> str:
        return (
            f"SunSkyBackground(sun_direction={tuple(self.sun_direction.to_list())}, "
            f"sun_cos_threshold={self.sun_cos_threshold})"
        )


@ti.data_oriented
class GradientBackground:
    """Vertical blend from a horizon color to a zenith color.

    The blend factor is 0.5 * (direction.z + 1), so straight down gives the
    horizon color and straight up gives the zenith color.
    """

    def __init__(
        self,
        horizon: tuple[float, float, float] = (1.0, 1.0, 1.0),
        zenith: tuple[float, float, float] = (0.5, 0.7, 1.0),
    ) -> None:
        self.horizon = _vec(validate_color("horizon", horizon))
        self.zenith = _vec(validate_color("zenith", zenith))

    @ti.func
    def radiance(self, direction: vec3) -> vec3:
        t = 0.5 * (direction.z + 1.0)
        return tm.mix(self.horizon, self.zenith, t)

    def __repr__(self) -> str:
        return (
            f"GradientBackground(horizon={tuple(self.horizon.to_list())}, "
            f"zenith={tuple(self.zenith.to_list())})"
        )


@ti.kernel
def _background_radiance(background: ti.template(), directions: ti.types.ndarray(), out: ti.types.ndarray()):
    for i in range(directions.shape[0]):
        d = vec3(directions[i, 0], directions[i, 1], directions[i, 2])
        c = background.radiance(d)
        for k in ti.static(range(3)):
            out[i, k] = c[k]


def background_radiance(background, directions) -> np.ndarray:
    """Evaluate a background for host-side directions, shape (N, 3)."""
    d = np.ascontiguousarray(np.asarray(directions, dtype=np.float32).reshape(-1, 3))
    out = np.zeros_like(d)
    _background_radiance(background, d, out)
    return out
