"""Thin-lens camera model for primary ray generation.

The camera supports:
- Look-at positioning (position, look_at, up)
- Vertical field of view
- Arbitrary aspect ratios
- Depth of field through a circular aperture focused on a plane

The camera builds an orthonormal basis (right, up, forward) from the view
parameters on the host with NumPy. The basis, the viewport extents and the
lens parameters are stored as plain Python values, so a camera passed to a
kernel as a template argument is compiled in as constants.

Image coordinates are centered: x runs from -0.5 (left edge) to 0.5 (right
edge) and y from -0.5 (bottom edge) to 0.5 (top edge).

Example:
    >>> camera = ThinLensCamera(
    ...     position=(0.0, -6.0, 4.0),
    ...     look_at=(0.0, -1.0, 1.5),
    ...     up=(0.0, 0.0, 1.0),
    ...     vfov=20.0,
    ...     aspect_ratio=4.0 / 3.0,
    ...     aperture=0.075,
    ... )
    >>> origins, directions = camera.generate_rays([(0.0, 0.0)])
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.core.ray import make_ray, vec3
from sdfpath.core.sampling import sample_unit_disk, seed_stream

# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def horizontal_to_vertical_fov(hfov: float, aspect_ratio: float) -> float:
    """Convert a horizontal field of view to the matching vertical one.

    Args:
        hfov: Horizontal field of view in degrees.
        aspect_ratio: Width divided by height.

    Returns:
        The vertical field of view in degrees.
    """
    half = math.tan(math.radians(hfov) / 2.0) / aspect_ratio
    return math.degrees(2.0 * math.atan(half))


def _to_vec(values: npt.ArrayLike) -> vec3:
    return vec3(float(values[0]), float(values[1]), float(values[2]))


@ti.data_oriented
class ThinLensCamera:
    """Perspective camera with an optional thin lens.

    With ``aperture == 0`` the camera is a pinhole: every ray starts at
    ``position`` and nothing is out of focus. With a positive aperture the
    ray origin is spread over a disc of diameter ``aperture`` in the lens
    plane, and the direction is bent so that all rays for a given image
    point meet on the focus plane.

    Attributes:
        position: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at.
        up: Up direction used to orient the image (z for the bundled scenes).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        focus_distance: Distance to the focus plane; defaults to the distance
            between ``position`` and ``look_at``.
        aperture: Lens diameter; 0 disables depth of field.

    Raises:
        ValueError: If the field of view is not in (0, 180), the aspect ratio
            or focus distance is not positive, or the aperture is negative.
    """

    def __init__(
        self,
        position: tuple[float, float, float],
        look_at: tuple[float, float, float],
        up: tuple[float, float, float] = (0.0, 0.0, 1.0),
        vfov: float = 40.0,
        aspect_ratio: float = 4.0 / 3.0,
        focus_distance: float | None = None,
        aperture: float = 0.0,
    ) -> None:
        if not 0.0 < vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {vfov}")
        if aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        if aperture < 0.0:
            raise ValueError(f"aperture must be non-negative, got {aperture}")

        self.position = tuple(float(c) for c in position)
        self.look_at = tuple(float(c) for c in look_at)
        self.up = tuple(float(c) for c in up)
        self.vfov = float(vfov)
        self.aspect_ratio = float(aspect_ratio)
        self.aperture = float(aperture)

        origin = np.array(self.position, dtype=np.float64)
        target = np.array(self.look_at, dtype=np.float64)
        vup = np.array(self.up, dtype=np.float64)

        if focus_distance is None:
            focus_distance = float(np.linalg.norm(target - origin))
        if focus_distance <= 0.0:
            raise ValueError(f"focus_distance must be positive, got {focus_distance}")
        self.focus_distance = float(focus_distance)

        # forward points from the camera towards look_at
        forward = target - origin
        forward = forward / np.linalg.norm(forward)

        # right is perpendicular to forward and up
        right = np.cross(forward, vup)
        right = right / np.linalg.norm(right)

        # up_cam is the true up direction in the image plane
        up_cam = np.cross(right, forward)

        self._forward = forward
        self._right = right
        self._up = up_cam

        # Viewport at unit distance in front of the lens
        viewport_height = 2.0 * math.tan(math.radians(self.vfov) / 2.0)
        viewport_width = self.aspect_ratio * viewport_height

        self._origin_vec = _to_vec(origin)
        self._forward_vec = _to_vec(forward)
        self._horizontal_vec = _to_vec(viewport_width * right)
        self._vertical_vec = _to_vec(viewport_height * up_cam)
        self._lens_right_vec = _to_vec(0.5 * self.aperture * right)
        self._lens_up_vec = _to_vec(0.5 * self.aperture * up_cam)

    def basis(self) -> dict[str, npt.NDArray[np.float64]]:
        """Camera frame vectors for inspection.

        Returns:
            Dictionary with origin, right, up and forward as NumPy arrays.
        """
        return {
            "origin": np.array(self.position, dtype=np.float64),
            "right": self._right.copy(),
            "up": self._up.copy(),
            "forward": self._forward.copy(),
        }

    # =========================================================================
    # Ray Generation (Taichi-compatible)
    # =========================================================================

    @ti.func
    def get_ray(self, x: ti.f32, y: ti.f32, state: ti.u32):
        """Generate a ray through centered image coordinates (x, y).

        Args:
            x: Horizontal coordinate in [-0.5, 0.5] (left to right).
            y: Vertical coordinate in [-0.5, 0.5] (bottom to top).
            state: Random generator state; consumed only when the camera
                has an aperture.

        Returns:
            A tuple (ray, next_state).
        """
        offset = vec3(0.0, 0.0, 0.0)
        next_state = state
        if ti.static(self.aperture > 0.0):
            dx, dy, next_state = sample_unit_disk(state)
            offset = dx * self._lens_right_vec + dy * self._lens_up_vec

        image_point = self._forward_vec + x * self._horizontal_vec + y * self._vertical_vec
        direction = tm.normalize(self.focus_distance * image_point - offset)
        return make_ray(self._origin_vec + offset, direction), next_state

    def generate_rays(self, coords, seed: int = 0):
        """Generate primary rays for host-side image coordinates.

        Args:
            coords: Array of shape (N, 2) of centered (x, y) coordinates, or
                a single (x, y) pair.
            seed: Seed for the lens samples (one random stream per ray).

        Returns:
            A tuple (origins, directions) of arrays of shape (N, 3).
        """
        xy = np.ascontiguousarray(np.asarray(coords, dtype=np.float32).reshape(-1, 2))
        origins = np.zeros((xy.shape[0], 3), dtype=np.float32)
        directions = np.zeros((xy.shape[0], 3), dtype=np.float32)
        _generate_rays(self, seed, xy, origins, directions)
        return origins, directions

    def __repr__(self) -> str:
        return (
            f"ThinLensCamera(position={self.position}, look_at={self.look_at}, "
            f"up={self.up}, vfov={self.vfov}, aspect_ratio={self.aspect_ratio}, "
            f"focus_distance={self.focus_distance}, aperture={self.aperture})"
        )


@ti.kernel
def _generate_rays(
    camera: ti.template(),
    seed: ti.i32,
    coords: ti.types.ndarray(),
    origins: ti.types.ndarray(),
    directions: ti.types.ndarray(),
):
    for i in range(coords.shape[0]):
        state = seed_stream(seed, i)
        ray, state = camera.get_ray(coords[i, 0], coords[i, 1], state)
        for c in ti.static(range(3)):
            origins[i, c] = ray.origin[c]
            directions[i, c] = ray.direction[c]


__all__ = ["ThinLensCamera", "horizontal_to_vertical_fov"]
