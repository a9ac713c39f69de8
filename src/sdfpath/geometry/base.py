"""Base class and host-side evaluation for signed distance fields.

A distance field node is an immutable Python object whose ``distance`` method
is a Taichi function. Composite nodes call their children's ``distance``
through ``self``; when a tree is passed to a kernel as a template argument,
Taichi inlines the whole tree into one specialized function. Node parameters
(centers, radii, periods) become compile-time constants of that kernel.

Nodes compose fluently:

    >>> body = Sphere(radius=1.0).smooth_union(Cuboid(half_extents=(0.5, 0.5, 2.0)), 0.2)
    >>> hollow = body.shell(0.05).subtract(Plane(normal=(0.0, 0.0, -1.0)))
    >>> tagged = hollow.translate((0.0, 0.0, 1.0)).material(Lambertian((0.6, 0.6, 0.6)))

Distances are signed: negative inside, zero on the boundary, positive outside.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from sdfpath.core.ray import vec3


@ti.kernel
def _evaluate_distances(field: ti.template(), points: ti.types.ndarray(), out: ti.types.ndarray()):
    for i in range(points.shape[0]):
        p = vec3(points[i, 0], points[i, 1], points[i, 2])
        out[i] = field.distance(p)


def as_points(points) -> npt.NDArray[np.float32]:
    """Convert a point or a sequence of points to a contiguous (N, 3) float32 array."""
    return np.ascontiguousarray(np.asarray(points, dtype=np.float32).reshape(-1, 3))


def evaluate_distances(field, points) -> npt.NDArray[np.float32]:
    """Evaluate any object exposing a ``distance`` Taichi function at points.

    Args:
        field: A distance field node or material map.
        points: A single point (x, y, z) or an array of shape (N, 3).

    Returns:
        Array of shape (N,) with the signed distances.
    """
    pts = as_points(points)
    out = np.zeros(pts.shape[0], dtype=np.float32)
    _evaluate_distances(field, pts, out)
    return out


@ti.data_oriented
class DistanceField:
    """A node of a signed distance field tree.

    Subclasses implement ``distance`` as a Taichi function. Instances are
    immutable once built and can be shared between scenes and renders.
    """

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        raise NotImplementedError

    def evaluate(self, points) -> npt.NDArray[np.float32]:
        """Evaluate the field at host-side points (see evaluate_distances)."""
        return evaluate_distances(self, points)

    # =========================================================================
    # Composition
    # =========================================================================

    def union(self, other: "DistanceField") -> "DistanceField":
        from sdfpath.geometry.operators import Union

        return Union(self, other)

    def smooth_union(self, other: "DistanceField", k: float) -> "DistanceField":
        from sdfpath.geometry.operators import SmoothUnion

        return SmoothUnion(self, other, k)

    def intersect(self, other: "DistanceField") -> "DistanceField":
        from sdfpath.geometry.operators import Intersection

        return Intersection(self, other)

    def subtract(self, other: "DistanceField") -> "DistanceField":
        """Remove the solid of ``other`` from this solid."""
        from sdfpath.geometry.operators import Difference

        return Difference(self, other)

    def shell(self, thickness: float) -> "DistanceField":
        from sdfpath.geometry.operators import Shell

        return Shell(self, thickness)

    def evert(self) -> "DistanceField":
        from sdfpath.geometry.operators import Eversion

        return Eversion(self)

    def round(self, radius: float) -> "DistanceField":
        from sdfpath.geometry.operators import Round

        return Round(self, radius)

    def translate(self, offset: tuple[float, float, float]) -> "DistanceField":
        from sdfpath.geometry.operators import Translate

        return Translate(self, offset)

    def rotate(self, axis: tuple[float, float, float], angle: float) -> "DistanceField":
        """Rotate by ``angle`` radians about ``axis`` (right-handed)."""
        from sdfpath.geometry.operators import Rotate

        return Rotate(self, axis, angle)

    def repeat(self, period: tuple[float, float, float]) -> "DistanceField":
        from sdfpath.geometry.operators import Repeat

        return Repeat(self, period)

    def material(self, material):
        """Tag this field with a material, producing a material map leaf."""
        from sdfpath.scene.map import Tagged

        return Tagged(self, material)
