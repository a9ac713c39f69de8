"""Composition operators over signed distance fields.

Boolean operators combine two children, the others wrap a single child and
either reshape its distance value or transform the query point before it is
passed down. All operators keep a reference to their children; since nodes
never change after construction, the same subtree may appear in several
places of a scene.

Union, Intersection, Difference, Shell, Eversion, Round, Translate and
Rotate preserve the lower-bound property of their children. SmoothUnion
may underestimate by at most k/4 near the blend and Repeat is only exact
while the child fits inside one cell.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from sdfpath.core.ray import vec3
from sdfpath.geometry.base import DistanceField

# =============================================================================
# Boolean operators
# =============================================================================


@ti.data_oriented
class Union(DistanceField):
    """Set union of two solids: min(d1, d2)."""

    def __init__(self, left: DistanceField, right: DistanceField) -> None:
        self.left = left
        self.right = right

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return ti.min(self.left.distance(p), self.right.distance(p))

    def __repr__(self) -> str:
        return f"Union({self.left!r}, {self.right!r})"


@ti.data_oriented
class SmoothUnion(DistanceField):
    """Union with a polynomial blend of radius k between the two surfaces.

    Attributes:
        k: Blend radius. Values <= 0 give the exact (sharp) union.
    """

    def __init__(self, left: DistanceField, right: DistanceField, k: float) -> None:
        self.left = left
        self.right = right
        self.k = float(k)

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        d1 = self.left.distance(p)
        d2 = self.right.distance(p)
        result = ti.min(d1, d2)
        if ti.static(self.k > 0.0):
            h = tm.clamp(0.5 + 0.5 * (d2 - d1) / self.k, 0.0, 1.0)
            result = tm.mix(d2, d1, h) - self.k * h * (1.0 - h)
        return result

    def __repr__(self) -> str:
        return f"SmoothUnion({self.left!r}, {self.right!r}, k={self.k})"


@ti.data_oriented
class Intersection(DistanceField):
    """Set intersection of two solids: max(d1, d2)."""

    def __init__(self, left: DistanceField, right: DistanceField) -> None:
        self.left = left
        self.right = right

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return ti.max(self.left.distance(p), self.right.distance(p))

    def __repr__(self) -> str:
        return f"Intersection({self.left!r}, {self.right!r})"


@ti.data_oriented
class Difference(DistanceField):
    """Solid of ``left`` with the solid of ``right`` removed: max(d1, -d2)."""

    def __init__(self, left: DistanceField, right: DistanceField) -> None:
        self.left = left
        self.right = right

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return ti.max(self.left.distance(p), -self.right.distance(p))

    def __repr__(self) -> str:
        return f"Difference({self.left!r}, {self.right!r})"


# =============================================================================
# Distance modifiers
# =============================================================================


@ti.data_oriented
class Shell(DistanceField):
    """Hollow shell of total thickness 2t around the child's surface."""

    def __init__(self, child: DistanceField, thickness: float) -> None:
        self.child = child
        self.thickness = float(thickness)

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return ti.abs(self.child.distance(p)) - self.thickness

    def __repr__(self) -> str:
        return f"Shell({self.child!r}, thickness={self.thickness})"


@ti.data_oriented
class Eversion(DistanceField):
    """Swap inside and outside of the child."""

    def __init__(self, child: DistanceField) -> None:
        self.child = child

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return -self.child.distance(p)

    def __repr__(self) -> str:
        return f"Eversion({self.child!r})"


@ti.data_oriented
class Round(DistanceField):
    """Inflate the child by r, rounding its edges and corners."""

    def __init__(self, child: DistanceField, radius: float) -> None:
        self.child = child
        self.radius = float(radius)

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return self.child.distance(p) - self.radius

    def __repr__(self) -> str:
        return f"Round({self.child!r}, radius={self.radius})"


# =============================================================================
# Domain transforms
# =============================================================================


@ti.data_oriented
class Translate(DistanceField):
    """Move the child by an offset."""

    def __init__(self, child: DistanceField, offset: tuple[float, float, float]) -> None:
        self.child = child
        self.offset = vec3(offset[0], offset[1], offset[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return self.child.distance(p - self.offset)

    def __repr__(self) -> str:
        return f"Translate({self.child!r}, offset={tuple(self.offset.to_list())})"


def rotation_matrix(axis: tuple[float, float, float], angle: float) -> np.ndarray:
    """Rodrigues rotation matrix for a right-handed rotation about an axis.

    Args:
        axis: Rotation axis (normalized here). A zero axis yields NaN entries.
        angle: Rotation angle in radians.

    Returns:
        A (3, 3) float64 rotation matrix R such that R @ v rotates v.
    """
    a = np.asarray(axis, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        a = a / np.linalg.norm(a)
    k = np.array(
        [
            [0.0, -a[2], a[1]],
            [a[2], 0.0, -a[0]],
            [-a[1], a[0], 0.0],
        ]
    )
    return np.eye(3) + np.sin(angle) * k + (1.0 - np.cos(angle)) * (k @ k)


@ti.data_oriented
class Rotate(DistanceField):
    """Rotate the child by ``angle`` radians about ``axis``.

    The child is queried at R^T p; the transpose is computed once on the host
    and baked into the kernel as a constant matrix.
    """

    def __init__(
        self,
        child: DistanceField,
        axis: tuple[float, float, float],
        angle: float,
    ) -> None:
        self.child = child
        self.axis = tuple(float(c) for c in axis)
        self.angle = float(angle)
        inverse = rotation_matrix(axis, angle).T
        self.inverse = tm.mat3(inverse.tolist())

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return self.child.distance(self.inverse @ p)

    def __repr__(self) -> str:
        return f"Rotate({self.child!r}, axis={self.axis}, angle={self.angle})"


@ti.data_oriented
class Repeat(DistanceField):
    """Tile space with copies of the child, one per cell of size ``period``.

    The query point is wrapped into the nearest cell centered on a lattice
    point, so the copy at the origin is replicated on every lattice point.
    """

    def __init__(self, child: DistanceField, period: tuple[float, float, float]) -> None:
        self.child = child
        self.period = vec3(period[0], period[1], period[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        q = p - self.period * ti.floor(p / self.period + 0.5)
        return self.child.distance(q)

    def __repr__(self) -> str:
        return f"Repeat({self.child!r}, period={tuple(self.period.to_list())})"


__all__ = [
    "Union",
    "SmoothUnion",
    "Intersection",
    "Difference",
    "Shell",
    "Eversion",
    "Round",
    "Translate",
    "Rotate",
    "Repeat",
    "rotation_matrix",
]
