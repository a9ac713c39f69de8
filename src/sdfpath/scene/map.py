"""Material-tagged scene maps.

A scene map is a distance field whose surfaces carry materials. Leaves are
``Tagged`` nodes pairing a distance field with one material; ``MapUnion``
combines two maps and answers every query with whichever side is nearer.

Example:
    >>> ground = Plane().material(Lambertian((0.5, 0.5, 0.5)))
    >>> ball = Sphere(1.0, center=(0.0, 0.0, 1.0)).material(Emissive((4.0, 4.0, 4.0)))
    >>> world = ground.merge(ball)
    >>> distances, kinds, colors = world.materials_at([(0.0, 0.0, 3.0)])
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.geometry.base import DistanceField, as_points, evaluate_distances
from sdfpath.materials.base import MaterialType

vec3 = tm.vec3


@ti.dataclass
class MapSample:
    """Result of a material query at a point.

    Attributes:
        distance: Signed distance of the nearest tagged surface.
        kind: MaterialType value of that surface.
        color: Albedo (Lambertian) or radiance (Emissive) of that surface.
    """

    distance: ti.f32
    kind: ti.i32
    color: vec3


@ti.kernel
def _materials_at(
    scene_map: ti.template(),
    points: ti.types.ndarray(),
    distances: ti.types.ndarray(),
    kinds: ti.types.ndarray(),
    colors: ti.types.ndarray(),
):
    for i in range(points.shape[0]):
        p = vec3(points[i, 0], points[i, 1], points[i, 2])
        sample = scene_map.material_at(p)
        distances[i] = sample.distance
        kinds[i] = sample.kind
        for c in ti.static(range(3)):
            colors[i, c] = sample.color[c]


@ti.data_oriented
class MaterialMap:
    """Base class of material-tagged maps.

    Subclasses implement ``distance(p)`` and ``material_at(p)`` as Taichi
    functions.
    """

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        raise NotImplementedError

    @ti.func
    def material_at(self, p: vec3) -> MapSample:
        raise NotImplementedError

    def merge(self, other: "MaterialMap") -> "MaterialMap":
        """Union with another map; this map wins ties."""
        return MapUnion(self, other)

    def evaluate(self, points) -> npt.NDArray[np.float32]:
        """Signed distances of the map at host-side points, shape (N,)."""
        return evaluate_distances(self, points)

    def materials_at(self, points):
        """Query distance and material at host-side points.

        Args:
            points: A single point (x, y, z) or an array of shape (N, 3).

        Returns:
            A tuple (distances, kinds, colors) of arrays with shapes (N,),
            (N,) and (N, 3).
        """
        pts = as_points(points)
        n = pts.shape[0]
        distances = np.zeros(n, dtype=np.float32)
        kinds = np.zeros(n, dtype=np.int32)
        colors = np.zeros((n, 3), dtype=np.float32)
        _materials_at(self, pts, distances, kinds, colors)
        return distances, kinds, colors


@ti.data_oriented
class Tagged(MaterialMap):
    """A distance field whose whole surface has one material.

    Attributes:
        field: The distance field.
        material: The host-side material (Lambertian or Emissive).
    """

    def __init__(self, field: DistanceField, material) -> None:
        self.field = field
        self.material = material
        self.kind = int(MaterialType(material.kind))
        color = material.color
        self.color = vec3(color[0], color[1], color[2])

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return self.field.distance(p)

    @ti.func
    def material_at(self, p: vec3) -> MapSample:
        return MapSample(distance=self.field.distance(p), kind=self.kind, color=self.color)

    def __repr__(self) -> str:
        return f"Tagged({self.field!r}, {self.material!r})"


@ti.data_oriented
class MapUnion(MaterialMap):
    """Nearest-wins union of two maps.

    The material of the strictly nearer side is reported; on equal
    distances the left operand wins.
    """

    def __init__(self, left: MaterialMap, right: MaterialMap) -> None:
        self.left = left
        self.right = right

    @ti.func
    def distance(self, p: vec3) -> ti.f32:
        return ti.min(self.left.distance(p), self.right.distance(p))

    @ti.func
    def material_at(self, p: vec3) -> MapSample:
        result = self.left.material_at(p)
        other = self.right.material_at(p)
        if other.distance < result.distance:
            result = other
        return result

    def __repr__(self) -> str:
        return f"MapUnion({self.left!r}, {self.right!r})"


def union_all(maps) -> MaterialMap:
    """Fold a non-empty sequence of maps into a left-leaning MapUnion chain.

    Raises:
        ValueError: If ``maps`` is empty.
    """
    maps = list(maps)
    if not maps:
        raise ValueError("At least one map is required")
    result = maps[0]
    for other in maps[1:]:
        result = MapUnion(result, other)
    return result
