"""Geometry module: signed distance fields and their composition algebra.

Components:
    base: DistanceField base class, host-side batch evaluation
    primitives: Sphere, Cuboid, Plane, Torus and Mandelbulb
    operators: Boolean operators, distance modifiers and domain transforms

Every node is a ``ti.data_oriented`` object whose ``distance(p)`` is a Taichi
function. A tree of nodes is compiled into a single specialized function when
it reaches a kernel as a template argument, so scenes cost no dynamic
dispatch at render time.

Signed distance convention:
    distance(p) < 0   p is inside the solid
    distance(p) == 0  p is on the surface
    distance(p) > 0   p is outside, and no surface is closer than the value
"""

from .base import DistanceField, as_points, evaluate_distances
from .operators import (
    Difference,
    Eversion,
    Intersection,
    Repeat,
    Rotate,
    Round,
    Shell,
    SmoothUnion,
    Translate,
    Union,
    rotation_matrix,
)
from .primitives import Cuboid, Mandelbulb, Plane, Sphere, Torus

__all__ = [
    # Base
    "DistanceField",
    "as_points",
    "evaluate_distances",
    # Primitives
    "Sphere",
    "Cuboid",
    "Plane",
    "Torus",
    "Mandelbulb",
    # Operators
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
