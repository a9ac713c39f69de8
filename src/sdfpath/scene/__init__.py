"""Scene module: material maps, sphere tracing, backgrounds and presets.

Components:
    map: Material-tagged maps (Tagged leaves, nearest-wins MapUnion)
    intersection: Sphere tracer and central-difference normal estimation
    background: Radiance for rays that escape the scene
    scene: Scene container (camera, map root, background)
    presets: Named example scenes and the scene registry

A Scene is compiled into the render kernel as a whole. Nothing in it may
change while a render is running.
"""

from .background import (
    ConstantBackground,
    GradientBackground,
    SunSkyBackground,
    background_radiance,
)
from .intersection import (
    MAX_TRACE_DISTANCE,
    MAX_TRACE_STEPS,
    SURFACE_EPSILON,
    Hit,
    HitRecord,
    TraceResult,
    estimate_normal,
    estimate_normals,
    intersect,
    intersect_ray,
    trace_rays,
)
from .map import MapSample, MapUnion, MaterialMap, Tagged, union_all
from .presets import SCENES, available_scenes, get_scene
from .scene import Scene

__all__ = [
    # Maps
    "MapSample",
    "MaterialMap",
    "Tagged",
    "MapUnion",
    "union_all",
    # Sphere tracing
    "SURFACE_EPSILON",
    "MAX_TRACE_DISTANCE",
    "MAX_TRACE_STEPS",
    "HitRecord",
    "Hit",
    "TraceResult",
    "intersect",
    "estimate_normal",
    "trace_rays",
    "intersect_ray",
    "estimate_normals",
    # Backgrounds
    "ConstantBackground",
    "SunSkyBackground",
    "GradientBackground",
    "background_radiance",
    # Scenes
    "Scene",
    "SCENES",
    "available_scenes",
    "get_scene",
]
