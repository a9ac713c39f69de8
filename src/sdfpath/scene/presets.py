"""Named example scenes.

Each preset is a factory taking the image aspect ratio and returning a
complete Scene. Scene constants live in a parameters dataclass per preset,
so variations can be built without copying the factory.

All presets use a z-up world with the ground plane at z = 0 and are lit by
their background (and, for ``spheres``, by an emissive sphere).

Example:
    >>> scene = get_scene("sculpture", aspect_ratio=800 / 600)
    >>> available_scenes()
    ['mandelbulb', 'sculpture', 'spheres']
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

from sdfpath.camera.thin_lens import ThinLensCamera, horizontal_to_vertical_fov
from sdfpath.geometry.primitives import Cuboid, Mandelbulb, Plane, Sphere, Torus
from sdfpath.materials.emissive import Emissive
from sdfpath.materials.lambertian import Lambertian
from sdfpath.scene.background import GradientBackground, SunSkyBackground
from sdfpath.scene.scene import Scene

Z_AXIS = (0.0, 0.0, 1.0)

# Horizontal field of view shared by the two showcase scenes (0.15 pi)
SHOWCASE_HFOV = 27.0


# =============================================================================
# Mandelbulb
# =============================================================================


@dataclass
class MandelbulbParams:
    """Parameters of the ``mandelbulb`` scene.

    Attributes:
        ground_albedo: Gray level of the ground plane.
        bulb_albedo: Gray level of the fractal.
        rotation: Rotation of the fractal about z, in radians.
        height: Height of the fractal center above the ground.
        power: Exponent of the Mandelbulb power map.
        iterations: Iteration count of the distance estimator.
        camera_position: Camera position.
        look_at: Point the camera is aimed at.
        hfov: Horizontal field of view in degrees.
        aperture: Lens diameter (depth of field).
    """

    ground_albedo: float = 0.5
    bulb_albedo: float = 0.25
    rotation: float = 0.25 * math.pi
    height: float = 1.0
    power: float = 8.0
    iterations: int = 12
    camera_position: tuple[float, float, float] = (0.0, -6.0, 4.0)
    look_at: tuple[float, float, float] = (0.0, -1.0, 1.5)
    hfov: float = SHOWCASE_HFOV
    aperture: float = 0.075


def create_mandelbulb_scene(aspect_ratio: float, params: MandelbulbParams | None = None) -> Scene:
    """A Mandelbulb resting on a diffuse ground under a sun and blue sky."""
    if params is None:
        params = MandelbulbParams()

    ground = Plane(normal=Z_AXIS).material(Lambertian((params.ground_albedo,) * 3))

    bulb = (
        Mandelbulb(power=params.power, iterations=params.iterations)
        .rotate(Z_AXIS, params.rotation)
        .translate((0.0, 0.0, params.height))
        .material(Lambertian((params.bulb_albedo,) * 3))
    )

    return Scene(
        camera=_showcase_camera(aspect_ratio, params),
        scene_map=ground.merge(bulb),
        background=SunSkyBackground(),
        name="mandelbulb",
    )


# =============================================================================
# Sculpture
# =============================================================================


@dataclass
class SculptureParams:
    """Parameters of the ``sculpture`` scene.

    Attributes:
        ground_albedo: Gray level of the dimpled ground.
        dimple_radius: Radius of the spherical dimples in the ground.
        dimple_period: Spacing of the dimple lattice.
        dimple_rotation: Rotation of the dimple lattice about z, in radians.
        frame_albedo: Gray level of the cube frame.
        frame_bar_thickness: Half width of the bars cut out of the cube.
        frame_rotation: Rotation of the cube frame about z, in radians.
        frame_position: Center of the cube frame.
        tube_albedo: Gray level of the cut torus.
        tube_position: Center of the cut torus.
        camera_position: Camera position.
        look_at: Point the camera is aimed at.
        hfov: Horizontal field of view in degrees.
        aperture: Lens diameter (depth of field).
    """

    ground_albedo: float = 0.6
    dimple_radius: float = 0.04
    dimple_period: tuple[float, float, float] = (0.2, 0.2, 1.0)
    dimple_rotation: float = 0.05 * math.pi
    frame_albedo: float = 0.075
    frame_bar_thickness: float = 0.9
    frame_rotation: float = -0.1 * math.pi
    frame_position: tuple[float, float, float] = (-1.5, 0.0, 1.0)
    tube_albedo: float = 0.3
    tube_position: tuple[float, float, float] = (2.0, 0.0, 0.4)
    camera_position: tuple[float, float, float] = (0.0, -12.0, 8.0)
    look_at: tuple[float, float, float] = (0.0, -1.0, 1.5)
    hfov: float = SHOWCASE_HFOV
    aperture: float = 0.1


def create_sculpture_scene(aspect_ratio: float, params: SculptureParams | None = None) -> Scene:
    """A dimpled ground, a hollow cube frame and a cut-open torus shell."""
    if params is None:
        params = SculptureParams()

    dimples = (
        Sphere(params.dimple_radius)
        .repeat(params.dimple_period)
        .rotate(Z_AXIS, params.dimple_rotation)
    )
    ground_material = Lambertian((params.ground_albedo,) * 3)
    ground = Plane(normal=Z_AXIS).subtract(dimples).material(ground_material)

    # Unit cube with three long bars removed leaves only its twelve edges
    t = params.frame_bar_thickness
    bars = (
        Cuboid(half_extents=(t, 100.0, t))
        .union(Cuboid(half_extents=(100.0, t, t)))
        .union(Cuboid(half_extents=(t, t, 100.0)))
    )
    frame = (
        Cuboid(half_extents=(1.0, 1.0, 1.0))
        .subtract(bars)
        .rotate(Z_AXIS, params.frame_rotation)
        .translate(params.frame_position)
        .material(Lambertian((params.frame_albedo,) * 3))
    )

    tube = (
        Torus(1.5, 0.37)
        .shell(0.03)
        .subtract(Plane(normal=(-1.0, 1.0, 0.0)))
        .translate(params.tube_position)
        .material(Lambertian((params.tube_albedo,) * 3))
    )

    return Scene(
        camera=_showcase_camera(aspect_ratio, params),
        scene_map=ground.merge(frame).merge(tube),
        background=SunSkyBackground(),
        name="sculpture",
    )


# =============================================================================
# Spheres
# =============================================================================


@dataclass
class SpheresParams:
    """Parameters of the ``spheres`` scene.

    Attributes:
        blend: Smooth union radius between the two red spheres.
        corner_radius: Rounding radius of the blue box.
        light_radiance: Radiance of the spherical light.
        light_position: Center of the spherical light.
        light_radius: Radius of the spherical light.
    """

    blend: float = 0.3
    corner_radius: float = 0.1
    light_radiance: float = 6.0
    light_position: tuple[float, float, float] = (0.0, 1.5, 3.0)
    light_radius: float = 0.5


def create_spheres_scene(aspect_ratio: float, params: SpheresParams | None = None) -> Scene:
    """Blended spheres and a rounded box lit by a spherical lamp."""
    if params is None:
        params = SpheresParams()

    ground = Plane(normal=Z_AXIS).material(Lambertian((0.5, 0.5, 0.5)))

    blob = (
        Sphere(0.6, center=(-1.0, 0.0, 0.6))
        .smooth_union(Sphere(0.4, center=(-0.4, -0.2, 0.4)), params.blend)
        .material(Lambertian((0.7, 0.3, 0.3)))
    )

    box = (
        Cuboid(half_extents=(0.4, 0.4, 0.4))
        .round(params.corner_radius)
        .rotate(Z_AXIS, 0.2 * math.pi)
        .translate((1.0, 0.2, 0.5))
        .material(Lambertian((0.3, 0.5, 0.7)))
    )

    lamp = Sphere(params.light_radius, center=params.light_position).material(
        Emissive((params.light_radiance,) * 3)
    )

    camera = ThinLensCamera(
        position=(0.0, -6.0, 2.5),
        look_at=(0.0, 0.0, 0.6),
        up=Z_AXIS,
        vfov=35.0,
        aspect_ratio=aspect_ratio,
    )

    return Scene(
        camera=camera,
        scene_map=ground.merge(blob).merge(box).merge(lamp),
        background=GradientBackground(horizon=(0.1, 0.1, 0.1), zenith=(0.2, 0.3, 0.5)),
        name="spheres",
    )


# =============================================================================
# Registry
# =============================================================================


def _showcase_camera(aspect_ratio: float, params) -> ThinLensCamera:
    return ThinLensCamera(
        position=params.camera_position,
        look_at=params.look_at,
        up=Z_AXIS,
        vfov=horizontal_to_vertical_fov(params.hfov, aspect_ratio),
        aspect_ratio=aspect_ratio,
        aperture=params.aperture,
    )


SCENES: dict[str, Callable[[float], Scene]] = {
    "mandelbulb": create_mandelbulb_scene,
    "sculpture": create_sculpture_scene,
    "spheres": create_spheres_scene,
}

# Older names of the two showcase scenes
SCENE_ALIASES = {
    "scene1": "sculpture",
    "scene2": "mandelbulb",
}


def available_scenes() -> list[str]:
    """Names accepted by get_scene, sorted (aliases excluded)."""
    return sorted(SCENES)


def get_scene(name: str, aspect_ratio: float) -> Scene:
    """Build a preset scene by name.

    Args:
        name: A key of SCENES or SCENE_ALIASES.
        aspect_ratio: Width divided by height of the target image.

    Returns:
        The scene.

    Raises:
        ValueError: If the name is unknown or the aspect ratio is not positive.
    """
    key = SCENE_ALIASES.get(name, name)
    if key not in SCENES:
        raise ValueError(
            f'Scene "{name}" not found. Available scenes: {", ".join(available_scenes())}'
        )
    if aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
    return SCENES[key](aspect_ratio)
