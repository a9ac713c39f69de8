"""Scene container.

A Scene bundles everything a render needs: the camera, the root of the
material-tagged map and the background. It is passed to the render kernel
as a single template argument, so the whole scene is compiled into the
kernel and must not change while a render is running.

Example:
    >>> scene = Scene(
    ...     camera=ThinLensCamera(position=(0.0, -5.0, 1.0), look_at=(0.0, 0.0, 1.0)),
    ...     scene_map=Plane().material(Lambertian((0.5, 0.5, 0.5))),
    ...     background=ConstantBackground((1.0, 1.0, 1.0)),
    ... )
"""

import taichi as ti


@ti.data_oriented
class Scene:
    """Camera, map root and background of one image.

    Attributes:
        camera: A ThinLensCamera.
        scene_map: The material map root (Tagged or MapUnion tree).
        background: Radiance for escaping rays (a background object).
        name: Optional label used in log messages.
    """

    def __init__(self, camera, scene_map, background, name: str = "scene") -> None:
        self.camera = camera
        self.scene_map = scene_map
        self.background = background
        self.name = name

    @property
    def aspect_ratio(self) -> float:
        return self.camera.aspect_ratio

    def __repr__(self) -> str:
        return (
            f"Scene(name={self.name!r}, camera={self.camera!r}, "
            f"background={self.background!r})"
        )
