"""Camera module for primary ray generation.

Components:
    thin_lens: Thin-lens perspective camera with optional depth of field

Cameras are ``ti.data_oriented`` objects with a ``get_ray(x, y, state)``
Taichi function. The basis vectors are computed once on the host and
compiled into the render kernel as constants.
"""

from .thin_lens import ThinLensCamera, horizontal_to_vertical_fov

__all__ = [
    "ThinLensCamera",
    "horizontal_to_vertical_fov",
]
