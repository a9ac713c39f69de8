"""Pytest configuration for sdfpath tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def emissive_sphere_scene():
    """Unit emissive sphere in front of a pinhole camera, black background.

    The sphere covers the middle of a square image and nothing else is
    visible, so every camera sample returns exactly 0 or 1.
    """
    from sdfpath.camera.thin_lens import ThinLensCamera
    from sdfpath.geometry.primitives import Sphere
    from sdfpath.materials.emissive import Emissive
    from sdfpath.scene.background import ConstantBackground
    from sdfpath.scene.scene import Scene

    camera = ThinLensCamera(
        position=(0.0, -5.0, 0.0),
        look_at=(0.0, 0.0, 0.0),
        up=(0.0, 0.0, 1.0),
        vfov=40.0,
        aspect_ratio=1.0,
    )
    return Scene(
        camera=camera,
        scene_map=Sphere(1.0).material(Emissive((1.0, 1.0, 1.0))),
        background=ConstantBackground((0.0, 0.0, 0.0)),
        name="emissive_sphere",
    )


@pytest.fixture
def diffuse_scene():
    """Diffuse sphere resting on a diffuse ground under a white sky."""
    from sdfpath.camera.thin_lens import ThinLensCamera
    from sdfpath.geometry.primitives import Plane, Sphere
    from sdfpath.materials.lambertian import Lambertian
    from sdfpath.scene.background import ConstantBackground
    from sdfpath.scene.scene import Scene

    ground = Plane().material(Lambertian((0.5, 0.5, 0.5)))
    ball = Sphere(1.0, center=(0.0, 0.0, 1.0)).material(Lambertian((0.75, 0.25, 0.25)))
    camera = ThinLensCamera(
        position=(0.0, -6.0, 2.0),
        look_at=(0.0, 0.0, 1.0),
        up=(0.0, 0.0, 1.0),
        vfov=45.0,
        aspect_ratio=4.0 / 3.0,
    )
    return Scene(
        camera=camera,
        scene_map=ground.merge(ball),
        background=ConstantBackground((1.0, 1.0, 1.0)),
        name="diffuse",
    )
