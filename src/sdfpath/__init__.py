"""Sphere-traced signed distance field path tracer built on Taichi.

Scenes are authored as trees of signed distance functions tagged with
materials. Taichi specializes each tree into the rendering kernel, sphere
tracing finds surfaces and a Monte Carlo path tracer estimates radiance,
parallelized across image rows.

Subpackages:
    core: Ray utilities, random sampling, path integrator and frame renderer
    geometry: Distance field primitives and composition operators
    materials: Lambertian and emissive materials
    scene: Material-tagged maps, sphere tracer, backgrounds and scene presets
    camera: Thin lens camera model
    preview: Gamma encoding and image export (PPM, PNG)
"""

__version__ = "0.1.0"
