"""Explicit per-stream random numbers and Monte Carlo sampling routines.

Every render task (one image row) owns a private generator whose whole state
is a single u32 value. The state is passed into each sampling function and
the advanced state is handed back, so no generator is ever shared between
threads and a fixed seed gives bit-identical output regardless of how the
Taichi runtime schedules rows.

The generator is a 32-bit linear congruential step followed by the
PCG RXS-M-XS output permutation. Streams are derived from a global seed and
a stream index (the image row) with the same permutation.

Example:
    >>> @ti.kernel
    ... def draw(out: ti.types.ndarray()):
    ...     for row in range(out.shape[0]):
    ...         state = seed_stream(7, row)
    ...         u, state = next_float(state)
    ...         out[row] = u
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.core.ray import build_onb_from_normal, local_to_world, vec3

# LCG constants (Numerical Recipes); both fit in a signed 32-bit literal
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223

# Output permutation multiplier from PCG RXS-M-XS 32
PERMUTE_MULTIPLIER = 277803737

# Odd multiplier used to spread consecutive stream indices apart
STREAM_MULTIPLIER = 747796405

# 2^-24: maps the top 24 bits of a word onto [0, 1)
FLOAT_SCALE = 1.0 / 16777216.0


@ti.func
def _permute(state: ti.u32) -> ti.u32:
    shift = (state >> ti.cast(28, ti.u32)) + ti.cast(4, ti.u32)
    word = ((state >> shift) ^ state) * ti.cast(PERMUTE_MULTIPLIER, ti.u32)
    return (word >> ti.cast(22, ti.u32)) ^ word


@ti.func
def seed_stream(seed: ti.i32, stream: ti.i32) -> ti.u32:
    """Derive the initial state of a random stream.

    Args:
        seed: Global seed of the render.
        stream: Stream index (the image row for the frame renderer).

    Returns:
        The initial u32 generator state for the stream.
    """
    spread = ti.cast(stream, ti.u32) * ti.cast(STREAM_MULTIPLIER, ti.u32) + ti.cast(1, ti.u32)
    return _permute(_permute(spread) ^ ti.cast(seed, ti.u32))


@ti.func
def next_float(state: ti.u32):
    """Draw a uniform float in [0, 1) and advance the generator.

    Args:
        state: Current generator state.

    Returns:
        A tuple (value, next_state).
    """
    advanced = state * ti.cast(LCG_MULTIPLIER, ti.u32) + ti.cast(LCG_INCREMENT, ti.u32)
    bits = _permute(advanced) >> ti.cast(8, ti.u32)
    return ti.cast(bits, ti.f32) * FLOAT_SCALE, advanced


@ti.func
def sample_unit_disk(state: ti.u32):
    """Sample a point uniformly distributed on the unit disk.

    Uses the polar mapping r = sqrt(u1), phi = 2 pi u2, which consumes
    exactly two draws per point.

    Args:
        state: Current generator state.

    Returns:
        A tuple (x, y, next_state) with x^2 + y^2 <= 1.
    """
    u1, state1 = next_float(state)
    u2, state2 = next_float(state1)
    radius = ti.sqrt(u1)
    phi = 2.0 * tm.pi * u2
    return radius * ti.cos(phi), radius * ti.sin(phi), state2


@ti.func
def sample_cosine_hemisphere(normal: vec3, state: ti.u32):
    """Cosine-weighted hemisphere sampling about a normal.

    Projects a uniform disk sample up onto the hemisphere (Malley's method).
    The resulting density is cos(theta) / pi, which cancels the cosine and
    1/pi factors of a Lambertian BRDF in the path estimator.

    Args:
        normal: The surface normal defining the hemisphere (normalized).
        state: Current generator state.

    Returns:
        A tuple (direction, next_state); direction is a unit vector with a
        non-negative component along the normal.
    """
    x, y, next_state = sample_unit_disk(state)
    z = ti.sqrt(ti.max(0.0, 1.0 - x * x - y * y))
    tangent, bitangent, n = build_onb_from_normal(normal)
    return local_to_world(vec3(x, y, z), tangent, bitangent, n), next_state


# =============================================================================
# Host-side batch helpers
# =============================================================================


@ti.kernel
def _fill_uniform(seed: ti.i32, out: ti.types.ndarray()):
    for stream in range(out.shape[0]):
        state = seed_stream(seed, stream)
        for i in range(out.shape[1]):
            u, state = next_float(state)
            out[stream, i] = u


@ti.kernel
def _fill_cosine_directions(
    seed: ti.i32,
    nx: ti.f32,
    ny: ti.f32,
    nz: ti.f32,
    out: ti.types.ndarray(),
):
    for i in range(out.shape[0]):
        state = seed_stream(seed, i)
        normal = tm.normalize(vec3(nx, ny, nz))
        direction, state = sample_cosine_hemisphere(normal, state)
        for c in ti.static(range(3)):
            out[i, c] = direction[c]


def uniform_samples(seed: int, streams: int, count: int) -> npt.NDArray[np.float32]:
    """Draw `count` uniform floats from each of `streams` random streams.

    Args:
        seed: Global seed.
        streams: Number of independent streams (rows of the result).
        count: Number of draws per stream.

    Returns:
        Array of shape (streams, count) with values in [0, 1).
    """
    out = np.zeros((streams, count), dtype=np.float32)
    _fill_uniform(seed, out)
    return out


def cosine_hemisphere_samples(
    normal: tuple[float, float, float],
    count: int,
    seed: int = 0,
) -> npt.NDArray[np.float32]:
    """Draw cosine-weighted directions about a normal, one per stream.

    Args:
        normal: Hemisphere axis (normalized internally).
        count: Number of directions.
        seed: Global seed.

    Returns:
        Array of shape (count, 3) of unit directions.
    """
    out = np.zeros((count, 3), dtype=np.float32)
    _fill_cosine_directions(seed, normal[0], normal[1], normal[2], out)
    return out
