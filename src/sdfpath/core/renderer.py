"""Frame renderer with row-parallel, progressive sample accumulation.

The render kernel's outermost loop runs over image rows, which Taichi
distributes across its worker threads. Inside a row task the columns and
their samples are processed serially with the row's private random stream.
Each row writes only its own slice of the accumulation buffer and its own
generator slot, so no synchronization is needed.

Generator states and the running sums live in NumPy arrays owned by the
renderer. They persist between batches, so a progressive render continues
exactly where the previous batch stopped.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdfpath.core.renderer import FrameRenderer
    >>> from sdfpath.scene.presets import get_scene
    >>>
    >>> scene = get_scene("mandelbulb", aspect_ratio=4.0 / 3.0)
    >>> renderer = FrameRenderer(scene, 320, 240, seed=1)
    >>> renderer.render(64, batch_size=16)
    >>> image = renderer.image()  # (240, 320, 3) linear radiance
"""

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfpath.core.integrator import radiance
from sdfpath.core.sampling import next_float, seed_stream

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]

# =============================================================================
# Render Settings
# =============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_SAMPLES_PER_PIXEL = 100


@dataclass
class RenderSettings:
    """Parameters of one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of path samples averaged per pixel.
        seed: Global seed of the per-row random streams.
        jitter: Randomize the sample position inside each pixel. When off,
            every sample goes through the pixel center.
        batch_size: Samples per progressive batch (progress is reported
            after each batch).

    Raises:
        ValueError: If a size, the sample count or the batch size is not
            positive.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    seed: int = 0
    jitter: bool = True
    batch_size: int = DEFAULT_SAMPLES_PER_PIXEL

    def __post_init__(self) -> None:
        _check_dimensions(self.width, self.height)
        _check_samples(self.samples_per_pixel)
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")


def _check_samples(samples: int) -> None:
    if samples <= 0:
        raise ValueError(f"Sample count must be positive, got {samples}")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _seed_rows(seed: ti.i32, states: ti.types.ndarray()):
    for row in range(states.shape[0]):
        states[row] = seed_stream(seed, row)


@ti.kernel
def _render_rows(
    scene: ti.template(),
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    jitter: ti.template(),
    states: ti.types.ndarray(),
    accum: ti.types.ndarray(),
):
    """Add ``samples`` path samples to every pixel, one task per row."""
    for row in range(height):
        state = states[row]
        for col in range(width):
            total = vec3(0.0, 0.0, 0.0)
            for _ in range(samples):
                u = 0.5
                v = 0.5
                if ti.static(jitter):
                    u, state = next_float(state)
                    v, state = next_float(state)
                x = (ti.cast(col, ti.f32) + u) / ti.cast(width, ti.f32) - 0.5
                y = 0.5 - (ti.cast(row, ti.f32) + v) / ti.cast(height, ti.f32)
                ray, state = scene.camera.get_ray(x, y, state)
                color, state = radiance(
                    scene.scene_map, scene.background, ray.origin, ray.direction, state
                )
                total += color
            for c in ti.static(range(3)):
                accum[row, col, c] += total[c]
        states[row] = state


# =============================================================================
# Frame Renderer
# =============================================================================


class FrameRenderer:
    """A renderer that accumulates samples of one scene over time.

    This class owns the accumulation buffer and the per-row generator
    states and provides:
    - Incremental sample accumulation
    - Batch rendering (multiple SPP per call)
    - Progress callbacks and a generator interface
    - Reset functionality

    Attributes:
        scene: The scene being rendered.
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Global seed of the per-row random streams.
        jitter: Whether samples are jittered inside the pixel.
    """

    def __init__(
        self,
        scene,
        width: int,
        height: int,
        seed: int = 0,
        jitter: bool = True,
    ) -> None:
        """Initialize the frame renderer.

        Args:
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.
            seed: Global seed of the per-row random streams.
            jitter: Jitter samples inside each pixel.

        Raises:
            ValueError: If a dimension is not positive.
        """
        _check_dimensions(width, height)
        self.scene = scene
        self._width = width
        self._height = height
        self.seed = seed
        self.jitter = bool(jitter)
        self._sample_count = 0
        self._accum = np.zeros((height, width, 3), dtype=np.float32)
        self._states = np.zeros(height, dtype=np.uint32)
        _seed_rows(self.seed, self._states)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return self._sample_count

    def reset(self) -> None:
        """Clear the accumulator and restart every row stream from the seed."""
        self._accum.fill(0.0)
        self._sample_count = 0
        _seed_rows(self.seed, self._states)

    def resize(self, width: int, height: int) -> None:
        """Change the image size and reset the accumulator.

        Raises:
            ValueError: If a dimension is not positive.
        """
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self._accum = np.zeros((height, width, 3), dtype=np.float32)
        self._states = np.zeros(height, dtype=np.uint32)
        self.reset()

    def _render_batch(self, batch: int) -> None:
        _render_rows(
            self.scene,
            self._width,
            self._height,
            batch,
            self.jitter,
            self._states,
            self._accum,
        )
        self._sample_count += batch

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).

        Raises:
            ValueError: If ``num_samples`` or ``batch_size`` is not positive.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If ``num_samples`` or ``batch_size`` is not positive.
        """
        _check_samples(num_samples)
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        target_samples = self._sample_count + num_samples
        start = time.perf_counter()

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            self._render_batch(batch)
            remaining -= batch
            logger.debug(
                "%s: %d/%d samples per pixel", self.scene.name, self._sample_count, target_samples
            )
            yield (self._sample_count, target_samples)

        logger.info(
            "Rendered %s at %dx%d with %d samples per pixel in %.2f s",
            self.scene.name,
            self._width,
            self._height,
            num_samples,
            time.perf_counter() - start,
        )

    def image(self) -> npt.NDArray[np.float32]:
        """Per-pixel mean radiance, shape (height, width, 3), row 0 at the top.

        Raises:
            RuntimeError: If no samples have been rendered yet.
        """
        if self._sample_count == 0:
            raise RuntimeError("No samples rendered yet. Call render() first.")
        return self._accum / np.float32(self._sample_count)

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the image clamped to [0, 1] and optionally gamma encoded.

        Args:
            gamma: Gamma value. Default 1.0 (linear); use 2.2 for display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        from sdfpath.preview.display import apply_gamma

        return apply_gamma(self.image(), gamma)

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the image gamma encoded and quantized to 8 bits."""
        from sdfpath.preview.export import image_to_uint8

        return image_to_uint8(self.image(), gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the image as PPM or PNG depending on the file extension.

        Raises:
            OSError: If the file cannot be written.
        """
        from sdfpath.preview.export import save_image

        save_image(self.image(), filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )


def render(
    width: int,
    height: int,
    samples_per_pixel: int,
    scene,
    seed: int = 0,
    jitter: bool = True,
) -> npt.NDArray[np.float32]:
    """Render a scene in one batch and return the mean radiance per pixel.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of samples averaged per pixel.
        scene: The scene to render.
        seed: Global seed of the per-row random streams.
        jitter: Jitter samples inside each pixel.

    Returns:
        Array of shape (height, width, 3) with linear, unclamped radiance.

    Raises:
        ValueError: If a dimension or the sample count is not positive.
    """
    _check_samples(samples_per_pixel)
    renderer = FrameRenderer(scene, width, height, seed=seed, jitter=jitter)
    renderer.render(samples_per_pixel, batch_size=samples_per_pixel)
    return renderer.image()


def render_with_settings(
    scene,
    settings: RenderSettings,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float32]:
    """Render a scene progressively as described by ``settings``."""
    renderer = FrameRenderer(
        scene, settings.width, settings.height, seed=settings.seed, jitter=settings.jitter
    )
    renderer.render(settings.samples_per_pixel, batch_size=settings.batch_size, callback=callback)
    return renderer.image()
