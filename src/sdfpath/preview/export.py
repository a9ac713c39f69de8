"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, the default output of the command line tool)
    - PNG (8-bit via Pillow)

Both formats are gamma encoded with exponent 1/2.2 after clamping to
[0, 1], then scaled to [0, 255] and rounded to the nearest integer.

The P3 layout is:

    P3
    <width> <height>
    255
    r g b          (one pixel per line, rows top to bottom)

Example:
    >>> from sdfpath.preview.export import save_image
    >>> image = render(320, 240, 16, scene)
    >>> save_image(image, "mandelbulb.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from sdfpath.preview.display import DISPLAY_GAMMA, apply_gamma

logger = logging.getLogger(__name__)

# Largest value of an 8-bit channel
MAX_CHANNEL_VALUE = 255


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to gamma encoded 8-bit values.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (default 2.2).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    encoded = apply_gamma(image, gamma)
    return np.rint(encoded * MAX_CHANNEL_VALUE).astype(np.uint8)


def ppm_text(image: npt.NDArray[np.float32], *, gamma: float = DISPLAY_GAMMA) -> str:
    """Encode an image as plain-text PPM (P3).

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (default 2.2).

    Returns:
        The complete file contents, ending with a newline.
    """
    pixels = image_to_uint8(image, gamma=gamma)
    height, width = pixels.shape[:2]
    lines = [f"P3\n{width} {height}\n{MAX_CHANNEL_VALUE}"]
    lines.extend(f"{r} {g} {b}" for r, g, b in pixels.reshape(-1, 3).tolist())
    return "\n".join(lines) + "\n"


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> None:
    """Save an image as plain-text PPM (P3).

    Raises:
        OSError: If the file cannot be written.
    """
    Path(filepath).write_text(ppm_text(image, gamma=gamma), encoding="ascii")


def save_png(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> None:
    """Save an image as an 8-bit PNG file.

    Raises:
        OSError: If the file cannot be written.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(filepath)


def save_image(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> None:
    """Save an image, choosing the format from the file extension.

    ``.png`` writes a PNG; any other extension writes PPM.

    Raises:
        OSError: If the file cannot be written.
    """
    if Path(filepath).suffix.lower() == ".png":
        save_png(image, filepath, gamma=gamma)
    else:
        save_ppm(image, filepath, gamma=gamma)
    logger.info("Wrote %s", filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
