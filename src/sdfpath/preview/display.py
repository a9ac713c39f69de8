"""Display-space conversion and Matplotlib preview for rendered images.

Rendered images hold linear, unbounded radiance. Before an image can be
shown or quantized it is clamped to [0, 1] and gamma encoded with
out = in^(1/gamma).

Example:
    >>> from sdfpath.preview.display import show_preview
    >>> image = render(320, 240, 16, scene)
    >>> show_preview(image, title="mandelbulb - 16 SPP")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

# Gamma used for all 8-bit output
DISPLAY_GAMMA = 2.2


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.float32]:
    """Clamp to [0, 1] and apply gamma encoding for display.

    NaN values become 0 and +inf becomes 1, so a degenerate pixel never
    poisons the output.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.2). 1.0 only clamps.

    Returns:
        Gamma encoded image in [0, 1] with dtype float32.
    """
    # Clamp before the power to avoid NaN from negative values
    image = np.nan_to_num(np.asarray(image, dtype=np.float32), nan=0.0, posinf=1.0, neginf=0.0)
    image = np.clip(image, 0.0, 1.0)

    if gamma == 1.0:
        return image.astype(np.float32)

    # Apply gamma encoding: out = in^(1/gamma)
    result = np.power(image, 1.0 / gamma)

    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = DISPLAY_GAMMA,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (default 2.2).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = apply_gamma(image, gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
