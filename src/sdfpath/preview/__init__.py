"""Preview module for output and visualization.

Components:
    display: Gamma encoding and Matplotlib-based preview display
    export: PPM and PNG image export utilities

Example:
    >>> from sdfpath.preview import save_image, show_preview
    >>> image = render(320, 240, 16, scene)
    >>> save_image(image, "out.ppm")
    >>> show_preview(image)
"""

from sdfpath.preview.display import DISPLAY_GAMMA, apply_gamma, show_preview
from sdfpath.preview.export import (
    compute_rmse,
    image_to_uint8,
    ppm_text,
    save_image,
    save_png,
    save_ppm,
)

__all__ = [
    # Display functions
    "DISPLAY_GAMMA",
    "apply_gamma",
    "show_preview",
    # Export functions
    "image_to_uint8",
    "ppm_text",
    "save_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
]
