"""Preview module for output and visualization.

Components:
    display: Gamma correction and Matplotlib-based preview
    export: PPM/PNG image export through Pillow

Example:
    >>> from whitted.preview import save_image, show_preview
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> save_image(renderer, "output.ppm")
    >>> show_preview(renderer)
"""

from whitted.preview.display import (
    apply_gamma,
    process_image_for_display,
    show_preview,
)
from whitted.preview.export import (
    SUPPORTED_FORMATS,
    compute_rmse,
    image_to_uint8,
    save_image,
    save_image_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    "apply_gamma",
    "process_image_for_display",
    # Export functions
    "save_image",
    "save_image_from_array",
    "image_to_uint8",
    "compute_rmse",
    "SUPPORTED_FORMATS",
]
