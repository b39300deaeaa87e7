"""Image export utilities for rendered images.

Images are written through Pillow, with the format chosen by the file
extension:

    - .ppm: binary pixel map (P6), the reference output format
    - .png: 8-bit PNG

Each channel is clamped to [0, 1] and scaled by 255 with truncation.

Example:
    >>> from whitted.preview.export import save_image
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> save_image(renderer, "output.ppm")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.preview.display import process_image_for_display

if TYPE_CHECKING:
    from whitted.core.renderer import Renderer

# File extensions and the Pillow format used to write them
SUPPORTED_FORMATS = {
    ".ppm": "PPM",
    ".png": "PNG",
}


def _format_for(filepath: str | Path) -> str:
    suffix = Path(filepath).suffix.lower()
    if suffix not in SUPPORTED_FORMATS:
        supported = ", ".join(sorted(SUPPORTED_FORMATS))
        raise ValueError(
            f"Unsupported image format '{suffix}' for {filepath} (supported: {supported})"
        )
    return SUPPORTED_FORMATS[suffix]


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float32 image to uint8 for display/export.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value (1.0 leaves the image linear).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(image, gamma=gamma)
    return (processed * 255).astype(np.uint8)


def save_image_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a NumPy array as an 8-bit image file.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path ending in .ppm or .png.
        gamma: Gamma correction value (1.0 leaves the image linear).

    Raises:
        ValueError: If the file extension is not supported.
    """
    image_format = _format_for(filepath)
    image_uint8 = image_to_uint8(image, gamma=gamma)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath, format=image_format)


def save_image(renderer: Renderer, filepath: str | Path) -> None:
    """Save the renderer's output image.

    Gamma correction follows the renderer's options.

    Args:
        renderer: The Renderer instance to save.
        filepath: Output file path ending in .ppm or .png.
    """
    save_image_from_array(renderer.get_output_image(), filepath)


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
