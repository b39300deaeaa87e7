"""Matplotlib-based preview display for rendered images.

This module provides gamma correction for rendered images and a simple
preview window using Matplotlib.

Example:
    >>> from whitted.preview.display import show_preview
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from whitted.core.renderer import Renderer


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Each channel is clamped to [0, 1] and raised to 1/gamma.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma = {gamma} must be positive")
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)

    result = np.power(image, 1.0 / gamma)
    return result.astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Gamma correct an image and clamp it to [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (1.0 leaves the image linear).

    Returns:
        Processed image in [0, 1] range.
    """
    result = apply_gamma(image.copy(), gamma)
    result = np.clip(result, 0.0, 1.0)
    return result.astype(np.float32)


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    The image is shown the way it would be exported, with gamma correction
    applied when the renderer's options ask for it.

    Args:
        renderer: The Renderer instance to display.
        title: Custom title (default shows resolution and sample count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(renderer.get_output_image())

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        options = renderer.options
        title = f"{options.width}x{options.height} - {options.sample_count} SPP"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
