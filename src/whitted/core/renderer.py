"""High-level renderer driving the integrator.

This module provides a convenient wrapper around the core integrator that:
- Applies a RenderOptions and LightingConfig before each render
- Renders the image in row batches with progress callbacks
- Returns the image as NumPy arrays, optionally gamma corrected
- Saves the output image

The integrator's buffers are global Taichi fields, so one Renderer is active
at a time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.options import RenderOptions
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.default_scenes import create_showcase_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(RenderOptions.supersampled(16))
    >>> renderer.render()
    >>> renderer.save_image("output.ppm")
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from whitted.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_rows,
    set_max_depth,
    setup_render_target,
)
from whitted.core.options import RenderOptions
from whitted.preview.display import apply_gamma
from whitted.preview.export import save_image_from_array
from whitted.scene.lighting import LightingConfig, setup_lighting

# Type alias for progress callback
# Callback receives (rows_done, rows_total)
ProgressCallback = Callable[[int, int], None]

# Rows rendered per kernel launch
DEFAULT_ROWS_PER_BATCH = 64


class Renderer:
    """Renders the current scene with the given options.

    Attributes:
        options: The render options.
        lighting: The lighting configuration.
    """

    def __init__(
        self,
        options: RenderOptions | None = None,
        lighting: LightingConfig | None = None,
    ) -> None:
        """Initialize the renderer and its render target.

        Args:
            options: Render options. Defaults to RenderOptions().
            lighting: Lighting configuration. Defaults to LightingConfig().

        Raises:
            ValueError: If the options are invalid or the dimensions exceed
                the maximum supported size.
        """
        self.options = options if options is not None else RenderOptions()
        self.lighting = lighting if lighting is not None else LightingConfig()
        self.options.validate()
        setup_render_target(self.options.width, self.options.height)
        self._rows_done = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.options.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.options.height

    @property
    def rows_done(self) -> int:
        """Get the number of rows rendered by the last render."""
        return self._rows_done

    def _prepare(self) -> None:
        self.options.validate()
        setup_render_target(self.width, self.height)
        set_max_depth(self.options.max_depth)
        setup_lighting(self.lighting, self.options.ambient_always_added)
        self._rows_done = 0

    def render_progressive(
        self,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image in row batches, yielding progress after each batch.

        Args:
            rows_per_batch: Number of rows rendered before each yield.

        Yields:
            Tuple of (rows_done, rows_total).

        Raises:
            ValueError: If rows_per_batch is less than 1.
        """
        if rows_per_batch < 1:
            raise ValueError(f"rows_per_batch = {rows_per_batch} must be at least 1")

        self._prepare()

        while self._rows_done < self.height:
            row_end = min(self._rows_done + rows_per_batch, self.height)
            render_rows(
                self._rows_done,
                row_end,
                self.options.sample_count,
                self.options.jitter_enabled,
            )
            self._rows_done = row_end
            yield (self._rows_done, self.height)

    def render(
        self,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the full image with optional progress callback.

        Args:
            rows_per_batch: Number of rows rendered before each callback.
            callback: Optional callback called after each batch.
                Receives (rows_done, rows_total).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(rows_per_batch=32, callback=progress)
        """
        for rows_done, rows_total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(rows_done, rows_total)

    def reset(self) -> None:
        """Clear the image to black."""
        clear_render_target()
        self._rows_done = 0

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Args:
            gamma: Gamma correction value. Default 1.0 returns the raw
                linear colors without clamping.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32,
            row 0 at the top of the image.
        """
        return apply_gamma(get_image_numpy(), gamma)

    def get_output_image(self) -> npt.NDArray[np.float32]:
        """Get the image as it is exported, gamma corrected if the options say so."""
        gamma = self.options.gamma if self.options.gamma_correct else 1.0
        return self.get_image_numpy(gamma=gamma)

    def save_image(self, filepath: str | Path) -> None:
        """Save the output image to a .ppm or .png file."""
        save_image_from_array(self.get_output_image(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.options.sample_count}, "
            f"jitter={self.options.jitter_enabled})"
        )
