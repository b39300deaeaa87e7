"""Whitted-style integrator and per-pixel sampling kernel.

The integrator follows a primary ray through the scene with a bounded loop:

    no hit:   the walk ends; the color is whatever it holds (black unless
              a diffuse hit already set it)
    mirror:   the ray is replaced by its reflection, color untouched
    glass:    the ray is replaced by its refraction (or the total internal
              reflection fallback), color untouched
    diffuse:  the color is overwritten with the shadow-tested direct light

Colors are never accumulated along a path: the diffuse shading event at the
end of a specular chain is the only contribution, with no attenuation from
the mirrors or glass it went through. A purely specular path that runs out
of bounces stays black.

A diffuse hit ends the walk. Continuing would re-trace the same unchanged
ray and reproduce the same color on every remaining iteration, so stopping
there gives identical results.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.integrator import render_image, setup_render_target
    >>> from whitted.scene.default_scenes import create_showcase_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(512, 512)
    >>> render_image(sample_count=1, jitter_enabled=False)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import pixel_to_uv, sample_ray
from whitted.core.options import MAX_DEPTH
from whitted.core.ray import Ray, make_ray
from whitted.materials.diffuse import shade_diffuse
from whitted.materials.glass import scatter_glass
from whitted.materials.mirror import scatter_mirror
from whitted.scene.intersection import (
    T_MAX,
    T_MIN,
    get_sphere_albedo,
    get_sphere_ior,
    get_sphere_material,
    intersect_scene,
)
from whitted.scene.lighting import get_light
from whitted.scene.manager import MaterialType

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Bounce Bound
# =============================================================================

_max_depth = ti.field(dtype=ti.i32, shape=())


def set_max_depth(max_depth: int) -> None:
    """Set the maximum number of bounce iterations per primary ray.

    Raises:
        ValueError: If max_depth is less than 1.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth = {max_depth} must be at least 1")
    _max_depth[None] = max_depth


def get_max_depth() -> int:
    """Get the current bounce bound."""
    return int(_max_depth[None])


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Result slot for single-ray traces
_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Bounce Loop
# =============================================================================


@ti.func
def trace(ray: Ray) -> vec3:
    """Trace a primary ray through the scene and return its color.

    Args:
        ray: The primary ray (unit-length direction).

    Returns:
        The color of the last diffuse hit along the specular chain, or black
        if the ray escaped or ran out of bounces without one.
    """
    origin = ray.origin
    direction = ray.direction
    color = vec3(0.0, 0.0, 0.0)
    light = get_light()

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(_max_depth[None]):
        if active == 1:
            info = intersect_scene(origin, direction, T_MIN, T_MAX)

            if info.hit == 0:
                active = 0
            else:
                material = get_sphere_material(info.sphere_index)

                if material == int(MaterialType.MIRROR):
                    next_ray = scatter_mirror(
                        make_ray(origin, direction), info.point, info.normal
                    )
                    origin = next_ray.origin
                    direction = next_ray.direction
                elif material == int(MaterialType.GLASS):
                    next_ray = scatter_glass(
                        make_ray(origin, direction),
                        info.point,
                        info.normal,
                        get_sphere_ior(info.sphere_index),
                    )
                    origin = next_ray.origin
                    direction = next_ray.direction
                else:
                    color = shade_diffuse(
                        info.point,
                        info.normal,
                        get_sphere_albedo(info.sphere_index),
                        light,
                    )
                    active = 0

    return color


@ti.kernel
def _trace_ray_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    """Trace a single ray and store its color in the result slot."""
    # Outermost loops are parallelized; keep the bounce loop serial
    for _ in range(1):
        ray = make_ray(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)))
        _trace_result[None] = trace(ray)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace a single ray from Python scope.

    Used for testing and debugging. The direction is normalized.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z), non-zero.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If the direction is the zero vector.
    """
    if direction[0] == 0.0 and direction[1] == 0.0 and direction[2] == 0.0:
        raise ValueError("Ray direction must be non-zero")
    _trace_ray_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2]
    )
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Sampling Kernel
# =============================================================================


@ti.kernel
def _render_rows(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    sample_count: ti.i32,
    jitter_enabled: ti.i32,
):
    """Render rows [row_start, row_end) of the image.

    Each pixel averages sample_count primary rays. Without jitter every
    sample goes through the pixel center.
    """
    for i, j in ti.ndrange(width, (row_start, row_end)):
        color = vec3(0.0, 0.0, 0.0)

        for s in range(sample_count):
            du = 0.5
            dv = 0.5
            if jitter_enabled == 1:
                du = ti.random(ti.f32)
                dv = ti.random(ti.f32)

            uv = pixel_to_uv(
                ti.cast(i, ti.f32) + du, ti.cast(j, ti.f32) + dv, width, height
            )

            sample = trace(sample_ray(uv[0], uv[1]))

            # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
            color += (sample - color) / ti.cast(s + 1, ti.f32)

        _color_buffer[i, j] = color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(
    row_start: int,
    row_end: int,
    sample_count: int = 1,
    jitter_enabled: bool = False,
) -> None:
    """Render a band of image rows into the render target.

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row to render.
        sample_count: Primary rays per pixel.
        jitter_enabled: Whether to jitter samples within the pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range or sample count is invalid.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) is outside [0, {height})")
    if sample_count < 1:
        raise ValueError(f"sample_count = {sample_count} must be at least 1")

    if row_end > row_start:
        _render_rows(
            row_start, row_end, width, height, sample_count, 1 if jitter_enabled else 0
        )


def render_image(sample_count: int = 1, jitter_enabled: bool = False) -> None:
    """Render the whole image into the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    render_rows(0, height, sample_count, jitter_enabled)


def get_image_numpy() -> np.ndarray:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32 and row 0 at
    the top of the image. Values are not clamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)


# Default bounce bound until set_max_depth() is called
set_max_depth(MAX_DEPTH)
