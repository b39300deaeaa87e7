"""Core rendering module.

Components:
    ray: Ray data structure and the reflection/refraction laws
    options: Render options and the two reference presets
    integrator: The bounded bounce loop and the per-pixel sampling kernel
    renderer: High-level Renderer driving the integrator in row batches

All per-ray routines are Taichi functions; the render loop is a Taichi
kernel parallelized across pixels.
"""

from .options import RenderOptions
from .ray import Ray, make_ray, ray_at, reflect, refract, vec3

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.integrator or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "reflect",
    "refract",
    "RenderOptions",
]
