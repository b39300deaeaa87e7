"""Materials module for the three surface kinds.

Components:
    diffuse: Lambertian shading with a shadow-tested directional light
    mirror: Perfect specular reflection
    glass: Snell refraction with total-internal-reflection fallback

Mirror and glass only redirect the ray; the single diffuse shading event at
the end of a specular chain determines the color of a path.

All routines are implemented as Taichi functions for kernel execution.
"""

from .diffuse import eval_direct_lighting, is_occluded, shade_diffuse
from .glass import OUTSIDE_IOR, glass_direction, scatter_glass
from .mirror import mirror_direction, scatter_mirror

__all__ = [
    # Diffuse
    "shade_diffuse",
    "eval_direct_lighting",
    "is_occluded",
    # Mirror
    "mirror_direction",
    "scatter_mirror",
    # Glass
    "glass_direction",
    "scatter_glass",
    "OUTSIDE_IOR",
]
