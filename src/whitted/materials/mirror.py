"""Mirror (perfect specular) material.

A mirror hit contributes no color of its own; it only redirects the ray.
The next ray starts at the hit point and follows the law of reflection:

    R = -v + 2 (v . n) n

where v is the negated incoming ray direction and n is the surface normal.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.mirror import scatter_mirror
    >>> # Use within a Taichi kernel:
    >>> # next_ray = scatter_mirror(ray, hit_point, normal)
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def mirror_direction(incident_direction: vec3, normal: vec3) -> vec3:
    """Compute the mirror direction for an incoming ray direction.

    Args:
        incident_direction: The incoming ray direction (toward the surface).
        normal: The surface normal at the hit (unit length).

    Returns:
        The reflected direction (unit length).
    """
    return reflect(-incident_direction, normal)


@ti.func
def scatter_mirror(ray: Ray, hit_point: vec3, normal: vec3) -> Ray:
    """Generate the next ray at a mirror hit.

    Args:
        ray: The ray that hit the mirror.
        hit_point: The hit position on the mirror.
        normal: The outward surface normal at the hit (unit length).

    Returns:
        The reflected ray starting at the hit point.
    """
    return make_ray(hit_point, mirror_direction(ray.direction, normal))
