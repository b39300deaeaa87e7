"""Glass (dielectric) material with total-internal-reflection fallback.

This module implements the glass bounce: the incoming ray is refracted with
Snell's law, taking the medium ordering from which side of the surface the
ray arrives on. Outside the sphere is air (IOR 1.0); inside is the sphere's
own index of refraction.

When refraction is impossible (total internal reflection) the ray is
reflected instead. A glass hit therefore always produces a valid unit
direction and never terminates the light path.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when sin(theta_t) > 1

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.glass import scatter_glass
    >>> # Use within a Taichi kernel:
    >>> # next_ray = scatter_glass(ray, hit_point, normal, ior)
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, reflect, refract

# Type alias for 3D vectors
vec3 = tm.vec3

# Index of refraction of the medium surrounding every sphere
OUTSIDE_IOR = 1.0


@ti.func
def glass_direction(v: vec3, normal: vec3, ior_from: ti.f32, ior_to: ti.f32):
    """Refract through a surface, falling back to reflection on TIR.

    Args:
        v: Direction pointing away from the surface toward the previous
            ray origin (unit length).
        normal: The outward surface normal (unit length).
        ior_from: Index of refraction on the outward side.
        ior_to: Index of refraction on the inward side.

    Returns:
        A tuple of (direction, reflected) where:
        - direction: The refracted direction, or the mirror direction when
          total internal reflection occurs (always unit length).
        - reflected: 1 if total internal reflection forced a reflection.
    """
    direction, refracted = refract(v, normal, ior_from, ior_to)
    reflected = 0
    if refracted == 0:
        direction = reflect(v, normal)
        reflected = 1
    return direction, reflected


@ti.func
def scatter_glass(ray: Ray, hit_point: vec3, normal: vec3, ior: ti.f32) -> Ray:
    """Generate the next ray at a glass hit.

    Args:
        ray: The ray that hit the glass sphere.
        hit_point: The hit position.
        normal: The outward surface normal at the hit (unit length).
        ior: Index of refraction of the glass.

    Returns:
        The refracted (or internally reflected) ray starting at the hit point.
    """
    direction, _ = glass_direction(-ray.direction, normal, OUTSIDE_IOR, ior)
    return make_ray(hit_point, direction)
