"""Ray data structure and the vector laws used at specular surfaces.

This module provides the Ray dataclass together with the reflection and
refraction laws that generate the next ray at mirror and glass hits. All
routines are Taichi functions so they can run inside the per-pixel kernel.

Direction convention for the bounce laws: ``v`` points *away* from the
surface, back toward the origin of the incoming ray (the negated ray
direction). Both ``v`` and ``n`` are expected to be unit length.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit-length direction.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3, unit length).
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi scope."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(v: vec3, normal: vec3) -> vec3:
    """Reflect a direction about a surface normal.

    Computes ``-v + 2 * dot(v, n) * n``. Reflecting twice about the same
    normal returns the original vector, and the result is unit length when
    both inputs are.

    Args:
        v: Direction pointing away from the surface toward the previous
            ray origin (the negated incoming ray direction).
        normal: The surface normal (unit length, either orientation).

    Returns:
        The mirror direction leaving the surface.
    """
    return -v + 2.0 * tm.dot(v, normal) * normal


@ti.func
def refract(v: vec3, normal: vec3, ior_from: ti.f32, ior_to: ti.f32):
    """Refract a direction through a surface using Snell's law.

    The side of the surface is decided from the sign of ``dot(v, normal)``:
    a negative value means the ray arrives from inside, in which case the
    normal is negated and the two indices of refraction are swapped before
    the law is applied.

    With ``eta = ior_from / ior_to`` and ``cos_i = dot(v, n)``, refraction is
    impossible when ``1 - eta^2 (1 - cos_i^2)`` is negative (total internal
    reflection). The refracted direction is otherwise

        normalize(-eta * (v - cos_i * n) - cos_t * n)

    Args:
        v: Direction pointing away from the surface toward the previous
            ray origin (unit length).
        normal: The outward surface normal (unit length).
        ior_from: Index of refraction on the outward side of the surface.
        ior_to: Index of refraction on the inward side of the surface.

    Returns:
        A tuple of (direction, refracted) where:
        - direction: The refracted direction (unit length), or a zero vector
          when refraction is impossible.
        - refracted: 1 if the ray refracted, 0 on total internal reflection.
    """
    n = normal
    eta = ior_from / ior_to
    cos_i = tm.dot(v, normal)
    if cos_i < 0.0:
        # Arriving from inside: flip the normal and the IOR ordering
        n = -normal
        eta = ior_to / ior_from
        cos_i = -cos_i

    sin2_t = eta * eta * tm.max(0.0, 1.0 - cos_i * cos_i)

    direction = vec3(0.0, 0.0, 0.0)
    refracted = 0
    if sin2_t <= 1.0:
        cos_t = ti.sqrt(1.0 - sin2_t)
        direction = tm.normalize(-eta * (v - cos_i * n) - cos_t * n)
        refracted = 1
    return direction, refracted
