"""Diffuse (Lambertian) surfaces shaded by shadow-tested direct lighting.

A diffuse hit terminates the specular chain with a single shading event:

    light visible:  max(dot(L, n), 0) * albedo  [+ ambient * albedo]
    light blocked:  ambient * albedo

where L is the unit direction toward the directional light and n is the
outward surface normal. Whether the ambient floor is also added to lit
points is a lighting option (see setup_lighting). The light itself is
passed in as a Light value rather than read from scene state.

Visibility is decided by casting a shadow ray from the hit point toward the
light and asking the scene whether it hits anything at all.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.diffuse import shade_diffuse
    >>> # Use within a Taichi kernel:
    >>> # color = shade_diffuse(hit_point, normal, albedo, get_light())
"""

import taichi as ti
import taichi.math as tm

from whitted.scene.intersection import T_MAX, T_MIN, intersect_scene_any
from whitted.scene.lighting import Light

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def is_occluded(point: vec3, light_direction: vec3) -> ti.i32:
    """Shadow test toward a directional light.

    Args:
        point: The surface point the shadow ray starts from.
        light_direction: Unit direction toward the light.

    Returns:
        1 if any sphere blocks the light, 0 if the light is visible.
    """
    return intersect_scene_any(point, light_direction, T_MIN, T_MAX)


@ti.func
def eval_direct_lighting(
    albedo: vec3,
    normal: vec3,
    light_direction: vec3,
    ambient: ti.f32,
    occluded: ti.i32,
    ambient_always_added: ti.i32,
) -> vec3:
    """Evaluate the Lambertian direct-lighting formula.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The outward surface normal (unit length).
        light_direction: Unit direction toward the light.
        ambient: Ambient factor.
        occluded: 1 if the light is blocked at this point.
        ambient_always_added: 1 to add the ambient term to lit points too.

    Returns:
        The shaded color.
    """
    color = ambient * albedo
    if occluded == 0:
        lit = tm.max(tm.dot(light_direction, normal), 0.0) * albedo
        if ambient_always_added == 1:
            color = lit + ambient * albedo
        else:
            color = lit
    return color


@ti.func
def shade_diffuse(point: vec3, normal: vec3, albedo: vec3, light: Light) -> vec3:
    """Shade a diffuse hit under the given light.

    Args:
        point: The hit position.
        normal: The outward surface normal at the hit (unit length).
        albedo: The albedo (kd) of the hit sphere.
        light: The scene light, usually get_light() read once per ray.

    Returns:
        The direct-lit color of the hit point.
    """
    occluded = is_occluded(point, light.direction)
    return eval_direct_lighting(
        albedo,
        normal,
        light.direction,
        light.ambient,
        occluded,
        light.ambient_always_added,
    )
