"""Scene-level sphere storage and ray intersection queries.

This module stores the scene's spheres in Taichi fields and provides the
nearest-hit query used by the integrator and the any-hit query used by the
shadow test. Both are a linear scan over every sphere; the scene has no
spatial index.

Each sphere carries its shading data (albedo, material kind, index of
refraction) alongside its geometry. Hit records refer to the hit sphere by
its index into these arrays, so a record stays a plain copyable value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import (
    ...     add_sphere, clear_scene, query_nearest_hit
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -3), 1.0, albedo=(0.8, 0.2, 0.2), material=0)
    >>> hit = query_nearest_hit((0, 0, 0), (0, 0, -1))
    >>> hit.t
    2.0
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.geometry.sphere import Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Self-intersection epsilon and far bound for every scene query
T_MIN = 1e-3
T_MAX = 1e9


@ti.dataclass
class IntersectInfo:
    """Record of a ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        t: Distance along the ray to the nearest accepted root.
            Only valid if hit == 1.
        point: The hit position origin + t * direction.
            Only valid if hit == 1.
        normal: The outward unit normal of the hit sphere at the hit point.
            Only valid if hit == 1.
        sphere_index: Index of the hit sphere in the scene arrays.
            -1 when there is no hit.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    sphere_index: ti.i32


@dataclass
class HitInfo:
    """Host-side copy of a nearest-hit query result.

    Attributes:
        t: Distance along the ray to the hit.
        point: The hit position as (x, y, z).
        normal: The outward unit normal at the hit as (x, y, z).
        sphere_index: Index of the hit sphere in the scene.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    sphere_index: int


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_materials = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_iors = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Result slots for host-side queries
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_sphere_index = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not
    cleared but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    albedo: tuple[float, float, float],
    material: int,
    ior: float = 1.5,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        albedo: The diffuse reflectance (kd) of the sphere.
        material: The material kind as an integer (see MaterialType).
        ior: Index of refraction, used when the sphere is glass.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    sphere_materials[idx] = int(material)
    sphere_iors[idx] = ior
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere_albedo(sphere_index: ti.i32) -> vec3:
    """Get the albedo (diffuse coefficient) of a sphere by index."""
    return sphere_albedos[sphere_index]


@ti.func
def get_sphere_material(sphere_index: ti.i32) -> ti.i32:
    """Get the material kind of a sphere by index."""
    return sphere_materials[sphere_index]


@ti.func
def get_sphere_ior(sphere_index: ti.i32) -> ti.f32:
    """Get the index of refraction of a sphere by index."""
    return sphere_iors[sphere_index]


@ti.func
def _make_miss_record() -> IntersectInfo:
    """Create an IntersectInfo indicating no intersection."""
    return IntersectInfo(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        sphere_index=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> IntersectInfo:
    """Find the nearest sphere hit along a ray.

    Tests every sphere and keeps the globally smallest accepted root. The
    upper bound shrinks to the closest hit so far, so later spheres only
    replace the result when they are strictly nearer.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (unit length).
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        An IntersectInfo for the closest intersection, or a miss record if
        no sphere was hit.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = IntersectInfo(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                sphere_index=i,
            )

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> ti.i32:
    """Test if a ray hits any sphere in the scene (shadow ray query).

    Material kind and hit distance are irrelevant here: any accepted hit
    counts as occlusion.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (unit length).
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0:
            sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
            rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1

    return hit_any


@ti.kernel
def _nearest_hit_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    """Run a single nearest-hit query and store it in the result slots."""
    # Outermost loops are parallelized; keep the sphere scan serial
    for _ in range(1):
        info = intersect_scene(vec3(ox, oy, oz), vec3(dx, dy, dz), T_MIN, T_MAX)
        _query_hit[None] = info.hit
        _query_t[None] = info.t
        _query_point[None] = info.point
        _query_normal[None] = info.normal
        _query_sphere_index[None] = info.sphere_index


def _normalized(direction: tuple[float, float, float]) -> tuple[float, float, float]:
    length = math.sqrt(sum(c * c for c in direction))
    if length == 0.0:
        raise ValueError("Ray direction must be non-zero")
    return (direction[0] / length, direction[1] / length, direction[2] / length)


def query_nearest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> "HitInfo | None":
    """Find the nearest hit along a ray from Python scope.

    The direction is normalized before the query.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z).

    Returns:
        A HitInfo for the nearest hit, or None if the ray misses every sphere.

    Raises:
        ValueError: If the direction is the zero vector.
    """
    d = _normalized(direction)
    _nearest_hit_kernel(origin[0], origin[1], origin[2], d[0], d[1], d[2])

    if _query_hit[None] == 0:
        return None

    p = _query_point[None]
    n = _query_normal[None]
    return HitInfo(
        t=float(_query_t[None]),
        point=(float(p[0]), float(p[1]), float(p[2])),
        normal=(float(n[0]), float(n[1]), float(n[2])),
        sphere_index=int(_query_sphere_index[None]),
    )
