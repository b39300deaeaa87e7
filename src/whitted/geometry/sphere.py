"""Sphere primitive and ray-sphere intersection.

A sphere is stored as a center and a radius. Substituting the ray
o + t*d into |p - center|^2 = radius^2 gives

    a*t^2 + 2*h*t + c = 0,   oc = o - center
    a = dot(d, d),  h = dot(d, oc),  c = dot(oc, oc) - radius^2

The roots are computed with the cancellation-free form
q = -(h + sign(h) * sqrt(h^2 - a*c)),
t = q/a and t = c/q. The large ground spheres of the reference scenes put
the camera a few units above a surface a thousand units from its center,
where the textbook formula loses most of its single-precision digits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>>
    >>> @ti.kernel
    ... def first_hit() -> ti.i32:
    ...     s = Sphere(center=ti.math.vec3(0, 0, -3), radius=1.0)
    ...     o = ti.math.vec3(0.0, 0.0, 0.0)
    ...     rec = hit_sphere(o, ti.math.vec3(0.0, 0.0, -1.0), s, 1e-3, 1e9)
    ...     return rec.hit
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# |q| vanishes only when h and the discriminant are both zero; c / q is
# undefined there
_Q_EPSILON = 1e-10


@ti.dataclass
class Sphere:
    """A sphere with a center and a positive radius."""

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a ray-sphere test.

    Attributes:
        hit: 1 if a root was found in (t_min, t_max), else 0.
        t: Ray parameter of the accepted root.
        point: origin + t * direction.
        normal: (point - center) / radius. Always points away from the
            center, also when the ray starts inside the sphere.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def sphere_roots(oc: vec3, direction: vec3, radius: ti.f32):
    """Return (real, t_near, t_far) for the ray-sphere quadratic.

    real is 0 when the discriminant is negative; the roots are then
    meaningless.
    """
    a = tm.dot(direction, direction)
    h = tm.dot(direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    disc = h * h - a * c

    real = 0
    t_near = 0.0
    t_far = 0.0
    if disc >= 0.0:
        real = 1
        root = ti.sqrt(disc)
        q = -h - ti.select(h < 0.0, -root, root)
        if ti.abs(q) > _Q_EPSILON:
            t_near = q / a
            t_far = c / q
        else:
            t_near = (-h - root) / a
            t_far = (-h + root) / a
        if t_near > t_far:
            swap = t_near
            t_near = t_far
            t_far = swap

    return real, t_near, t_far


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere.

    The near root wins when it lies strictly inside (t_min, t_max);
    otherwise the far root is tried. A ray starting inside the sphere
    therefore reports the exit point.

    Args:
        ray_origin: Ray origin.
        ray_direction: Ray direction (unit length).
        sphere: The sphere to test.
        t_min: Exclusive lower bound on t, keeps secondary rays off their
            own surface.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; only hit is meaningful when hit == 0.
    """
    oc = ray_origin - sphere.center
    real, t_near, t_far = sphere_roots(oc, ray_direction, sphere.radius)

    rec = HitRecord(
        hit=0, t=0.0, point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 0.0, 0.0)
    )
    if real == 1:
        t = t_near
        if t <= t_min or t >= t_max:
            t = t_far
        if (t > t_min) and (t < t_max):
            point = ray_origin + t * ray_direction
            rec.hit = 1
            rec.t = t
            rec.point = point
            rec.normal = (point - sphere.center) / sphere.radius

    return rec
