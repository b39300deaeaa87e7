"""Unit tests for the ray data structure and the reflection/refraction laws.

Tests cover:
- Ray dataclass and ray_at function
- reflect() is an involution about a fixed normal
- refract() with matching indices does not bend the ray
- refract() reports total internal reflection beyond the critical angle
- refract() flips the normal for rays arriving from inside
"""

import math

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test that ray_at(0) returns the origin."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 1.0) < 1e-6
        assert abs(p[1] - 2.0) < 1e-6
        assert abs(p[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at along the direction."""
        from whitted.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 2.5) < 1e-6
        assert abs(p[1] - 1.0) < 1e-6
        assert abs(p[2]) < 1e-6


class TestReflect:
    """Tests for the law of reflection."""

    def test_reflect_normal_incidence(self):
        """A vector along the normal reflects onto itself."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_45_degrees(self):
        """v = (-1, 1, 0)/sqrt(2) about +y reflects to (1, 1, 0)/sqrt(2)."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = ti.math.normalize(vec3(-1.0, 1.0, 0.0))
            result[None] = reflect(v, vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        s = 1.0 / math.sqrt(2.0)
        assert abs(r[0] - s) < 1e-5
        assert abs(r[1] - s) < 1e-5
        assert abs(r[2]) < 1e-6

    def test_reflect_twice_returns_original(self):
        """Reflecting twice about the same normal gives back the input."""
        from whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=4)
        original = ti.Vector.field(3, dtype=ti.f32, shape=4)

        @ti.kernel
        def test_kernel():
            n = ti.math.normalize(vec3(0.3, 0.8, -0.5))
            original[0] = ti.math.normalize(vec3(1.0, 2.0, 3.0))
            original[1] = ti.math.normalize(vec3(-0.2, 0.1, 0.9))
            original[2] = ti.math.normalize(vec3(0.0, -1.0, 0.0))
            original[3] = n
            for i in range(4):
                result[i] = reflect(reflect(original[i], n), n)

        test_kernel()
        for i in range(4):
            for c in range(3):
                assert abs(result[i][c] - original[i][c]) < 1e-5

    def test_reflect_preserves_length(self):
        """Unit inputs give a unit output."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = ti.math.normalize(vec3(0.4, 0.7, -0.2))
            n = ti.math.normalize(vec3(-0.1, 0.9, 0.3))
            result[None] = ti.math.length(reflect(v, n))

        test_kernel()
        assert abs(result[None] - 1.0) < 1e-5


class TestRefract:
    """Tests for Snell refraction."""

    def test_refract_equal_iors_normal_incidence(self):
        """Matching indices at normal incidence continue straight through."""
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            d, ok = refract(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0), 1.0, 1.0)
            direction[None] = d
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 1
        d = direction[None]
        assert abs(d[0]) < 1e-6
        assert abs(d[1]) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6

    def test_refract_equal_iors_oblique(self):
        """Matching indices never bend the ray, even at oblique incidence."""
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = ti.math.normalize(vec3(0.6, 0.8, 0.0))
            d, _ = refract(v, vec3(0.0, 1.0, 0.0), 1.5, 1.5)
            direction[None] = d

        test_kernel()
        d = direction[None]
        assert abs(d[0] + 0.6) < 1e-5
        assert abs(d[1] + 0.8) < 1e-5
        assert abs(d[2]) < 1e-6

    def test_refract_snell_law(self):
        """Entering glass at 45 degrees obeys sin(t) = sin(i) / 1.5."""
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            v = ti.math.normalize(vec3(-1.0, 1.0, 0.0))
            d, ok = refract(v, vec3(0.0, 1.0, 0.0), 1.0, 1.5)
            direction[None] = d
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 1
        d = direction[None]
        sin_i = math.sin(math.radians(45.0))
        sin_t = sin_i / 1.5
        assert abs(d[0] - sin_t) < 1e-5
        assert abs(d[1] + math.sqrt(1.0 - sin_t * sin_t)) < 1e-5
        assert abs(math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2) - 1.0) < 1e-5

    def test_refract_from_inside_flips_normal(self):
        """A ray leaving glass bends away from the (flipped) normal."""
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            # Inside the sphere, travelling toward +y through a +y outward normal:
            # v points back into the sphere, so dot(v, n) < 0.
            angle = ti.math.radians(20.0)
            v = vec3(ti.sin(angle), -ti.cos(angle), 0.0)
            d, ok = refract(v, vec3(0.0, 1.0, 0.0), 1.0, 1.5)
            direction[None] = d
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 1
        d = direction[None]
        sin_t = 1.5 * math.sin(math.radians(20.0))
        assert abs(d[0] + sin_t) < 1e-5
        assert abs(d[1] - math.sqrt(1.0 - sin_t * sin_t)) < 1e-5

    def test_refract_total_internal_reflection(self):
        """Beyond the critical angle from glass to air, refraction fails."""
        from whitted.core.ray import refract, vec3

        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            # 60 degrees from the normal, critical angle is about 41.8 degrees
            angle = ti.math.radians(60.0)
            v = vec3(ti.sin(angle), ti.cos(angle), 0.0)
            _, ok = refract(v, vec3(0.0, 1.0, 0.0), 1.5, 1.0)
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 0
