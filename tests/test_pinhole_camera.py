"""Unit tests for the pinhole camera.

Tests cover:
- Camera basis construction
- Pinhole distance from the field of view
- Ray generation through the image center and the image corners
- Pixel to image-plane coordinate mapping
- Validation of degenerate configurations
"""

import math

import pytest
import taichi as ti


def _sample(u, v):
    """Generate a camera ray in a kernel and return (origin, direction)."""
    from whitted.camera.pinhole import sample_ray

    origin = ti.field(dtype=ti.math.vec3, shape=())
    direction = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(u: ti.f32, v: ti.f32):
        ray = sample_ray(u, v)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(u, v)
    o = origin[None]
    d = direction[None]
    return (o[0], o[1], o[2]), (d[0], d[1], d[2])


class TestCameraSetup:
    """Tests for setup_camera."""

    def test_basis_looking_down_negative_z(self):
        """Looking down -z, the sensor axes are -x and +y."""
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        setup_camera(PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0)))
        info = get_camera_info()

        assert info["position"] == pytest.approx((0.0, 0.0, 5.0))
        assert info["forward"] == pytest.approx((0.0, 0.0, -1.0))
        assert info["sensor_u"] == pytest.approx((-1.0, 0.0, 0.0), abs=1e-6)
        assert info["sensor_v"] == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)

    def test_pinhole_distance_from_fov(self):
        """The pinhole sits 2 / tan(fov / 2) in front of the sensor."""
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 0, -1), fov=90.0))
        assert get_camera_info()["pinhole_distance"] == pytest.approx(2.0, abs=1e-5)

        setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 0, -1), fov=60.0))
        expected = 2.0 / math.tan(math.radians(30.0))
        assert get_camera_info()["pinhole_distance"] == pytest.approx(expected, abs=1e-4)

    def test_forward_is_normalized(self):
        """A non-unit view direction is normalized."""
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        setup_camera(PinholeCamera(position=(4.0, 1.0, 7.0), forward=(-4.0, -1.0, -7.0)))
        f = get_camera_info()["forward"]

        assert math.sqrt(sum(c * c for c in f)) == pytest.approx(1.0, abs=1e-6)

    def test_look_at(self):
        """look_at points the camera from position toward the target."""
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera.look_at((4.0, 1.0, 7.0), (0.0, 0.0, 0.0))

        assert camera.forward == (-4.0, -1.0, -7.0)
        assert camera.fov == 90.0

    def test_zero_forward_raises(self):
        """A zero view direction is rejected."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="non-zero"):
            setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 0, 0)))

    def test_vertical_forward_raises(self):
        """Looking straight up leaves the sensor orientation undefined."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="parallel"):
            setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 1, 0)))

    def test_invalid_fov_raises(self):
        """The field of view must lie strictly between 0 and 180 degrees."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="Field of view"):
            setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 0, -1), fov=0.0))
        with pytest.raises(ValueError, match="Field of view"):
            setup_camera(PinholeCamera(position=(0, 0, 0), forward=(0, 0, -1), fov=180.0))


class TestSampleRay:
    """Tests for sample_ray."""

    def test_center_ray_along_forward(self):
        """(0, 0) looks straight down the view direction from the camera position."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0)))
        origin, direction = _sample(0.0, 0.0)

        assert origin == pytest.approx((0.0, 0.0, 5.0), abs=1e-6)
        assert direction == pytest.approx((0.0, 0.0, -1.0), abs=1e-6)

    def test_negative_v_looks_up(self):
        """v = -1 (top of the image) produces an upward ray."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0)))
        origin, direction = _sample(0.0, -1.0)

        assert origin == pytest.approx((0.0, -1.0, 5.0), abs=1e-6)
        s = 1.0 / math.sqrt(5.0)
        assert direction == pytest.approx((0.0, s, -2.0 * s), abs=1e-5)

    def test_negative_u_looks_left(self):
        """u = -1 (left of the image) produces a ray toward -x when looking down -z."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0)))
        _, direction = _sample(-1.0, 0.0)

        assert direction[0] < 0.0
        assert abs(direction[1]) < 1e-6

    def test_directions_are_unit_length(self):
        """Every generated direction is normalized."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera.look_at((4.0, 1.0, 7.0), (0.0, 0.0, 0.0)))
        for u, v in [(-1.0, -1.0), (0.3, 0.7), (1.0, 1.0)]:
            _, direction = _sample(u, v)
            assert math.sqrt(sum(c * c for c in direction)) == pytest.approx(1.0, abs=1e-5)


class TestPixelToUV:
    """Tests for pixel_to_uv, the mapping used by the render kernel."""

    def _uv(self, x, y, width, height):
        from whitted.camera.pinhole import pixel_to_uv

        result = ti.field(dtype=ti.math.vec2, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32, y: ti.f32, w: ti.i32, h: ti.i32):
            result[None] = pixel_to_uv(x, y, w, h)

        test_kernel(x, y, width, height)
        uv = result[None]
        return (uv[0], uv[1])

    def test_square_image(self):
        """Pixel edges map to [-1, 1] on a square image."""
        assert self._uv(0.0, 0.0, 512, 512) == pytest.approx((-1.0, -1.0))
        assert self._uv(512.0, 512.0, 512, 512) == pytest.approx((1.0, 1.0))
        assert self._uv(256.0, 256.0, 512, 512) == pytest.approx((0.0, 0.0))

    def test_aspect_ratio_folded_into_u(self):
        """u is divided by the height so wide images extend past +-1."""
        assert self._uv(0.0, 0.0, 200, 100) == pytest.approx((-2.0, -1.0))

    def test_pixel_center(self):
        """The center of pixel (0, 0) sits half a pixel inside the corner."""
        assert self._uv(0.5, 0.5, 4, 4) == pytest.approx((-0.75, -0.75))
