"""Pinhole camera model for primary ray generation.

The camera is described by an eye position, a view direction and a field of
view. Rays start on a virtual sensor plane behind the pinhole and pass
through it, so the image comes out already flipped the right way round:
image-plane coordinate v = -1 maps to the top row of the image and u = -1
to the left column.

Image-plane coordinates (u, v) are roughly in [-1, 1] with the aspect ratio
folded in by the caller; see pixel_to_uv() for the mapping from pixel
indices.

The camera basis is computed once on the Python side with NumPy and stored
in Taichi fields for use inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera, sample_ray
    >>>
    >>> camera = PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0))
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = sample_ray(0.0, 0.0)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray

# World up direction used to orient the sensor
WORLD_UP = (0.0, 1.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera (pinhole) position in world space (x, y, z).
        forward: View direction (x, y, z). Normalized on setup.
        fov: Field of view in degrees.
    """

    position: tuple[float, float, float]
    forward: tuple[float, float, float]
    fov: float = 90.0

    @classmethod
    def look_at(
        cls,
        position: tuple[float, float, float],
        target: tuple[float, float, float],
        fov: float = 90.0,
    ) -> "PinholeCamera":
        """Create a camera at position looking toward target."""
        forward = (
            target[0] - position[0],
            target[1] - position[1],
            target[2] - position[2],
        )
        return cls(position=position, forward=forward, fov=fov)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())

# Sensor axes; the pinhole mirrors them in the image
_sensor_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_sensor_v = ti.Vector.field(3, dtype=ti.f32, shape=())

# Distance from the sensor plane to the pinhole
_pinhole_distance = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Builds the sensor basis from the view direction and the world up axis,
    and the pinhole distance 2 / tan(fov / 2). Must be called before
    rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the forward direction is zero or parallel to the
            world up axis, or the field of view is outside (0, 180).
    """
    if not 0.0 < camera.fov < 180.0:
        raise ValueError(f"Field of view = {camera.fov} must be in (0, 180) degrees")

    forward = np.array(camera.forward, dtype=np.float64)
    length = np.linalg.norm(forward)
    if length < 1e-12:
        raise ValueError("Camera forward direction must be non-zero")
    forward = forward / length

    u = np.cross(np.array(WORLD_UP), forward)
    u_length = np.linalg.norm(u)
    if u_length < 1e-12:
        raise ValueError("Camera forward direction must not be parallel to world up")
    u = u / u_length

    v = np.cross(forward, u)

    _camera_position[None] = [float(c) for c in camera.position]
    _camera_forward[None] = forward.tolist()
    _sensor_u[None] = u.tolist()
    _sensor_v[None] = v.tolist()
    _pinhole_distance[None] = 2.0 / math.tan(math.radians(camera.fov) / 2.0)


@ti.func
def pixel_to_uv(x: ti.f32, y: ti.f32, width: ti.i32, height: ti.i32) -> tm.vec2:
    """Map a (sub-)pixel position to image-plane coordinates.

    u = (2x - width) / height and v = (2y - height) / height, so the aspect
    ratio is folded into u.

    Args:
        x: Horizontal pixel position, e.g. i + 0.5 for the pixel center.
        y: Vertical pixel position (0 = top row).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The (u, v) coordinates passed to sample_ray().
    """
    return tm.vec2((2.0 * x - width) / height, (2.0 * y - height) / height)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def sample_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a primary ray for image-plane coordinates (u, v).

    The ray starts at the sensor point and passes through the pinhole.

    Args:
        u: Horizontal coordinate (-1 = left edge for a square image).
        v: Vertical coordinate (-1 = top edge).

    Returns:
        A Ray with a unit-length direction.
    """
    position = _camera_position[None]
    sensor_point = position + u * _sensor_u[None] + v * _sensor_v[None]
    pinhole = position + _pinhole_distance[None] * _camera_forward[None]
    direction = tm.normalize(pinhole - sensor_point)
    return make_ray(sensor_point, direction)



# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with position, forward, sensor_u, sensor_v and
        pinhole_distance.
    """
    p = _camera_position[None]
    f = _camera_forward[None]
    su = _sensor_u[None]
    sv = _sensor_v[None]
    return {
        "position": (float(p[0]), float(p[1]), float(p[2])),
        "forward": (float(f[0]), float(f[1]), float(f[2])),
        "sensor_u": (float(su[0]), float(su[1]), float(su[2])),
        "sensor_v": (float(sv[0]), float(sv[1]), float(sv[2])),
        "pinhole_distance": float(_pinhole_distance[None]),
    }
