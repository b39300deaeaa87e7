"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera casting rays from a sensor through the pinhole

Ray generation uses image-plane coordinates roughly in [-1, 1]:
    u: left to right across the image
    v: top to bottom across the image
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    pixel_to_uv,
    sample_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "sample_ray",
    "pixel_to_uv",
    "get_camera_info",
]
