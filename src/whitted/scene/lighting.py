"""Directional light and ambient configuration.

The scene is lit by a single directional light plus a constant ambient
floor. The configuration is a plain dataclass on the Python side and is
copied into 0-d Taichi fields by setup_lighting(). Kernels read it once
with get_light() and hand the resulting Light value to the shading
routine.

Example:
    >>> from whitted.scene.lighting import LightingConfig, setup_lighting
    >>> setup_lighting(LightingConfig(direction=(0.0, 1.0, 0.0), ambient=0.1))
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Defaults matching the reference renders
DEFAULT_LIGHT_DIRECTION = (0.5, 1.0, 0.5)
DEFAULT_AMBIENT = 0.1


@dataclass
class LightingConfig:
    """Configuration for the directional light and ambient term.

    Attributes:
        direction: Direction from the scene toward the light (x, y, z).
            Normalized when the configuration is applied.
        ambient: Constant ambient factor multiplied by the surface albedo.
    """

    direction: tuple[float, float, float] = DEFAULT_LIGHT_DIRECTION
    ambient: float = DEFAULT_AMBIENT

    def normalized_direction(self) -> tuple[float, float, float]:
        """Return the light direction scaled to unit length.

        Raises:
            ValueError: If the direction is the zero vector.
        """
        x, y, z = self.direction
        length = math.sqrt(x * x + y * y + z * z)
        if length < 1e-12:
            raise ValueError("Light direction must be non-zero")
        return (x / length, y / length, z / length)


@ti.dataclass
class Light:
    """Lighting as seen by the shading routine.

    Attributes:
        direction: Unit direction toward the light.
        ambient: Ambient factor.
        ambient_always_added: 1 if lit points also receive the ambient term.
    """

    direction: vec3
    ambient: ti.f32
    ambient_always_added: ti.i32


# Applied lighting, read once per primary ray through get_light()
_light_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_ambient = ti.field(dtype=ti.f32, shape=())
_ambient_always_added = ti.field(dtype=ti.i32, shape=())


def setup_lighting(
    config: "LightingConfig | None" = None,
    ambient_always_added: bool = True,
) -> None:
    """Apply a lighting configuration for subsequent renders.

    Args:
        config: The light configuration. Defaults to LightingConfig().
        ambient_always_added: If True, the ambient term is added to lit
            points as well as shadowed ones. If False, lit points receive
            only the Lambertian light term.

    Raises:
        ValueError: If the light direction is zero or ambient is negative.
    """
    if config is None:
        config = LightingConfig()
    if config.ambient < 0.0:
        raise ValueError(f"Ambient = {config.ambient} must be non-negative")

    _light_direction[None] = list(config.normalized_direction())
    _ambient[None] = config.ambient
    _ambient_always_added[None] = 1 if ambient_always_added else 0


def get_lighting_info() -> dict[str, object]:
    """Get the current lighting state for debugging.

    Returns:
        Dictionary with direction, ambient and ambient_always_added.
    """
    d = _light_direction[None]
    return {
        "direction": (float(d[0]), float(d[1]), float(d[2])),
        "ambient": float(_ambient[None]),
        "ambient_always_added": bool(_ambient_always_added[None]),
    }


@ti.func
def get_light() -> Light:
    """Snapshot the applied lighting as a Light value."""
    return Light(
        direction=_light_direction[None],
        ambient=_ambient[None],
        ambient_always_added=_ambient_always_added[None],
    )


# Default lighting until setup_lighting() is called
setup_lighting()
