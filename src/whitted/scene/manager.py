"""Scene manager for building sphere scenes.

This module provides a high-level scene-building API on top of the raw
sphere storage in whitted.scene.intersection. It validates sphere
parameters, keeps a Python-side record of every sphere, and supports
scene serialization to dictionaries and JSON files.

Each sphere carries one of three material kinds, fixed when the sphere is
added:
    - DIFFUSE: shaded by direct lighting with its albedo
    - MIRROR: reflects the ray
    - GLASS: refracts the ray (reflecting on total internal reflection)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_diffuse_sphere((0, -1001, 0), 1000.0, albedo=(0.9, 0.9, 0.9))
    >>> scene.add_mirror_sphere((-2, 3, 1), 1.0)
    >>> scene.add_glass_sphere((3, 1, 2), 1.0, ior=1.5)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any

from whitted.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

DEFAULT_GLASS_IOR = 1.5


class MaterialType(IntEnum):
    """Enumeration of supported material kinds.

    Used for material dispatch in the integrator to decide whether a hit
    is shaded, reflected or refracted.
    """

    DIFFUSE = 0
    MIRROR = 1
    GLASS = 2


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        albedo: The diffuse reflectance (kd) of the sphere.
        material: The material kind of the sphere.
        ior: Index of refraction (used by glass spheres).
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    albedo: tuple[float, float, float]
    material: MaterialType
    ior: float = DEFAULT_GLASS_IOR


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


def _parse_material(value: Any) -> MaterialType:
    """Convert a material name or number into a MaterialType."""
    if isinstance(value, MaterialType):
        return value
    if isinstance(value, str):
        try:
            return MaterialType[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown material type: {value}") from None
    try:
        return MaterialType(int(value))
    except (TypeError, ValueError):
        raise ValueError(f"Unknown material type: {value}") from None


def _validate_sphere(
    radius: float, albedo: tuple[float, float, float], ior: float
) -> None:
    if radius <= 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive.")

    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "A surface cannot reflect more light than it receives."
            )

    if ior < 1.0:
        raise ValueError(
            f"Index of refraction = {ior} is less than 1.0. "
            "Glass spheres are assumed optically denser than the surrounding air."
        )


def _vector3(value: Any, name: str, index: int) -> tuple[float, float, float]:
    try:
        x, y, z = value
        return (float(x), float(y), float(z))
    except (TypeError, ValueError):
        raise ValueError(
            f"Sphere {index}: {name} must be a list of 3 numbers, got {value!r}"
        ) from None


def _parse_sphere_config(index: int, sphere_config: Any) -> tuple[Any, ...]:
    """Turn one serialized sphere into validated add_sphere() arguments."""
    if not isinstance(sphere_config, dict):
        raise ValueError(f"Sphere {index}: expected an object, got {sphere_config!r}")

    center = _vector3(sphere_config.get("center", [0, 0, 0]), "center", index)
    albedo = _vector3(sphere_config.get("albedo", [1.0, 1.0, 1.0]), "albedo", index)
    try:
        radius = float(sphere_config.get("radius", 1.0))
        ior = float(sphere_config.get("ior", DEFAULT_GLASS_IOR))
    except (TypeError, ValueError):
        raise ValueError(f"Sphere {index}: radius and ior must be numbers") from None
    material = _parse_material(sphere_config.get("material", "diffuse"))

    try:
        _validate_sphere(radius, albedo, ior)
    except ValueError as e:
        raise ValueError(f"Sphere {index}: {e}") from None

    return center, radius, albedo, material, ior


class SceneManager:
    """Scene builder coordinating sphere storage and validation.

    The scene is append-only while it is being built and read-only during
    rendering. Spheres are identified by their index, which is also the
    index stored in hit records.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((0, 0, 0), 1.0, (0.2, 0.8, 0.2), MaterialType.DIFFUSE)
        0
        >>> scene.get_sphere_count()
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        self.spheres.clear()

    def clear(self) -> None:
        """Clear the entire scene."""
        self._clear_all()

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        material: MaterialType = MaterialType.DIFFUSE,
        ior: float = DEFAULT_GLASS_IOR,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere. Must be positive.
            albedo: The diffuse reflectance color as (R, G, B).
                Each component must be in [0, 1].
            material: The material kind of the sphere.
            ior: Index of refraction, used when material is GLASS.
                Must be >= 1.0.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius, albedo or IOR is invalid.
        """
        _validate_sphere(radius, albedo, ior)
        material = _parse_material(material)
        center = (float(center[0]), float(center[1]), float(center[2]))
        albedo = (float(albedo[0]), float(albedo[1]), float(albedo[2]))

        sphere_index = add_sphere(center, radius, albedo, int(material), ior)

        info = SphereInfo(
            sphere_index=sphere_index,
            center=center,
            radius=float(radius),
            albedo=albedo,
            material=material,
            ior=float(ior),
        )
        self.spheres.append(info)

        return sphere_index

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def add_diffuse_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a diffuse sphere shaded with the given albedo."""
        return self.add_sphere(center, radius, albedo, MaterialType.DIFFUSE)

    def add_mirror_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a mirror sphere.

        The albedo is stored for completeness but mirrors contribute no
        color of their own.
        """
        return self.add_sphere(center, radius, albedo, MaterialType.MIRROR)

    def add_glass_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        ior: float = DEFAULT_GLASS_IOR,
        albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a glass sphere with the given index of refraction."""
        return self.add_sphere(center, radius, albedo, MaterialType.GLASS, ior)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_sphere_info(self, sphere_index: int) -> SphereInfo | None:
        """Get information about a sphere by index.

        Args:
            sphere_index: The sphere index returned by add_sphere().

        Returns:
            SphereInfo for the sphere, or None if not found.
        """
        if 0 <= sphere_index < len(self.spheres):
            return self.spheres[sphere_index]
        return None

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all spheres.
        """
        config = SceneConfig()

        for sphere in self.spheres:
            sphere_config: dict[str, Any] = {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "albedo": list(sphere.albedo),
                "material": sphere.material.name.lower(),
            }
            if sphere.material == MaterialType.GLASS:
                sphere_config["ior"] = sphere.ior
            config.spheres.append(sphere_config)

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every sphere is validated before the current scene is replaced, so
        an invalid configuration leaves the scene unchanged.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            RuntimeError: If the configuration has more spheres than fit.
        """
        if not isinstance(config.spheres, list):
            raise ValueError("Scene spheres must be a list")
        if len(config.spheres) > MAX_SPHERES:
            raise RuntimeError(
                f"Scene has {len(config.spheres)} spheres; "
                f"the maximum is {MAX_SPHERES}"
            )
        parsed = [
            _parse_sphere_config(i, sphere_config)
            for i, sphere_config in enumerate(config.spheres)
        ]

        self.clear()
        for center, radius, albedo, material, ior in parsed:
            self.add_sphere(center, radius, albedo, material, ior)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        return {"spheres": self.to_config().spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with a 'spheres' key.
        """
        self.from_config(SceneConfig(spheres=data.get("spheres", [])))

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2))

    def load_json(self, filepath: str | Path) -> None:
        """Replace the scene with the contents of a JSON file.

        Raises:
            ValueError: If the file does not contain a valid scene.
        """
        try:
            data = json.loads(Path(filepath).read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid scene file {filepath}: expected an object")
        self.from_dict(data)

