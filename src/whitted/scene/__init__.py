"""Scene module for sphere storage, lighting and scene building.

Components:
    intersection: Sphere storage in Taichi fields and ray-scene queries
    lighting: Directional light and ambient configuration
    manager: Scene builder with validation and serialization
    default_scenes: The reference showcase and supersampling scenes

Scene data uses a Structure-of-Arrays layout; hit records refer to the hit
sphere by its index into those arrays.
"""

from .default_scenes import (
    SCENE_NAMES,
    create_scene,
    create_showcase_scene,
    create_supersampling_scene,
)
from .intersection import (
    MAX_SPHERES,
    T_MAX,
    T_MIN,
    HitInfo,
    IntersectInfo,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    intersect_scene_any,
    query_nearest_hit,
)
from .lighting import (
    Light,
    LightingConfig,
    get_light,
    get_lighting_info,
    setup_lighting,
)
from .manager import MaterialType, SceneConfig, SceneManager, SphereInfo

__all__ = [
    # Intersection module
    "IntersectInfo",
    "HitInfo",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "intersect_scene_any",
    "query_nearest_hit",
    "MAX_SPHERES",
    "T_MIN",
    "T_MAX",
    # Lighting module
    "Light",
    "LightingConfig",
    "get_light",
    "setup_lighting",
    "get_lighting_info",
    # Manager module
    "SceneManager",
    "MaterialType",
    "SphereInfo",
    "SceneConfig",
    # Reference scenes
    "create_showcase_scene",
    "create_supersampling_scene",
    "create_scene",
    "SCENE_NAMES",
]
