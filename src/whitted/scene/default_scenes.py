"""Reference sphere scenes.

Two fixed scenes are provided, one for each reference render:

Showcase (single sample per pixel):
- A large diffuse ground sphere
- Red, green and blue diffuse spheres
- A mirror sphere and a glass sphere
- Camera at (4, 1, 7) looking at the origin

Supersampling (jittered samples per pixel):
- A large diffuse ground sphere
- Red, green and blue diffuse spheres
- A mirror sphere
- Camera at (0, 0, 5) looking down -z

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.default_scenes import create_showcase_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> setup_camera(camera)
"""

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.manager import SceneManager

# Ground: a huge sphere whose top touches y = -1
GROUND_CENTER = (0.0, -1001.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.9, 0.9, 0.9)

RED = (0.8, 0.2, 0.2)
GREEN = (0.2, 0.8, 0.2)
BLUE = (0.2, 0.2, 0.8)

SCENE_NAMES = ("showcase", "supersampling")


def _add_ground(scene: SceneManager) -> None:
    scene.add_diffuse_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)


def create_showcase_scene() -> tuple[SceneManager, PinholeCamera]:
    """Create the showcase scene with diffuse, mirror and glass spheres.

    Returns:
        A tuple of (scene, camera).
    """
    scene = SceneManager()

    _add_ground(scene)
    scene.add_diffuse_sphere((-2.0, 0.0, 1.0), 1.0, RED)
    scene.add_diffuse_sphere((0.0, 0.0, 0.0), 1.0, GREEN)
    scene.add_diffuse_sphere((2.0, 0.0, -1.0), 1.0, BLUE)
    scene.add_mirror_sphere((-2.0, 3.0, 1.0), 1.0)
    scene.add_glass_sphere((3.0, 1.0, 2.0), 1.0, ior=1.5)

    camera = PinholeCamera.look_at(position=(4.0, 1.0, 7.0), target=(0.0, 0.0, 0.0))

    return scene, camera


def create_supersampling_scene() -> tuple[SceneManager, PinholeCamera]:
    """Create the supersampling scene with diffuse spheres and a mirror.

    Returns:
        A tuple of (scene, camera).
    """
    scene = SceneManager()

    _add_ground(scene)
    scene.add_diffuse_sphere((-1.0, 0.0, 1.0), 1.0, RED)
    scene.add_diffuse_sphere((0.0, 0.0, 0.0), 1.0, GREEN)
    scene.add_diffuse_sphere((1.0, 0.0, -1.0), 1.0, BLUE)
    scene.add_mirror_sphere((-2.0, 2.0, 1.0), 1.0)

    camera = PinholeCamera(position=(0.0, 0.0, 5.0), forward=(0.0, 0.0, -1.0))

    return scene, camera


def create_scene(name: str) -> tuple[SceneManager, PinholeCamera]:
    """Create a reference scene by name.

    Args:
        name: One of SCENE_NAMES.

    Raises:
        ValueError: If the name is unknown.
    """
    if name == "showcase":
        return create_showcase_scene()
    if name == "supersampling":
        return create_supersampling_scene()
    raise ValueError(f"Unknown scene '{name}' (expected one of: {', '.join(SCENE_NAMES)})")
