"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset scene, lighting and integrator state around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is declared
    from whitted.core.integrator import clear_render_target, set_max_depth
    from whitted.core.options import MAX_DEPTH
    from whitted.scene.intersection import clear_scene
    from whitted.scene.lighting import setup_lighting

    def _clear_all():
        clear_scene()
        setup_lighting()
        set_max_depth(MAX_DEPTH)
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
