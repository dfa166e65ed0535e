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
def reset_scene_and_config():
    """Start every test from an empty scene and the default configuration.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before fields are allocated
    from glint.core.config import RenderConfig, apply_config
    from glint.core.integrator import clear_render_target
    from glint.scene.intersection import clear_scene

    def _reset():
        clear_scene()
        apply_config(RenderConfig())
        clear_render_target()

    _reset()
    yield
    _reset()
