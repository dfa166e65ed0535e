"""Scene module for primitive storage and ray-scene queries.

Components:
    intersection: GPU-side primitive arrays and the nearest/any-hit queries
    manager: SceneManager for building and validating a scene from Python
    default_scene: The fixed six-sphere demonstration scene

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout shared by spheres and planes
    - A kind tag per slot selecting the intersection routine
    - Insertion order preserved, so ties resolve deterministically
"""

from .default_scene import (
    DEFAULT_SPHERES,
    GROUND_COLOUR,
    GROUND_NORMAL,
    GROUND_POINT,
    create_default_scene,
)
from .intersection import (
    MAX_PRIMITIVES,
    add_plane,
    add_sphere,
    clear_scene,
    get_primitive_count,
    get_primitive_kind,
    intersect_scene,
    intersect_scene_any,
)
from .manager import PlaneInfo, SceneConfig, SceneManager, SphereInfo

__all__ = [
    # Intersection module
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_primitive_count",
    "get_primitive_kind",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_PRIMITIVES",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "PlaneInfo",
    "SceneConfig",
    # Default scene
    "create_default_scene",
    "DEFAULT_SPHERES",
    "GROUND_POINT",
    "GROUND_NORMAL",
    "GROUND_COLOUR",
]
