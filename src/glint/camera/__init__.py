"""Camera module for view and ray generation.

Components:
    projection: Orthographic / perspective camera with pixel-centre rays

Camera responsibilities:
    - Transform normalized device coordinates in [-1, 1] to world-space rays
    - Apply the camera rotation and position
    - Switch between orthographic and perspective projection

The camera guarantees every generated ray has a unit-length direction,
which the intersection code relies on.
"""

from .projection import (
    ProjectionCamera,
    get_camera_info,
    get_pixel_ray,
    get_ray,
    rotation_matrix,
    setup_camera,
)

__all__ = [
    "ProjectionCamera",
    "setup_camera",
    "get_ray",
    "get_pixel_ray",
    "get_camera_info",
    "rotation_matrix",
]
