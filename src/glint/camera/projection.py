"""Camera model with orthographic and perspective projection.

The camera turns normalized device coordinates (x, y) in [-1, 1] into
world-space rays. In camera space the view looks down -Z:

- Orthographic: origin (x * ortho_fov * aspect, y * ortho_fov, 0),
  direction (0, 0, -1). The image plane is translated, every ray is parallel.
- Perspective: origin (0, 0, 0), direction
  (x * aspect, y, -1 / tan(radians(perspective_fov))).

Camera-space vectors are then moved to world space with the camera rotation
R and position P:
    origin = P + R * origin_cam
    direction = normalize(R * direction_cam)

Rays go through pixel centres; there is no sub-pixel jitter.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.camera.projection import ProjectionCamera, setup_camera
    >>>
    >>> camera = ProjectionCamera(position=(0.0, 0.0, 1.0), perspective_fov=40.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.0, 0.0)  # Ray through image centre
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np
import taichi as ti
import taichi.math as tm

from glint.core.ray import Ray, make_ray, vec3

logger = logging.getLogger(__name__)

Matrix3 = tuple[
    tuple[float, float, float],
    tuple[float, float, float],
    tuple[float, float, float],
]

IDENTITY: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ProjectionCamera:
    """Configuration for the scene camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        rotation: Row-major 3x3 rotation from camera to world space.
        orthographic: Use orthographic projection instead of perspective.
        orthographic_fov: Half-height of the orthographic view volume.
        perspective_fov: Angle in degrees controlling the perspective focal
            length (focal = 1 / tan(radians(fov))). Must be in (0, 90).
        aspect_ratio: Width divided by height of the output image.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Matrix3 = field(default=IDENTITY)
    orthographic: bool = False
    orthographic_fov: float = 1.0
    perspective_fov: float = 45.0
    aspect_ratio: float = 1.0


def rotation_matrix(yaw: float = 0.0, pitch: float = 0.0) -> Matrix3:
    """Build a camera rotation from yaw (about Y) and pitch (about X).

    Args:
        yaw: Rotation about the world Y axis in degrees.
        pitch: Rotation about the camera X axis in degrees.

    Returns:
        Row-major 3x3 rotation matrix R = R_yaw @ R_pitch.
    """
    y = math.radians(yaw)
    p = math.radians(pitch)
    r_yaw = np.array(
        [
            [math.cos(y), 0.0, math.sin(y)],
            [0.0, 1.0, 0.0],
            [-math.sin(y), 0.0, math.cos(y)],
        ]
    )
    r_pitch = np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, math.cos(p), -math.sin(p)],
            [0.0, math.sin(p), math.cos(p)],
        ]
    )
    r = r_yaw @ r_pitch
    return tuple(tuple(float(v) for v in row) for row in r)  # type: ignore[return-value]


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_rotation = ti.Matrix.field(3, 3, dtype=ti.f32, shape=())
_orthographic = ti.field(dtype=ti.i32, shape=())
_orthographic_fov = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())
# -1 / tan(radians(perspective_fov)), the camera-space z of perspective rays
_focal_z = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: ProjectionCamera) -> None:
    """Upload camera state to the Taichi fields.

    Must be called from Python before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the aspect ratio or a field of view is out of range,
            or the rotation is not 3x3.
    """
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {camera.aspect_ratio}")
    if camera.orthographic_fov <= 0.0:
        raise ValueError(f"orthographic_fov must be positive, got {camera.orthographic_fov}")
    if not 0.0 < camera.perspective_fov < 90.0:
        raise ValueError(
            f"perspective_fov must be in (0, 90) degrees, got {camera.perspective_fov}"
        )

    rotation = np.asarray(camera.rotation, dtype=np.float32)
    if rotation.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {rotation.shape}")

    _camera_position[None] = [float(c) for c in camera.position]
    _camera_rotation[None] = rotation.tolist()
    _orthographic[None] = int(camera.orthographic)
    _orthographic_fov[None] = camera.orthographic_fov
    _aspect_ratio[None] = camera.aspect_ratio
    _focal_z[None] = -1.0 / math.tan(math.radians(camera.perspective_fov))

    logger.debug(
        "Camera at %s, %s projection",
        camera.position,
        "orthographic" if camera.orthographic else "perspective",
    )


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(x: ti.f32, y: ti.f32) -> Ray:
    """Generate the world-space ray for normalized device coordinates.

    Args:
        x: Horizontal coordinate in [-1, 1] (left to right).
        y: Vertical coordinate in [-1, 1] (bottom to top).

    Returns:
        A Ray with a unit direction.
    """
    aspect = _aspect_ratio[None]
    origin_cam = vec3(0.0, 0.0, 0.0)
    direction_cam = vec3(0.0, 0.0, -1.0)

    if _orthographic[None] == 1:
        fov = _orthographic_fov[None]
        origin_cam = vec3(x * fov * aspect, y * fov, 0.0)
    else:
        direction_cam = vec3(x * aspect, y, _focal_z[None])

    rotation = _camera_rotation[None]
    origin = _camera_position[None] + rotation @ origin_cam
    direction = tm.normalize(rotation @ direction_cam)

    return make_ray(origin, direction)


@ti.func
def get_pixel_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the ray through the centre of a pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The camera ray for the pixel centre.
    """
    x = (ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32) * 2.0 - 1.0
    y = (ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32) * 2.0 - 1.0
    return get_ray(x, y)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with position, rotation, orthographic flag and the
        derived perspective focal z.
    """
    position = _camera_position[None]
    rotation = _camera_rotation[None]
    return {
        "position": (float(position[0]), float(position[1]), float(position[2])),
        "rotation": tuple(
            tuple(float(rotation[r, c]) for c in range(3)) for r in range(3)
        ),
        "orthographic": bool(_orthographic[None]),
        "focal_z": float(_focal_z[None]),
    }
