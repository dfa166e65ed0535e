"""The fixed demonstration scene.

Six spheres of varying size float above a white checkerboard ground plane:
- A large grey sphere at the back left
- Green and cyan mid-sized spheres
- Three small yellow, red and magenta spheres near the camera

The camera sits slightly in front of the spheres looking down -Z. Lighting
is configured separately through RenderConfig (see classic_config() and
soft_shadow_config()).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.camera.projection import setup_camera
    >>> from glint.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

from glint.camera.projection import ProjectionCamera
from glint.scene.manager import SceneManager

Vector3 = tuple[float, float, float]

# (centre, radius, colour) for each sphere
DEFAULT_SPHERES: list[tuple[Vector3, float, Vector3]] = [
    ((-2.0, 1.5, -3.5), 1.5, (0.8, 0.8, 0.8)),
    ((-0.5, 0.0, -2.0), 0.6, (0.3, 0.8, 0.3)),
    ((1.0, 0.7, -2.2), 0.8, (0.3, 0.8, 0.8)),
    ((0.7, -0.3, -1.2), 0.2, (0.8, 0.8, 0.3)),
    ((-0.7, -0.3, -1.2), 0.2, (0.8, 0.3, 0.3)),
    ((0.2, -0.2, -1.2), 0.3, (0.8, 0.3, 0.8)),
]

GROUND_POINT: Vector3 = (0.0, -0.5, 0.0)
GROUND_NORMAL: Vector3 = (0.0, 1.0, 0.0)
GROUND_COLOUR: Vector3 = (1.0, 1.0, 1.0)

CAMERA_POSITION: Vector3 = (0.0, 0.0, 1.0)
CAMERA_PERSPECTIVE_FOV = 40.0
CAMERA_ORTHOGRAPHIC_FOV = 2.0


def create_default_scene(
    aspect_ratio: float = 1.0,
    orthographic: bool = False,
) -> tuple[SceneManager, ProjectionCamera]:
    """Build the demonstration scene and a camera looking at it.

    Args:
        aspect_ratio: Width divided by height of the output image.
        orthographic: Use orthographic instead of perspective projection.

    Returns:
        A tuple of (SceneManager, ProjectionCamera).
    """
    scene = SceneManager()

    for centre, radius, colour in DEFAULT_SPHERES:
        scene.add_sphere(centre, radius, colour)

    scene.set_ground_plane(GROUND_POINT, GROUND_NORMAL, GROUND_COLOUR)
    scene.validate()

    camera = ProjectionCamera(
        position=CAMERA_POSITION,
        orthographic=orthographic,
        orthographic_fov=CAMERA_ORTHOGRAPHIC_FOV,
        perspective_fov=CAMERA_PERSPECTIVE_FOV,
        aspect_ratio=aspect_ratio,
    )

    return scene, camera
