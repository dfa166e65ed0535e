"""Unit tests for the projection camera.

Tests cover:
- Perspective and orthographic ray generation
- Camera rotation and position
- Pixel-centre mapping
- Parameter validation
"""

import math

import pytest
import taichi as ti


def _ray_at(x, y):
    from glint.camera.projection import get_ray

    origin = ti.field(dtype=ti.math.vec3, shape=())
    direction = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(px: ti.f32, py: ti.f32):
        ray = get_ray(px, py)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(x, y)
    return origin[None], direction[None]


class TestPerspective:
    """Tests for perspective projection."""

    def test_centre_ray_looks_down_negative_z(self):
        """Test the centre ray starts at the camera and points along -Z."""
        from glint.camera.projection import ProjectionCamera, setup_camera

        setup_camera(ProjectionCamera(position=(0.0, 0.0, 1.0), perspective_fov=40.0))
        o, d = _ray_at(0.0, 0.0)

        assert abs(o[2] - 1.0) < 1e-6
        assert abs(d[0]) < 1e-6
        assert abs(d[1]) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6

    def test_corner_ray_direction(self):
        """Test the corner ray follows (x * aspect, y, -1 / tan(fov))."""
        from glint.camera.projection import ProjectionCamera, setup_camera

        setup_camera(ProjectionCamera(perspective_fov=45.0, aspect_ratio=2.0))
        _, d = _ray_at(1.0, 1.0)

        # tan(45) = 1, so the unnormalized direction is (2, 1, -1)
        norm = math.sqrt(6.0)
        assert abs(d[0] - 2.0 / norm) < 1e-5
        assert abs(d[1] - 1.0 / norm) < 1e-5
        assert abs(d[2] + 1.0 / norm) < 1e-5

    def test_focal_z_recorded(self):
        """Test get_camera_info reports the derived focal z."""
        from glint.camera.projection import ProjectionCamera, get_camera_info, setup_camera

        setup_camera(ProjectionCamera(perspective_fov=40.0))
        info = get_camera_info()
        assert abs(info["focal_z"] + 1.0 / math.tan(math.radians(40.0))) < 1e-5
        assert info["orthographic"] is False


class TestOrthographic:
    """Tests for orthographic projection."""

    def test_parallel_rays_with_offset_origins(self):
        """Test orthographic rays share a direction and spread their origins."""
        from glint.camera.projection import ProjectionCamera, setup_camera

        setup_camera(
            ProjectionCamera(
                position=(0.0, 0.0, 1.0), orthographic=True, orthographic_fov=2.0
            )
        )
        o, d = _ray_at(1.0, -1.0)

        assert abs(o[0] - 2.0) < 1e-6
        assert abs(o[1] + 2.0) < 1e-6
        assert abs(o[2] - 1.0) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6


class TestRotation:
    """Tests for camera rotation."""

    def test_identity_rotation(self):
        """Test zero yaw and pitch give the identity."""
        from glint.camera.projection import rotation_matrix

        r = rotation_matrix()
        for i in range(3):
            for j in range(3):
                assert abs(r[i][j] - (1.0 if i == j else 0.0)) < 1e-12

    def test_yaw_turns_view_direction(self):
        """Test a 90 degree yaw turns the view from -Z to -X."""
        from glint.camera.projection import ProjectionCamera, rotation_matrix, setup_camera

        setup_camera(ProjectionCamera(rotation=rotation_matrix(yaw=90.0)))
        _, d = _ray_at(0.0, 0.0)

        assert abs(d[0] + 1.0) < 1e-5
        assert abs(d[1]) < 1e-5
        assert abs(d[2]) < 1e-5


class TestPixelRays:
    """Tests for pixel-centre ray generation."""

    def test_pixel_rays_are_unit_length(self):
        """Test every pixel ray has a unit direction."""
        from glint.camera.projection import ProjectionCamera, get_pixel_ray, setup_camera

        setup_camera(ProjectionCamera(perspective_fov=60.0, aspect_ratio=1.5))
        lengths = ti.field(dtype=ti.f32, shape=(6, 4))

        @ti.kernel
        def test_kernel():
            for i, j in lengths:
                ray = get_pixel_ray(i, j, 6, 4)
                lengths[i, j] = ti.math.length(ray.direction)

        test_kernel()
        arr = lengths.to_numpy()
        assert abs(arr - 1.0).max() < 1e-5

    def test_pixel_centres_are_symmetric(self):
        """Test the first and last pixel of a row mirror each other."""
        from glint.camera.projection import ProjectionCamera, get_pixel_ray, setup_camera

        setup_camera(ProjectionCamera())
        first = ti.field(dtype=ti.math.vec3, shape=())
        last = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            first[None] = get_pixel_ray(0, 1, 4, 3).direction
            last[None] = get_pixel_ray(3, 1, 4, 3).direction

        test_kernel()
        assert abs(first[None][0] + last[None][0]) < 1e-6
        # Middle row of three is exactly at y = 0
        assert abs(first[None][1]) < 1e-6


class TestCameraValidation:
    """Tests for setup_camera parameter checks."""

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"aspect_ratio": 0.0}, "aspect_ratio"),
            ({"orthographic_fov": -1.0}, "orthographic_fov"),
            ({"perspective_fov": 90.0}, "perspective_fov"),
            ({"perspective_fov": 0.0}, "perspective_fov"),
            ({"rotation": ((1.0, 0.0), (0.0, 1.0))}, "rotation"),
        ],
    )
    def test_invalid_camera(self, kwargs, match):
        """Test invalid parameters raise ValueError."""
        from glint.camera.projection import ProjectionCamera, setup_camera

        with pytest.raises(ValueError, match=match):
            setup_camera(ProjectionCamera(**kwargs))
