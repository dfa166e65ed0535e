"""Unit tests for SceneManager and the default scene."""

import pytest


class TestSceneManager:
    """Tests for building scenes through SceneManager."""

    def test_new_manager_clears_scene(self):
        """Test creating a manager empties the primitive table."""
        from glint.scene.intersection import add_sphere, get_primitive_count
        from glint.scene.manager import SceneManager

        add_sphere((0, 0, -1), 0.5)
        scene = SceneManager()
        assert get_primitive_count() == 0
        assert scene.get_sphere_count() == 0
        assert scene.plane is None

    def test_add_spheres_and_plane(self):
        """Test spheres and the ground plane are tracked and uploaded."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -2), 0.5, (0.8, 0.3, 0.3))
        scene.add_sphere((1, 0, -2), 0.25)
        index = scene.set_ground_plane((0, -0.5, 0))

        assert index == 2
        assert scene.get_sphere_count() == 2
        assert scene.get_primitive_count() == 3
        assert scene.spheres[0].colour == (0.8, 0.3, 0.3)
        assert scene.plane is not None
        assert scene.plane.normal == (0.0, 1.0, 0.0)
        scene.validate()

    def test_second_ground_plane_rejected(self):
        """Test the scene holds exactly one ground plane."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_ground_plane((0, -0.5, 0))
        with pytest.raises(RuntimeError, match="ground plane"):
            scene.set_ground_plane((0, -1.0, 0))

    def test_validate_requires_ground_plane(self):
        """Test validate() rejects a scene without a ground plane."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -2), 0.5)
        with pytest.raises(ValueError, match="no ground plane"):
            scene.validate()

    def test_invalid_radius_not_tracked(self):
        """Test a rejected sphere leaves the manager unchanged."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_sphere((0, 0, -2), -1.0)
        assert scene.get_sphere_count() == 0

    def test_to_config(self):
        """Test exporting the scene description."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -2), 0.5, (0.1, 0.2, 0.3))
        scene.set_ground_plane((0, -0.5, 0))

        config = scene.to_config()
        assert config.spheres == [
            {"centre": [0, 0, -2], "radius": 0.5, "colour": [0.1, 0.2, 0.3]}
        ]
        assert config.plane is not None
        assert config.plane["point"] == [0, -0.5, 0]

    def test_repr(self):
        """Test the string form mentions the sphere count."""
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0, 0, -2), 0.5)
        assert "spheres=1" in repr(scene)


class TestDefaultScene:
    """Tests for the demonstration scene."""

    def test_default_scene_contents(self):
        """Test six spheres plus one ground plane are created."""
        from glint.scene.default_scene import DEFAULT_SPHERES, create_default_scene

        scene, camera = create_default_scene()
        assert scene.get_sphere_count() == len(DEFAULT_SPHERES) == 6
        assert scene.get_primitive_count() == 7
        assert scene.plane is not None
        assert camera.position == (0.0, 0.0, 1.0)
        assert not camera.orthographic

    def test_default_scene_orthographic(self):
        """Test the orthographic variant and aspect ratio are passed through."""
        from glint.scene.default_scene import create_default_scene

        _, camera = create_default_scene(aspect_ratio=2.0, orthographic=True)
        assert camera.orthographic
        assert camera.aspect_ratio == 2.0
