"""Tests for the tracing driver and render target.

This module tests:
- Render target setup and validation
- Misses, with and without fog
- The bounded reflection loop and its weight falloff
- Mirror reflection between primitives
- Rainbow tint and fog on hits

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run, so module-level
imports of modules containing ti.field() declarations would fail.
"""

import math

import pytest


class TestRenderTargetSetup:
    """Test render target initialization and management."""

    def test_setup_render_target_dimensions(self):
        """Test that setup_render_target records the dimensions."""
        from glint.core.integrator import get_image, get_image_dimensions, setup_render_target

        setup_render_target(64, 48)
        assert get_image_dimensions() == (64, 48)
        assert get_image() is not None

    @pytest.mark.parametrize("width, height", [(0, 16), (16, -1), (4096, 16), (16, 4096)])
    def test_invalid_dimensions(self, width, height):
        """Test out-of-range dimensions are rejected."""
        from glint.core.integrator import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_render_pixel_out_of_range(self):
        """Test render_pixel rejects pixels outside the target."""
        from glint.core.integrator import render_pixel, setup_render_target

        setup_render_target(8, 8)
        with pytest.raises(IndexError):
            render_pixel(8, 0)

    def test_clear_render_target(self):
        """Test clear_render_target zeroes the buffer."""
        from glint.camera.projection import ProjectionCamera, setup_camera
        from glint.core.integrator import (
            clear_render_target,
            get_image_numpy,
            render_image,
            setup_render_target,
        )
        from glint.scene.intersection import add_plane

        add_plane((0, -0.5, 0), (0, 1, 0))
        setup_camera(ProjectionCamera(position=(0.0, 0.0, 1.0), perspective_fov=40.0))
        setup_render_target(8, 8)
        render_image()
        assert get_image_numpy().max() > 0.0

        clear_render_target()
        assert get_image_numpy().max() == 0.0


class TestMiss:
    """Tests for rays that hit nothing."""

    def test_miss_is_black(self):
        """Test a miss in an empty scene returns zero colour."""
        from glint.core.integrator import trace_single_ray

        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert result.colour == (0.0, 0.0, 0.0)
        assert result.primary_distance == -1.0
        assert result.bounces == 0
        assert result.weight == 1.0

    def test_miss_with_fog_is_fog_colour(self):
        """Test a miss with fog enabled returns the fog colour."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray

        apply_config(RenderConfig(fog=True))
        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert result.colour == pytest.approx((0.2, 0.2, 0.4), abs=1e-6)


class TestSingleHit:
    """Tests for paths with one bounce."""

    def test_sphere_hit_distance_and_weight(self):
        """Test a head-on sphere hit records t and one bounce."""
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0, (0.8, 0.3, 0.3))
        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result.primary_distance == pytest.approx(4.0, abs=1e-5)
        assert result.bounces == 1
        assert result.weight == pytest.approx(0.6, rel=1e-6)
        assert all(c > 0.0 for c in result.colour)

    def test_ground_hit_colour(self):
        """Test the colour of a lit ground point straight below the camera."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane

        apply_config(RenderConfig(light_positions=[(0.0, 5.0, 0.0)]))
        add_plane((0, -0.5, 0), (0, 1, 0))
        result = trace_single_ray((0.0, 3.0, 0.0), (0.0, -1.0, 0.0))

        # Ambient 0.04 + diffuse 0.9 + specular 0.2, light 5.5 units away.
        # The reflected ray goes straight up and escapes.
        expected = 1.14 * 5000.0 / (4.0 * math.pi * (5.5 + 600.0))
        assert result.bounces == 1
        assert result.primary_distance == pytest.approx(3.5, abs=1e-5)
        for c in result.colour:
            assert c == pytest.approx(expected, rel=1e-4)

    def test_fog_on_hit(self):
        """Test fog blends the traced colour by the primary distance."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0, (0.8, 0.3, 0.3))
        clear = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        apply_config(RenderConfig(fog=True))
        fogged = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        amount = 1.0 - math.exp(-4.0 * 0.1)
        fog = (0.2, 0.2, 0.4)
        for i in range(3):
            expected = clear.colour[i] * (1.0 - amount) + fog[i] * amount
            assert fogged.colour[i] == pytest.approx(expected, rel=1e-4)

    def test_rainbow_changes_sphere_colour(self):
        """Test the rainbow tint replaces the sphere's own colour."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0, (0.8, 0.3, 0.3))
        plain = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        apply_config(RenderConfig(rainbow_spheres=True))
        tinted = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        # The tint follows the normal (0, 0, 1), so red loses its diffuse part
        assert tinted.colour[0] < plain.colour[0]
        assert tinted.bounces == plain.bounces == 1


class TestReflectionLoop:
    """Tests for the bounded bounce loop."""

    @pytest.mark.parametrize("depth", [1, 5, 42])
    def test_bounces_capped_between_facing_planes(self, depth):
        """Test a ray trapped between two mirrors stops after max_depth bounces."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane

        apply_config(RenderConfig(max_depth=depth, falloff=0.5))
        add_plane((0, -1, 0), (0, 1, 0))
        add_plane((0, 1, 0), (0, -1, 0))

        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert result.bounces == depth
        assert result.weight == pytest.approx(0.5**depth, rel=1e-4)
        assert result.primary_distance == pytest.approx(1.0, abs=1e-5)
        assert all(math.isfinite(c) for c in result.colour)

    def test_weight_is_falloff_power_bounces(self):
        """Test the remaining weight is falloff ** bounces."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane

        apply_config(RenderConfig(max_depth=7, falloff=0.3))
        add_plane((0, -1, 0), (0, 1, 0))
        add_plane((0, 1, 0), (0, -1, 0))

        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert result.weight == pytest.approx(0.3**result.bounces, rel=1e-4)

    def test_zero_falloff_keeps_first_hit_only(self):
        """Test later bounces contribute nothing when falloff is zero."""
        from glint.core.config import RenderConfig, apply_config
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane

        add_plane((0, -1, 0), (0, 1, 0))
        add_plane((0, 1, 0), (0, -1, 0))

        apply_config(RenderConfig(max_depth=1, falloff=0.0))
        single = trace_single_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        apply_config(RenderConfig(max_depth=10, falloff=0.0))
        many = trace_single_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))

        assert many.colour == pytest.approx(single.colour, rel=1e-6)

    def test_reflection_follows_mirror_law(self):
        """Test a ray bounced off the ground reaches a sphere on the mirrored path."""
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane, add_sphere

        add_plane((0, -1, 0), (0, 1, 0))
        # The mirrored path from (1, -1, 0) along (1, 1, 0) passes through (3, 1, 0)
        add_sphere((3, 1, 0), 0.5)

        d = 1.0 / math.sqrt(2.0)
        result = trace_single_ray((0.0, 0.0, 0.0), (d, -d, 0.0))

        assert result.primary_distance == pytest.approx(math.sqrt(2.0), abs=1e-5)
        # Ground, sphere (head-on, straight back), ground again, then escape
        assert result.bounces == 3

    def test_reflection_misses_off_path_sphere(self):
        """Test moving the sphere off the mirrored path loses the second bounce."""
        from glint.core.integrator import trace_single_ray
        from glint.scene.intersection import add_plane, add_sphere

        add_plane((0, -1, 0), (0, 1, 0))
        add_sphere((3, 3, 0), 0.5)

        d = 1.0 / math.sqrt(2.0)
        result = trace_single_ray((0.0, 0.0, 0.0), (d, -d, 0.0))
        assert result.bounces == 1


class TestRenderImage:
    """Tests for whole-image rendering."""

    def test_render_pixel_matches_buffer(self):
        """Test render_pixel traces the same ray as render_image."""
        from glint.camera.projection import setup_camera
        from glint.core.integrator import get_image, render_image, render_pixel, setup_render_target
        from glint.scene.default_scene import create_default_scene

        _, camera = create_default_scene()
        setup_camera(camera)
        setup_render_target(16, 16)
        render_image()

        buffer = get_image()
        for i, j in [(0, 0), (8, 3), (15, 15)]:
            pixel = render_pixel(i, j)
            stored = buffer[i, j]
            for c in range(3):
                assert pixel[c] == pytest.approx(float(stored[c]), abs=1e-5)
