"""Whitted-style tracing driver and render kernels.

Each camera ray is followed through a bounded chain of perfect mirror
reflections. At every hit the direct illumination is added to the running
colour, scaled by a weight that starts at 1 and is multiplied by the
configured reflection falloff after each bounce, so after N bounces the
weight is falloff ** N.

Key features:
    - Bounded loop (max_depth iterations), never recursion
    - Reflected rays offset from the surface along the normal
    - Rainbow sphere tint and jittered soft shadows when enabled
    - Fog composited on the primary hit distance when enabled
    - Degenerate reflection directions end the path instead of producing NaN

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.camera.projection import setup_camera
    >>> from glint.core.config import apply_config, classic_config
    >>> from glint.core.integrator import render_image, setup_render_target
    >>> from glint.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> apply_config(classic_config())
    >>> setup_render_target(512, 512)
    >>> render_image()
"""

import logging
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from glint.camera.projection import get_pixel_ray
from glint.core.config import (
    ensure_config,
    fog_enabled,
    max_depth,
    rainbow_enabled,
    ray_epsilon,
    reflection_falloff,
)
from glint.core.jitter import JITTER_SEED_INIT, origin_jitter
from glint.core.ray import near_zero, reflect, vec3
from glint.geometry.sphere import PRIMITIVE_SPHERE
from glint.scene.intersection import intersect_scene
from glint.shading.fog import apply_fog
from glint.shading.phong import direct_illumination, rainbow_colour

logger = logging.getLogger(__name__)


@dataclass
class TraceResult:
    """Outcome of tracing one ray.

    Attributes:
        colour: Accumulated colour (after fog, if enabled).
        primary_distance: Hit distance of the first intersection, -1 on miss.
        bounces: Number of surfaces shaded along the path.
        weight: Reflection weight left after the last bounce.
    """

    colour: tuple[float, float, float]
    primary_distance: float
    bounces: int
    weight: float


# =============================================================================
# Tracing Core
# =============================================================================


@ti.func
def trace_ray(origin: vec3, direction: vec3, primary_origin_x: ti.f32, seed: ti.i32):
    """Trace a ray through up to max_depth mirror bounces.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        primary_origin_x: x coordinate of the camera ray origin, seeding the
            rainbow tint.
        seed: Initial LCG seed for this evaluation.

    Returns:
        A tuple (colour, primary_distance, bounces, weight, seed) where
        primary_distance is -1 if the first intersection missed.
    """
    total_colour = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    primary_distance = -1.0
    bounces = 0
    rng = seed

    jitter = origin_jitter(primary_origin_x)
    ray_origin = origin
    ray_direction = direction

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for depth in range(max_depth[None]):
        if active == 1:
            hit = intersect_scene(ray_origin, ray_direction)

            if hit.hit == 0:
                active = 0
            else:
                if depth == 0:
                    primary_distance = hit.t

                if rainbow_enabled[None] == 1 and hit.kind == PRIMITIVE_SPHERE:
                    hit.colour = rainbow_colour(hit.normal, hit.colour, jitter)

                radiance, rng = direct_illumination(hit, ray_direction, rng)
                total_colour += radiance * weight
                weight *= reflection_falloff[None]
                bounces += 1

                reflected = reflect(ray_direction, hit.normal)
                if near_zero(reflected) == 1:
                    active = 0
                else:
                    ray_origin = hit.pos + hit.normal * ray_epsilon[None]
                    ray_direction = tm.normalize(reflected)

    return total_colour, primary_distance, bounces, weight, rng


@ti.func
def shade_camera_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace a camera ray from a fresh seed and apply fog if enabled.

    Args:
        origin: Camera ray origin.
        direction: Unit camera ray direction.

    Returns:
        The final (unclamped) pixel colour.
    """
    colour, primary_distance, bounces, weight, rng = trace_ray(
        origin, direction, origin.x, JITTER_SEED_INIT
    )
    if fog_enabled[None] == 1:
        colour = apply_fog(colour, primary_distance)
    return colour


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Colour buffer (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Outputs of the single-ray kernels
_trace_colour = ti.Vector.field(3, dtype=ti.f32, shape=())
_trace_primary_distance = ti.field(dtype=ti.f32, shape=())
_trace_bounces = ti.field(dtype=ti.i32, shape=())
_trace_weight = ti.field(dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are out of range.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()
    logger.debug("Render target set to %dx%d", width, height)


def clear_render_target() -> None:
    """Clear the colour buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image() -> "ti.MatrixField":
    """Get the colour buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Trace one ray per pixel into the colour buffer."""
    for i, j in ti.ndrange(width, height):
        ray = get_pixel_ray(i, j, width, height)
        color = shade_camera_ray(ray.origin, ray.direction)

        # Replace any NaN/Inf with zero
        for c in ti.static(range(3)):
            if tm.isnan(color[c]) or tm.isinf(color[c]):
                color[c] = 0.0

        _color_buffer[i, j] = color


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    """Trace the ray for one pixel into _trace_colour."""
    # Single-iteration outer loop keeps the bounce and scene loops serial
    for _ in range(1):
        ray = get_pixel_ray(pixel_i, pixel_j, width, height)
        _trace_colour[None] = shade_camera_ray(ray.origin, ray.direction)


@ti.kernel
def _trace_one(origin: vec3, direction: vec3):
    """Trace one explicit ray, storing its outputs in fields."""
    for _ in range(1):
        colour, primary_distance, bounces, weight, rng = trace_ray(
            origin, direction, origin.x, JITTER_SEED_INIT
        )
        if fog_enabled[None] == 1:
            colour = apply_fog(colour, primary_distance)
        _trace_colour[None] = colour
        _trace_primary_distance[None] = primary_distance
        _trace_bounces[None] = bounces
        _trace_weight[None] = weight


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image() -> None:
    """Render every pixel of the render target.

    Applies the default RenderConfig first if none is active.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    ensure_config()

    width, height = get_image_dimensions()
    logger.info("Rendering %dx%d", width, height)
    _render_frame(width, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel of the render target.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) colour values.

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If the pixel is outside the render target.
    """
    _check_render_target_initialized()
    ensure_config()

    width, height = get_image_dimensions()
    if not (0 <= pixel_i < width and 0 <= pixel_j < height):
        raise IndexError(f"Pixel ({pixel_i}, {pixel_j}) outside {width}x{height} target")
    _render_single_pixel(pixel_i, pixel_j, width, height)
    color = _trace_colour[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> TraceResult:
    """Trace one world-space ray from Python.

    The direction is used as given and should be unit length.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.

    Returns:
        The TraceResult for the ray.
    """
    ensure_config()
    _trace_one(
        vec3(float(origin[0]), float(origin[1]), float(origin[2])),
        vec3(float(direction[0]), float(direction[1]), float(direction[2])),
    )
    colour = _trace_colour[None]
    return TraceResult(
        colour=(float(colour[0]), float(colour[1]), float(colour[2])),
        primary_distance=float(_trace_primary_distance[None]),
        bounces=int(_trace_bounces[None]),
        weight=float(_trace_weight[None]),
    )


def get_image_numpy():
    """Get the raw (unclamped) rendered image as a NumPy array.

    The array shape is (height, width, 3), row 0 at the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region of the full buffer
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (Taichi uses bottom-left origin, images use top-left)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)


def get_normalized_image_numpy():
    """Get the rendered image clamped to [0, 1] as a float32 NumPy array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    return np.clip(get_image_numpy(), 0.0, 1.0).astype(np.float32)

