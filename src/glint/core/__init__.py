"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    config: Render configuration and its GPU-side parameter fields
    jitter: Deterministic pseudo-random scalars for colour and shadow jitter
    integrator: Bounded reflection loop, render target and render kernels
    renderer: Object wrapper around the render target

The tracing driver follows each primary ray through at most max_depth mirror
bounces, accumulating direct illumination scaled by a geometric falloff.

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    safe_normalize,
    vec3,
)

# Note: config, integrator and renderer are NOT imported here because they
# allocate Taichi fields at import time. Import them directly, e.g.
#   from glint.core.integrator import trace_single_ray

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "safe_normalize",
    "dot",
    "cross",
    "reflect",
    "near_zero",
]
