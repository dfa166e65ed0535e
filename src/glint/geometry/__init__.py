"""Geometry module for shape primitives.

This module provides the scene's geometric primitives and their
intersection tests:

Components:
    sphere: Sphere primitive, the shared Intersection record and miss sentinel
    plane: Infinite ground plane with a procedural checker colour

All intersection routines are Taichi functions (@ti.func) returning an
Intersection; a miss is reported with hit=0 and t=-1.

Ray-object intersection follows the pattern:
    record = hit_shape(ray_origin, ray_direction, shape, ...)
"""

from .plane import Plane, checker_pattern, hit_plane
from .sphere import (
    PRIMITIVE_NONE,
    PRIMITIVE_PLANE,
    PRIMITIVE_SPHERE,
    Intersection,
    Sphere,
    hit_sphere,
    make_sphere,
    miss_intersection,
)

__all__ = [
    "Sphere",
    "Intersection",
    "hit_sphere",
    "make_sphere",
    "miss_intersection",
    "Plane",
    "hit_plane",
    "checker_pattern",
    "PRIMITIVE_NONE",
    "PRIMITIVE_SPHERE",
    "PRIMITIVE_PLANE",
]
