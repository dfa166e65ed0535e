"""Scene-level primitive intersection testing.

The scene stores its primitives in a single tagged table held in Taichi
fields: every entry has a kind (sphere or plane) plus the union of the
parameters both kinds need. intersect_scene() performs one polymorphic
linear scan over the table and returns the nearest hit.

Nearest-hit rules:
    - Every primitive is tested; there is no early exit.
    - The smallest positive t wins.
    - Between spheres at equal t the earlier table entry wins.
    - A plane wins an exact tie with a sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.scene.intersection import add_plane, add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0, 0, -1), 0.5, colour=(0.8, 0.3, 0.3))
    >>> add_plane((0, -0.5, 0), (0, 1, 0), colour=(1, 1, 1))
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging
import math

import taichi as ti
import taichi.math as tm

from glint.core.config import checker_spacing, max_distance
from glint.geometry.plane import Plane, hit_plane
from glint.geometry.sphere import (
    PRIMITIVE_PLANE,
    PRIMITIVE_SPHERE,
    Intersection,
    Sphere,
    hit_sphere,
    miss_intersection,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

Vector3 = tuple[float, float, float]

# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 256

# Primitive table: Structure of Arrays layout for GPU efficiency.
# primitive_positions holds the centre of a sphere or a point on a plane;
# primitive_normals is only meaningful for planes and primitive_radii only
# for spheres.
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_radii = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_colours = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all primitives from the scene.

    Resets the primitive count to zero. Field data is overwritten when new
    primitives are added.
    """
    num_primitives[None] = 0


def _next_index() -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    return idx


def add_sphere(centre: Vector3, radius: float, colour: Vector3 = (1.0, 1.0, 1.0)) -> int:
    """Add a sphere to the scene.

    Args:
        centre: The centre point of the sphere.
        radius: The radius of the sphere.
        colour: The base colour of the sphere.

    Returns:
        The table index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the primitive table is full.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = _next_index()
    primitive_kinds[idx] = PRIMITIVE_SPHERE
    primitive_positions[idx] = [float(centre[0]), float(centre[1]), float(centre[2])]
    primitive_normals[idx] = [0.0, 0.0, 0.0]
    primitive_radii[idx] = radius
    primitive_colours[idx] = [float(colour[0]), float(colour[1]), float(colour[2])]
    num_primitives[None] = idx + 1
    logger.debug("Added sphere %d at %s, radius %s", idx, centre, radius)
    return idx


def add_plane(point: Vector3, normal: Vector3, colour: Vector3 = (1.0, 1.0, 1.0)) -> int:
    """Add an infinite plane to the scene.

    The normal is normalized before it is stored.

    Args:
        point: Any point on the plane.
        normal: The plane normal (need not be unit length).
        colour: The base colour before the checker pattern.

    Returns:
        The table index of the added plane.

    Raises:
        ValueError: If the normal is zero-length.
        RuntimeError: If the primitive table is full.
    """
    norm = math.sqrt(normal[0] * normal[0] + normal[1] * normal[1] + normal[2] * normal[2])
    if norm < 1e-8:
        raise ValueError(f"Plane normal must be non-zero, got {normal}")
    idx = _next_index()
    primitive_kinds[idx] = PRIMITIVE_PLANE
    primitive_positions[idx] = [float(point[0]), float(point[1]), float(point[2])]
    primitive_normals[idx] = [normal[0] / norm, normal[1] / norm, normal[2] / norm]
    primitive_radii[idx] = 0.0
    primitive_colours[idx] = [float(colour[0]), float(colour[1]), float(colour[2])]
    num_primitives[None] = idx + 1
    logger.debug("Added plane %d through %s, normal %s", idx, point, normal)
    return idx


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


def get_primitive_kind(index: int) -> int:
    """Get the kind (PRIMITIVE_SPHERE or PRIMITIVE_PLANE) of a table entry."""
    if not 0 <= index < get_primitive_count():
        raise IndexError(f"Primitive index {index} out of range")
    return int(primitive_kinds[index])


@ti.func
def intersect_primitive(ray_origin: vec3, ray_direction: vec3, index: ti.i32) -> Intersection:
    """Dispatch one table entry to its intersection test.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        index: Index into the primitive table.

    Returns:
        The primitive's Intersection, or the miss sentinel.
    """
    result = miss_intersection()
    kind = primitive_kinds[index]

    if kind == PRIMITIVE_SPHERE:
        sphere = Sphere(
            centre=primitive_positions[index],
            radius=primitive_radii[index],
            colour=primitive_colours[index],
        )
        result = hit_sphere(ray_origin, ray_direction, sphere)
    elif kind == PRIMITIVE_PLANE:
        plane = Plane(
            point=primitive_positions[index],
            normal=primitive_normals[index],
            colour=primitive_colours[index],
        )
        result = hit_plane(
            ray_origin, ray_direction, plane, checker_spacing[None], max_distance[None]
        )

    return result


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> Intersection:
    """Find the nearest intersection across all primitives.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        The nearest Intersection, or the miss sentinel if nothing is struck.
    """
    result = miss_intersection()

    n = num_primitives[None]
    for i in range(n):
        rec = intersect_primitive(ray_origin, ray_direction, i)
        if rec.hit == 1:
            take = 0
            if result.hit == 0:
                take = 1
            elif rec.t < result.t:
                take = 1
            elif rec.t == result.t and rec.kind == PRIMITIVE_PLANE:
                # Planes win exact ties
                take = 1
            if take == 1:
                result = rec

    return result


@ti.func
def intersect_scene_any(ray_origin: vec3, ray_direction: vec3) -> ti.i32:
    """Test if the ray hits any primitive at all (shadow ray query).

    No distance bound is applied: a hit beyond a light still counts.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    n = num_primitives[None]
    for i in range(n):
        if hit_any == 0:
            rec = intersect_primitive(ray_origin, ray_direction, i)
            if rec.hit == 1:
                hit_any = 1

    return hit_any
