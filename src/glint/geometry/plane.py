"""Infinite plane primitive with a procedural checkerboard colour.

The scene has a single ground plane. Its colour is modulated by a checker
pattern: the tile index floor(x * spacing) + floor(z * spacing) is tested
for integer parity, even tiles keep the plane colour and odd tiles are
darkened to half.

The ray-plane distance is
    t = -dot(normal, origin - point) / dot(direction, normal)
A ray parallel to the plane has a (near) zero denominator; that case is
rejected explicitly as a miss instead of relying on infinities or NaN
failing the distance bound.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.geometry.plane import Plane, hit_plane
    >>> ground = Plane(point=ti.math.vec3(0, -0.5, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import PRIMITIVE_PLANE, Intersection, miss_intersection

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# |dot(direction, normal)| at or below this is treated as parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """An infinite plane defined by a point, a unit normal and a colour.

    Attributes:
        point: Any point on the plane (vec3).
        normal: Unit normal of the plane (vec3).
        colour: Base colour before the checker pattern is applied.
    """

    point: vec3
    normal: vec3
    colour: vec3


@ti.func
def checker_pattern(point: vec3, colour: vec3, spacing: ti.f32) -> vec3:
    """Checkerboard colour in the xz plane.

    Args:
        point: The surface point.
        colour: The base colour.
        spacing: Tiles per world unit.

    Returns:
        colour on even tiles, colour * 0.5 on odd tiles.
    """
    tile_x = ti.cast(ti.floor(point.x * spacing), ti.i32)
    tile_z = ti.cast(ti.floor(point.z * spacing), ti.i32)
    result = colour
    if (tile_x + tile_z) % 2 != 0:
        result = colour * 0.5
    return result


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    spacing: ti.f32,
    max_dist: ti.f32,
) -> Intersection:
    """Test a ray against a plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test.
        spacing: Checker tiles per world unit for the hit colour.
        max_dist: Hits at or beyond this distance are discarded.

    Returns:
        An Intersection with the checker colour, or the miss sentinel if the
        ray is parallel to the plane or t is outside (0, max_dist).
    """
    result = miss_intersection()
    denom = tm.dot(ray_direction, plane.normal)

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = -tm.dot(plane.normal, ray_origin - plane.point) / denom
        if t > 0.0 and t < max_dist:
            pos = ray_origin + t * ray_direction
            result = Intersection(
                hit=1,
                t=t,
                pos=pos,
                normal=plane.normal,
                colour=checker_pattern(pos, plane.colour, spacing),
                kind=PRIMITIVE_PLANE,
            )

    return result

