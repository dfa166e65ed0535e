"""Sphere primitive and the shared Intersection record.

This module provides the Sphere dataclass, the Intersection record that all
primitive tests return, and the ray-sphere intersection test.

The test assumes a unit-length ray direction, which reduces the quadratic to
    d = b^2 - |a|^2 + r^2,  with a = origin - centre, b = dot(direction, a)
and only the near root t = -b - sqrt(d) is considered. A ray whose origin
lies inside a sphere therefore misses that sphere; camera and shadow rays in
the scene always start outside geometry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(centre=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Primitive kinds stored in Intersection.kind and the scene table
PRIMITIVE_NONE = -1
PRIMITIVE_SPHERE = 0
PRIMITIVE_PLANE = 1


@ti.dataclass
class Sphere:
    """A sphere defined by centre point, radius and colour.

    Attributes:
        centre: The centre point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        colour: The base surface colour (linear RGB).
    """

    centre: vec3
    radius: ti.f32
    colour: vec3


@ti.dataclass
class Intersection:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray struck the primitive at a positive distance, else 0.
        t: Ray parameter of the hit. -1 for a miss.
        pos: The hit point origin + t * direction. Zero for a miss.
        normal: Unit surface normal pointing outward. Zero for a miss.
        colour: Surface colour at the hit point. Zero for a miss.
        kind: PRIMITIVE_SPHERE or PRIMITIVE_PLANE. PRIMITIVE_NONE for a miss.
    """

    hit: ti.i32
    t: ti.f32
    pos: vec3
    normal: vec3
    colour: vec3
    kind: ti.i32


@ti.func
def miss_intersection() -> Intersection:
    """Create the non-hit sentinel (hit=0, t=-1, zeroed fields)."""
    return Intersection(
        hit=0,
        t=-1.0,
        pos=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        colour=vec3(0.0, 0.0, 0.0),
        kind=PRIMITIVE_NONE,
    )


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> Intersection:
    """Test a ray against a sphere, returning the near intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        An Intersection for the near root, or the miss sentinel if the
        discriminant is not positive or the near root is not in front of
        the origin.
    """
    a = ray_origin - sphere.centre
    b = tm.dot(ray_direction, a)
    d = b * b - tm.dot(a, a) + sphere.radius * sphere.radius

    result = miss_intersection()

    if d > 0.0:
        # Near root only
        t = -b - ti.sqrt(d)
        if t > 0.0:
            pos = ray_origin + t * ray_direction
            result = Intersection(
                hit=1,
                t=t,
                pos=pos,
                normal=tm.normalize(pos - sphere.centre),
                colour=sphere.colour,
                kind=PRIMITIVE_SPHERE,
            )

    return result


@ti.func
def make_sphere(centre: vec3, radius: ti.f32, colour: vec3) -> Sphere:
    """Create a sphere from centre, radius and colour."""
    return Sphere(centre=centre, radius=radius, colour=colour)
