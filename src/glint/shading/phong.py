"""Direct illumination: an empirical ambient + diffuse + specular model.

For a hit point with normal n, seen along ray direction v, and light samples
L_0 .. L_{N-1}:

    ambient  = ka * ambient_colour
    diffuse  = sum_j [not shadowed_j] * colour * kd * max(0, n . l_j) / N
    specular = ks * max(0, normalize(v) . reflect(l_0, n)) ** shininess
               * specular_colour
    falloff  = phi / (4 * pi * (mean_j |L_j - pos| + s))

    radiance = (ambient + diffuse + specular) * falloff

where l_j is the unit direction from the hit point to L_j. The specular term
uses only the first light sample. With hard shadows each sample casts its own
shadow ray; with soft shadows every sample casts a jittered ray from L_0.
With a single light and hard shadows this is the plain point-light model.

The procedural rainbow tint for spheres also lives here.
"""

import taichi as ti
import taichi.math as tm

from glint.core.config import (
    ambient_coefficient,
    ambient_colour,
    diffuse_coefficient,
    distance_heuristic,
    light_intensity,
    light_positions,
    num_lights,
    soft_shadows_enabled,
    specular_coefficient,
    specular_colour,
    specular_exponent,
)
from glint.core.ray import reflect, safe_normalize
from glint.geometry.sphere import Intersection
from glint.shading.shadow import is_shadowed, is_shadowed_jittered

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rainbow tint: sum of normal * jitter / RAINBOW_DIVISOR over
# RAINBOW_ITERATIONS steps, scaled by base colour * RAINBOW_GAIN
RAINBOW_ITERATIONS = 100
RAINBOW_DIVISOR = 400.0
RAINBOW_GAIN = 3.0


@ti.func
def distance_falloff(distance: ti.f32) -> ti.f32:
    """Inverse-distance light falloff phi / (4 pi (distance + s))."""
    return light_intensity[None] / (4.0 * tm.pi * (distance + distance_heuristic[None]))


@ti.func
def specular_term(normal: vec3, light_dir: vec3, ray_direction: vec3) -> vec3:
    """Specular highlight from reflect(light_dir, normal) against the view ray."""
    reflected = reflect(light_dir, normal)
    alignment = ti.max(tm.dot(safe_normalize(ray_direction), reflected), 0.0)
    return specular_colour[None] * (specular_coefficient[None] * alignment ** specular_exponent[None])


@ti.func
def direct_illumination(hit: Intersection, ray_direction: vec3, seed: ti.i32):
    """Compute the radiance leaving a hit point toward the viewer.

    Args:
        hit: The surface intersection (hit == 1).
        ray_direction: Direction of the ray that produced the hit.
        seed: The evaluation's LCG seed, advanced by jittered shadow rays.

    Returns:
        A tuple (radiance, new_seed).
    """
    rng = seed
    n = num_lights[None]
    inv_n = 1.0 / ti.cast(n, ti.f32)

    first_light_dir = vec3(0.0, 0.0, 0.0)
    distance_sum = 0.0
    diffuse = vec3(0.0, 0.0, 0.0)

    for j in range(n):
        to_light = light_positions[j] - hit.pos
        light_dir = safe_normalize(to_light)
        distance_sum += tm.length(to_light)
        if j == 0:
            first_light_dir = light_dir

        occluded = 0
        if soft_shadows_enabled[None] == 1:
            occluded, rng = is_shadowed_jittered(hit, light_positions[0], rng)
        else:
            occluded = is_shadowed(hit, light_positions[j])

        if occluded == 0:
            lambert = ti.max(tm.dot(hit.normal, light_dir), 0.0)
            diffuse += hit.colour * (diffuse_coefficient[None] * lambert * inv_n)

    ambient = ambient_coefficient[None] * ambient_colour[None]
    specular = specular_term(hit.normal, first_light_dir, ray_direction)
    falloff = distance_falloff(distance_sum * inv_n)

    return (ambient + diffuse + specular) * falloff, rng


@ti.func
def rainbow_colour(normal: vec3, base_colour: vec3, jitter: ti.f32) -> vec3:
    """Procedural banded tint for sphere surfaces.

    Args:
        normal: The unit surface normal.
        base_colour: The sphere's own colour.
        jitter: Scalar from origin_jitter() for the primary ray.

    Returns:
        (sum over RAINBOW_ITERATIONS of normal * jitter / RAINBOW_DIVISOR)
        * base_colour * RAINBOW_GAIN.
    """
    tint = vec3(0.0, 0.0, 0.0)
    for _step in range(RAINBOW_ITERATIONS):
        tint += normal * jitter / RAINBOW_DIVISOR
    return tint * base_colour * RAINBOW_GAIN
