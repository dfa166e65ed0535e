"""Shadow rays toward the scene's light samples.

A shadow ray starts at the hit point pushed out along the surface normal by
the configured epsilon, so it cannot immediately re-hit the surface it left.
The point is in shadow if the ray strikes anything at all; the distance to
the light is not checked, so geometry beyond the light also occludes.

Two variants are provided:

- is_shadowed: one ray straight at a light position.
- is_shadowed_jittered: the soft-shadow approximation. The ray direction is
  normalize(light * r1 - pos * r2), with r1 and r2 drawn in that order from
  the evaluation's LCG seed. Callers cast one such ray per light sample,
  always aimed from the first light position.

A shadow direction that cannot be normalized (the light sits on the hit
point) is reported as unoccluded without casting a ray.
"""

import taichi as ti
import taichi.math as tm

from glint.core.config import ray_epsilon
from glint.core.jitter import next_jitter
from glint.core.ray import near_zero, safe_normalize
from glint.geometry.sphere import Intersection
from glint.scene.intersection import intersect_scene_any

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def shadow_ray_origin(hit: Intersection) -> vec3:
    """Hit point offset along the normal by the configured epsilon."""
    return hit.pos + hit.normal * ray_epsilon[None]


@ti.func
def _cast_shadow_ray(hit: Intersection, direction: vec3) -> ti.i32:
    occluded = 0
    if near_zero(direction) == 0:
        occluded = intersect_scene_any(shadow_ray_origin(hit), direction)
    return occluded


@ti.func
def is_shadowed(hit: Intersection, light_position: vec3) -> ti.i32:
    """Test whether a light position is blocked from the hit point.

    Args:
        hit: The surface intersection being shaded.
        light_position: The light sample position.

    Returns:
        1 if any primitive lies along the shadow ray, 0 otherwise.
    """
    direction = safe_normalize(light_position - hit.pos)
    return _cast_shadow_ray(hit, direction)


@ti.func
def is_shadowed_jittered(hit: Intersection, light_position: vec3, seed: ti.i32):
    """Jittered shadow ray for the soft-shadow approximation.

    Args:
        hit: The surface intersection being shaded.
        light_position: The first light sample position.
        seed: The evaluation's current LCG seed.

    Returns:
        A tuple (occluded, new_seed).
    """
    light_scale, seed_after_light = next_jitter(seed)
    surface_scale, new_seed = next_jitter(seed_after_light)
    direction = safe_normalize(light_position * light_scale - hit.pos * surface_scale)
    return _cast_shadow_ray(hit, direction), new_seed
