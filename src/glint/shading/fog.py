"""Distance fog post-process.

The traced colour is blended toward a constant fog colour by
    amount = 1 - exp(-distance * density)
where distance is the primary ray's hit distance. A negative distance marks
a primary miss and yields the fog colour itself.
"""

import taichi as ti
import taichi.math as tm

from glint.core.config import fog_colour, fog_density

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def fog_blend(colour: vec3, distance: ti.f32, fog: vec3, density: ti.f32) -> vec3:
    """Blend colour toward fog by exponential distance attenuation.

    Args:
        colour: The traced colour.
        distance: Primary hit distance, or a negative value for a miss.
        fog: The fog colour.
        density: The fog density.

    Returns:
        fog if distance < 0, else mix(colour, fog, 1 - exp(-distance * density)).
    """
    result = fog
    if distance >= 0.0:
        amount = 1.0 - ti.exp(-distance * density)
        result = tm.mix(colour, fog, amount)
    return result


@ti.func
def apply_fog(colour: vec3, distance: ti.f32) -> vec3:
    """fog_blend() with the configured fog colour and density."""
    return fog_blend(colour, distance, fog_colour[None], fog_density[None])
