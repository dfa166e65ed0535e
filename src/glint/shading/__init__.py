"""Shading module: shadows, direct illumination and fog.

Components:
    shadow: Hard and jittered shadow rays toward the light samples
    phong: Ambient + diffuse + specular direct illumination, rainbow tint
    fog: Exponential distance fog applied on the primary hit distance

All shading functions are Taichi functions reading their coefficients from
the fields uploaded by glint.core.config.apply_config().
"""

from .fog import apply_fog, fog_blend
from .phong import direct_illumination, distance_falloff, rainbow_colour, specular_term
from .shadow import is_shadowed, is_shadowed_jittered, shadow_ray_origin

__all__ = [
    "apply_fog",
    "fog_blend",
    "direct_illumination",
    "distance_falloff",
    "specular_term",
    "rainbow_colour",
    "is_shadowed",
    "is_shadowed_jittered",
    "shadow_ray_origin",
]
