"""Render configuration and GPU-side shading parameters.

All tunable constants of the shading model, the tracing loop and the fog
post-process live in a single RenderConfig dataclass. apply_config()
validates a configuration and uploads it into Taichi fields that the
kernels read, so no shading constant is embedded as a literal in kernel code.

Two presets mirror the two rendering variants:
    classic_config(): one point light, hard shadows, plain colours, no fog
    soft_shadow_config(): a line of nine lights, jittered shadows,
        rainbow spheres and purple fog

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.core.config import RenderConfig, apply_config
    >>> apply_config(RenderConfig(falloff=0.5, max_depth=8))
"""

import logging
from dataclasses import dataclass, field, replace

import taichi as ti

logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]

# Maximum number of light samples (preallocated)
MAX_LIGHTS = 32

# Hard cap on the reflection loop length
MAX_DEPTH_LIMIT = 256

# Default light position and soft shadow layout
DEFAULT_LIGHT_POSITION: Vector3 = (6.0, 6.0, 4.0)
SOFT_SHADOW_LIGHT_COUNT = 9
SOFT_SHADOW_LIGHT_SPACING = 0.1


@dataclass
class RenderConfig:
    """Tunable parameters of the shading model and the tracing loop.

    Attributes:
        ka: Ambient coefficient.
        kd: Diffuse coefficient.
        ks: Specular coefficient.
        shininess: Specular exponent.
        phi: Light intensity used by the distance falloff.
        s: Distance heuristic constant preventing blow-up near the light.
        falloff: Per-bounce reflection weight multiplier, in [0, 1).
        checker_spacing: Checker tiles per world unit on the ground plane.
        fog_colour: Colour that fog blends toward.
        fog_density: Exponential fog density.
        max_depth: Maximum number of reflection bounces per ray.
        epsilon: Offset along the normal for secondary ray origins.
        light_positions: One or more point light positions. More than one
            approximates an area light for soft shadows.
        ambient_colour: Colour of the ambient term.
        specular_colour: Colour of the specular highlight.
        max_distance: Far bound for ground plane hits.
        soft_shadows: Use jittered shadow rays instead of one ray per light.
        rainbow_spheres: Replace sphere colours with the procedural tint.
        fog: Composite fog over the traced colour.
    """

    ka: float = 0.4
    kd: float = 0.9
    ks: float = 0.2
    shininess: float = 15.0
    phi: float = 5000.0
    s: float = 600.0
    falloff: float = 0.6
    checker_spacing: float = 3.0
    fog_colour: Vector3 = (0.2, 0.2, 0.4)
    fog_density: float = 0.1
    max_depth: int = 42
    epsilon: float = 1e-4
    light_positions: list[Vector3] = field(default_factory=lambda: [DEFAULT_LIGHT_POSITION])
    ambient_colour: Vector3 = (0.1, 0.1, 0.1)
    specular_colour: Vector3 = (1.0, 1.0, 1.0)
    max_distance: float = 10000.0
    soft_shadows: bool = False
    rainbow_spheres: bool = False
    fog: bool = False

    def validate(self) -> None:
        """Check that all parameters are usable by the kernels.

        Raises:
            ValueError: If any parameter is out of range.
        """
        for name in ("ka", "kd", "ks", "shininess", "fog_density"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.phi <= 0.0:
            raise ValueError(f"phi must be positive, got {self.phi}")
        if self.s <= 0.0:
            raise ValueError(f"s must be positive, got {self.s}")
        if not 0.0 <= self.falloff < 1.0:
            raise ValueError(f"falloff must be in [0, 1), got {self.falloff}")
        if self.checker_spacing <= 0.0:
            raise ValueError(f"checker_spacing must be positive, got {self.checker_spacing}")
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be in [1, {MAX_DEPTH_LIMIT}], got {self.max_depth}"
            )
        if self.epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.max_distance <= 0.0:
            raise ValueError(f"max_distance must be positive, got {self.max_distance}")
        if not 1 <= len(self.light_positions) <= MAX_LIGHTS:
            raise ValueError(
                f"Expected between 1 and {MAX_LIGHTS} light positions, "
                f"got {len(self.light_positions)}"
            )
        for name in ("fog_colour", "ambient_colour", "specular_colour"):
            value = getattr(self, name)
            if len(value) != 3:
                raise ValueError(f"{name} must have 3 components, got {value!r}")
        for i, position in enumerate(self.light_positions):
            if len(position) != 3:
                raise ValueError(f"light_positions[{i}] must have 3 components, got {position!r}")


def light_line(base: Vector3, spacing: float, count: int) -> list[Vector3]:
    """Lay out light samples along a diagonal line.

    Each position is the previous one with spacing added to every component,
    so the samples run along the (1, 1, 1) direction from base.

    Args:
        base: Position of the first light sample.
        spacing: Offset added to each component between samples.
        count: Number of samples.

    Returns:
        List of count light positions.

    Raises:
        ValueError: If count is not in [1, MAX_LIGHTS].
    """
    if not 1 <= count <= MAX_LIGHTS:
        raise ValueError(f"count must be in [1, {MAX_LIGHTS}], got {count}")
    return [
        (base[0] + i * spacing, base[1] + i * spacing, base[2] + i * spacing)
        for i in range(count)
    ]


def classic_config(light_position: Vector3 = DEFAULT_LIGHT_POSITION) -> RenderConfig:
    """Single point light, hard shadows, plain sphere colours, no fog."""
    return RenderConfig(light_positions=[light_position])


def soft_shadow_config(
    base: Vector3 = DEFAULT_LIGHT_POSITION,
    spacing: float = SOFT_SHADOW_LIGHT_SPACING,
    count: int = SOFT_SHADOW_LIGHT_COUNT,
) -> RenderConfig:
    """Line of light samples with jittered shadows, rainbow spheres and fog."""
    return RenderConfig(
        light_positions=light_line(base, spacing, count),
        soft_shadows=True,
        rainbow_spheres=True,
        fog=True,
    )


# =============================================================================
# Taichi Fields (GPU-accessible copies of the active configuration)
# =============================================================================

ambient_coefficient = ti.field(dtype=ti.f32, shape=())
diffuse_coefficient = ti.field(dtype=ti.f32, shape=())
specular_coefficient = ti.field(dtype=ti.f32, shape=())
specular_exponent = ti.field(dtype=ti.f32, shape=())
light_intensity = ti.field(dtype=ti.f32, shape=())
distance_heuristic = ti.field(dtype=ti.f32, shape=())
reflection_falloff = ti.field(dtype=ti.f32, shape=())
checker_spacing = ti.field(dtype=ti.f32, shape=())
fog_colour = ti.Vector.field(3, dtype=ti.f32, shape=())
fog_density = ti.field(dtype=ti.f32, shape=())
max_depth = ti.field(dtype=ti.i32, shape=())
ray_epsilon = ti.field(dtype=ti.f32, shape=())
max_distance = ti.field(dtype=ti.f32, shape=())
ambient_colour = ti.Vector.field(3, dtype=ti.f32, shape=())
specular_colour = ti.Vector.field(3, dtype=ti.f32, shape=())
soft_shadows_enabled = ti.field(dtype=ti.i32, shape=())
rainbow_enabled = ti.field(dtype=ti.i32, shape=())
fog_enabled = ti.field(dtype=ti.i32, shape=())

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

_active_config: RenderConfig | None = None


def _as_list(v: Vector3) -> list[float]:
    return [float(v[0]), float(v[1]), float(v[2])]


def apply_config(config: RenderConfig) -> None:
    """Validate a configuration and upload it to the Taichi fields.

    Must be called from Python scope, between renders.

    Args:
        config: The configuration to activate.

    Raises:
        ValueError: If the configuration is invalid.
    """
    global _active_config

    config.validate()

    ambient_coefficient[None] = config.ka
    diffuse_coefficient[None] = config.kd
    specular_coefficient[None] = config.ks
    specular_exponent[None] = config.shininess
    light_intensity[None] = config.phi
    distance_heuristic[None] = config.s
    reflection_falloff[None] = config.falloff
    checker_spacing[None] = config.checker_spacing
    fog_colour[None] = _as_list(config.fog_colour)
    fog_density[None] = config.fog_density
    max_depth[None] = config.max_depth
    ray_epsilon[None] = config.epsilon
    max_distance[None] = config.max_distance
    ambient_colour[None] = _as_list(config.ambient_colour)
    specular_colour[None] = _as_list(config.specular_colour)
    soft_shadows_enabled[None] = int(config.soft_shadows)
    rainbow_enabled[None] = int(config.rainbow_spheres)
    fog_enabled[None] = int(config.fog)

    for i, position in enumerate(config.light_positions):
        light_positions[i] = _as_list(position)
    num_lights[None] = len(config.light_positions)

    _active_config = replace(config, light_positions=list(config.light_positions))
    logger.debug(
        "Applied render config: %d light(s), max_depth=%d, soft_shadows=%s, fog=%s",
        len(config.light_positions),
        config.max_depth,
        config.soft_shadows,
        config.fog,
    )


def get_active_config() -> RenderConfig | None:
    """Return a copy of the last applied configuration, or None."""
    if _active_config is None:
        return None
    return replace(_active_config, light_positions=list(_active_config.light_positions))


def ensure_config() -> RenderConfig:
    """Apply the default configuration if none has been applied yet.

    Returns:
        The active configuration.
    """
    if _active_config is None:
        logger.info("No render config applied, using defaults")
        apply_config(RenderConfig())
    config = get_active_config()
    assert config is not None
    return config


def reset_config() -> None:
    """Forget the active configuration and zero the light count."""
    global _active_config
    _active_config = None
    num_lights[None] = 0

