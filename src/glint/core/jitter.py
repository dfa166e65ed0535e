"""Deterministic pseudo-random scalars for colour and shadow jitter.

Two low-quality generators drive the procedural effects:

- origin_jitter(x): a stateless scalar derived from the x coordinate of the
  primary ray origin, used by the rainbow sphere tint.
- next_jitter(seed): a linear congruential step over an integer seed, used to
  perturb soft-shadow rays.

Both return reciprocal-style values in [1, modulus]. The LCG seed is plain
state owned by one ray-trace evaluation: callers start from JITTER_SEED_INIT
for every pixel and thread the returned seed through, so parallel pixels
never share it and results do not depend on evaluation order.
"""

import taichi as ti

# Origin jitter: bucket = int(mod(x * 1123 + 619, 420))
ORIGIN_JITTER_SCALE = 1123.0
ORIGIN_JITTER_OFFSET = 619.0
ORIGIN_JITTER_MODULUS = 420

# LCG jitter: seed = (seed * 1364 + 626) mod 509
LCG_MULTIPLIER = 1364
LCG_INCREMENT = 626
LCG_MODULUS = 509

# Seed every evaluation starts from
JITTER_SEED_INIT = 0


@ti.func
def _reciprocal_bucket(bucket: ti.i32, modulus: ti.i32) -> ti.f32:
    """Map bucket to modulus / bucket; a zero bucket maps to 1.0."""
    result = 1.0
    if bucket != 0:
        result = ti.cast(modulus, ti.f32) / ti.cast(bucket, ti.f32)
    return result


@ti.func
def origin_jitter(x: ti.f32) -> ti.f32:
    """Stateless jitter scalar seeded by a screen-space origin coordinate.

    Args:
        x: The x coordinate of the primary ray origin.

    Returns:
        420 / bucket, where bucket = int(mod(x * 1123 + 619, 420)).
    """
    v = x * ORIGIN_JITTER_SCALE + ORIGIN_JITTER_OFFSET
    m = ti.cast(ORIGIN_JITTER_MODULUS, ti.f32)
    wrapped = v - m * ti.floor(v / m)
    bucket = ti.cast(wrapped, ti.i32)
    return _reciprocal_bucket(bucket, ORIGIN_JITTER_MODULUS)


@ti.func
def next_seed(seed: ti.i32) -> ti.i32:
    """Advance the LCG seed by one step."""
    return (seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS


@ti.func
def next_jitter(seed: ti.i32):
    """Advance the seed and draw one jitter scalar.

    Args:
        seed: The current seed of this evaluation.

    Returns:
        A tuple (value, new_seed) where value = 509 / new_seed.
    """
    new_seed = next_seed(seed)
    return _reciprocal_bucket(new_seed, LCG_MODULUS), new_seed
