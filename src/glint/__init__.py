"""Taichi-based Whitted-style ray tracer for a small fixed scene.

This package renders a set of spheres above a checkerboard ground plane by
casting one ray per pixel and following it through a bounded chain of mirror
reflections, with support for:
- Phong-style direct illumination with a distance falloff heuristic
- Hard shadows and a jittered multi-light soft shadow approximation
- Procedural checker and rainbow surface colours
- Distance-based fog compositing

Subpackages:
    core: Ray type, vector utilities, configuration, jitter and the tracing driver
    geometry: Sphere and plane primitives with intersection tests
    scene: Primitive table, nearest-hit queries and scene building
    shading: Shadow rays, direct illumination and fog
    camera: Orthographic and perspective ray generation
    preview: Tone mapping, preview window and PNG export
"""

__version__ = "0.1.0"
