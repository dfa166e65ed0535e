#!/usr/bin/env python3
"""Render the six-sphere demonstration scene.

Builds the default scene (six spheres over a checkerboard ground plane),
configures the camera and the shading preset, traces one ray per pixel and
writes a PNG.

Usage:
    python examples/render_scene.py [options]

Options:
    --width WIDTH           Image width in pixels (default: 512)
    --height HEIGHT         Image height in pixels (default: 512)
    --output OUTPUT         Output file path (default: spheres.png)
    --preset {classic,soft} Shading preset (default: classic)
    --orthographic          Use orthographic projection
    --fov FOV               Override the camera field of view
    --max-depth N           Maximum reflection bounces (default: 42)
    --no-fog                Disable fog even if the preset enables it
    --tone-map METHOD       none, reinhard or exposure (default: none)
    --gamma GAMMA           Output gamma (default: 1.0)
    --show                  Open a Matplotlib preview after rendering
    --verbose               Enable debug logging

Example:
    python examples/render_scene.py --preset soft --width 800 --height 600
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the six-sphere demonstration scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=512, help="Image width in pixels (default: 512)")
    parser.add_argument("--height", type=int, default=512, help="Image height in pixels (default: 512)")
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--preset",
        choices=("classic", "soft"),
        default="classic",
        help="classic: one light, hard shadows. soft: light line, jittered "
        "shadows, rainbow spheres and fog (default: classic)",
    )
    parser.add_argument("--orthographic", action="store_true", help="Use orthographic projection")
    parser.add_argument(
        "--fov",
        type=float,
        default=None,
        help="Perspective FOV in degrees, or orthographic half-height",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum reflection bounces (default: preset value)",
    )
    parser.add_argument("--no-fog", action="store_true", help="Disable fog")
    parser.add_argument(
        "--tone-map",
        choices=("none", "reinhard", "exposure"),
        default="none",
        help="Tone mapping applied before export (default: none)",
    )
    parser.add_argument("--gamma", type=float, default=1.0, help="Output gamma (default: 1.0)")
    parser.add_argument("--show", action="store_true", help="Show a Matplotlib preview")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def render_scene(args: argparse.Namespace) -> Path:
    """Render the scene described by the parsed arguments and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from glint.camera.projection import setup_camera
    from glint.core.config import apply_config, classic_config, soft_shadow_config
    from glint.core.renderer import Renderer
    from glint.preview.export import save_png
    from glint.scene.default_scene import create_default_scene

    print(f"Creating scene ({args.width}x{args.height}, preset={args.preset})...")

    scene, camera = create_default_scene(
        aspect_ratio=args.width / args.height,
        orthographic=args.orthographic,
    )
    if args.fov is not None:
        if args.orthographic:
            camera.orthographic_fov = args.fov
        else:
            camera.perspective_fov = args.fov
    setup_camera(camera)
    logger.debug("Scene: %r", scene)

    config = soft_shadow_config() if args.preset == "soft" else classic_config()
    if args.max_depth is not None:
        config = replace(config, max_depth=args.max_depth)
    if args.no_fog:
        config = replace(config, fog=False)
    apply_config(config)

    renderer = Renderer(args.width, args.height)

    print("Rendering...")
    start_time = time.time()
    renderer.render()
    print(f"  Traced {args.width * args.height} primary rays in {renderer.last_render_seconds:.2f}s")

    output_file = Path(args.output)
    save_png(renderer, output_file, tone_map=args.tone_map, gamma=args.gamma)

    print(f"Saved to: {output_file.absolute()}")
    print(f"Total time: {time.time() - start_time:.2f}s")

    if args.show:
        from glint.preview.display import show_preview

        show_preview(renderer, tone_map=args.tone_map, gamma=args.gamma)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        print("Using CPU backend")

    try:
        render_scene(args)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
