"""Preview module for output and visualization.

Components:
    display: Tone mapping, gamma encoding and the Matplotlib preview window
    export: 8-bit PNG export via Pillow and image comparison

Example:
    >>> from glint.preview import show_preview, save_png
    >>> from glint.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> save_png(renderer, "output.png", gamma=2.2)
    >>> show_preview(renderer, tone_map="reinhard")
"""

from glint.preview.display import (
    TONE_MAP_METHODS,
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from glint.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    "TONE_MAP_METHODS",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
