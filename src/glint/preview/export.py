"""PNG export for rendered images.

Images are tone mapped, gamma encoded and quantized to 8 bits, then written
with Pillow.

Example:
    >>> from glint.preview.export import save_png
    >>> save_png(renderer, "spheres.png", tone_map="reinhard")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from glint.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from glint.core.renderer import Renderer

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image of shape (H, W, 3) to display-ready uint8."""
    processed = process_image_for_display(
        image, tone_map=tone_map, gamma=gamma, exposure=exposure
    )
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Write a linear float image of shape (H, W, 3) as an 8-bit PNG.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8, mode="RGB").save(str(filepath))
    logger.info("Wrote %dx%d PNG to %s", image.shape[1], image.shape[0], filepath)


def save_png(
    renderer: Renderer,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save the renderer's current (unclamped) image as a PNG."""
    save_png_from_array(
        renderer.get_raw_image_numpy(),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared error between two images of equal shape.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
