"""Display-side image processing and the Matplotlib preview window.

The tracer writes unclamped linear colour: bright specular highlights and
stacked reflections can exceed 1.0. Before display or export the image goes
through an optional tone map, then gamma encoding, then a final clamp.

Example:
    >>> from glint.preview.display import show_preview
    >>> from glint.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> show_preview(renderer, tone_map="reinhard")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from glint.core.renderer import Renderer

logger = logging.getLogger(__name__)

ToneMapMethod = Literal["none", "reinhard", "exposure"]
TONE_MAP_METHODS: tuple[str, ...] = ("none", "reinhard", "exposure")


def tone_map_reinhard(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Reinhard operator c / (1 + c), applied per channel."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Exposure operator 1 - exp(-c * exposure).

    Raises:
        ValueError: If exposure is not positive.
    """
    if exposure <= 0:
        raise ValueError(f"exposure must be positive, got {exposure}")
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Gamma-encode an image in [0, 1] as c ** (1 / gamma).

    Values are clamped first so negative inputs cannot produce NaN.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image
    clamped = np.clip(image, 0.0, 1.0)
    return np.power(clamped, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline: tone map, gamma, clamp to [0, 1].

    Args:
        image: Linear image of shape (H, W, 3).
        tone_map: One of TONE_MAP_METHODS.
        gamma: Gamma for encoding (1.0 leaves values linear).
        exposure: Exposure for the "exposure" operator.

    Raises:
        ValueError: For an unknown tone map or a non-positive gamma/exposure.
    """
    result = np.array(image, dtype=np.float32, copy=True)

    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(
            f"Unknown tone mapping method: {tone_map} (expected one of {TONE_MAP_METHODS})"
        )

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    renderer: Renderer,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Show the current render in a Matplotlib window.

    Args:
        renderer: The Renderer holding the image.
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure for the "exposure" operator.
        title: Window title; defaults to the image size and render time.
        figsize: Figure size in inches.
        block: Whether to block until the window is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        renderer.get_raw_image_numpy(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = (
            f"{renderer.width}x{renderer.height} "
            f"({renderer.last_render_seconds:.2f}s)"
        )
        if tone_map != "none":
            title += f" [{tone_map}]"
    ax.set_title(title)

    logger.debug("Opening preview window: %s", title)
    plt.tight_layout()
    plt.show(block=block)
