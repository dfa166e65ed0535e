"""Renderer wrapper around the tracing kernels.

The Renderer class owns the image dimensions and delegates to the global
render target in glint.core.integrator (which lives in Taichi fields). One
call to render() traces a single ray per pixel; there is no accumulation, so
rendering twice with the same scene and configuration gives the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from glint.core.renderer import Renderer
    >>> from glint.scene.default_scene import create_default_scene
    >>> from glint.camera.projection import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

import logging
import time
from typing import Any

import numpy as np
import numpy.typing as npt

from glint.core.integrator import (
    clear_render_target,
    get_image,
    get_image_numpy,
    get_normalized_image_numpy,
    render_image,
    render_pixel,
    setup_render_target,
)

logger = logging.getLogger(__name__)


class Renderer:
    """Single-pass renderer for the active scene, camera and configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        last_render_seconds: Wall time of the most recent render() call.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are out of range.
        """
        self._width = width
        self._height = height
        self.last_render_seconds = 0.0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self._width / self._height

    def reset(self) -> None:
        """Clear the colour buffer without changing the dimensions."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target.

        Raises:
            ValueError: If dimensions are out of range. The previous size is
                kept.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(self) -> None:
        """Trace every pixel of the image."""
        start = time.perf_counter()
        render_image()
        self.last_render_seconds = time.perf_counter() - start
        logger.info(
            "Rendered %dx%d in %.3fs", self._width, self._height, self.last_render_seconds
        )

    def render_pixel(self, pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
        """Trace a single pixel and return its colour (0, 0 is bottom-left)."""
        return render_pixel(pixel_i, pixel_j)

    def get_image(self) -> Any:
        """Get the raw Taichi colour buffer field.

        Note: This returns the full preallocated buffer. Use width/height
        properties to determine the active region.
        """
        return get_image()

    def get_raw_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the unclamped image as a (height, width, 3) float32 array."""
        return get_image_numpy()

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns the colour buffer with values clamped to [0, 1] and optionally
        gamma corrected. The array shape is (height, width, 3).

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Raises:
            ValueError: If gamma is not positive.
        """
        if gamma <= 0:
            raise ValueError(f"gamma must be positive, got {gamma}")

        image = get_normalized_image_numpy()

        if gamma != 1.0:
            image = np.power(image, 1.0 / gamma)

        return image

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit (height, width, 3) array."""
        image = self.get_image_numpy(gamma=gamma)
        return (image * 255).astype(np.uint8)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from PIL import Image as PILImage

        image_uint8 = self.get_image_uint8(gamma=gamma)
        pil_image = PILImage.fromarray(image_uint8, mode="RGB")
        pil_image.save(filepath)
        logger.info("Saved %dx%d image to %s", self._width, self._height, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height})"
