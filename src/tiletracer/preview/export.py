"""Image export utilities for rendered frame buffers.

This module provides functions for saving tone-mapped frame buffers to
files. The core renderer only produces quantized RGBA arrays; encoding is
delegated to Pillow here.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from tiletracer.preview.export import save_png
    >>> save_png(buffer, "output.png", sensitivity=1.0, gamma=2.2)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from tiletracer.preview.tonemap import to_rgba_image

if TYPE_CHECKING:
    from tiletracer.film.framebuffer import FrameBuffer

logger = logging.getLogger(__name__)


def save_png(
    frame_buffer: FrameBuffer,
    filepath: str | Path,
    *,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> Path:
    """Tone map a frame buffer and save it as a PNG file.

    Args:
        frame_buffer: The rendered buffer. Must not be written concurrently.
        filepath: Output file path (should end in .png).
        sensitivity: Tone-mapping sensitivity.
        gamma: Tone-mapping gamma.

    Returns:
        The path that was written.
    """
    image = to_rgba_image(frame_buffer, sensitivity=sensitivity, gamma=gamma)
    return save_png_from_rgba(image, filepath)


def save_png_from_rgba(
    image: npt.NDArray[np.uint8],
    filepath: str | Path,
) -> Path:
    """Save an already tone-mapped RGBA image as a PNG file.

    Args:
        image: ``uint8`` array of shape ``(H, W, 4)``, top row first.
        filepath: Output file path (should end in .png).

    Returns:
        The path that was written.

    Raises:
        ValueError: If the array is not ``(H, W, 4)`` ``uint8``.
    """
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"expected an (H, W, 4) RGBA array, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"expected a uint8 array, got {image.dtype}")

    path = Path(filepath)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(path)
    logger.info("saved %dx%d image to %s", image.shape[1], image.shape[0], path)
    return path
