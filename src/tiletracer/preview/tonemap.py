"""Tone mapping of accumulated radiance to 8-bit display color.

The pipeline converts unbounded linear radiance to quantized RGBA:

1. Clamp every channel to ``[0, 1 / sensitivity]``.
2. Scale by ``sensitivity`` so the values lie in ``[0, 1]``.
3. Gamma correct: raise to ``1 / gamma`` (skipped when ``gamma == 1``).
4. Scale by 255, round half up, clamp to ``[0, 255]``; alpha is 255.

Higher sensitivity brightens low radiance values at the cost of clipping
high ones. Tone mapping is lossy: only ``sensitivity == gamma == 1`` leaves
display-range values unchanged.

``to_display_color`` applies the pipeline to a single spectrum;
``tone_map_array`` is the vectorized NumPy equivalent used for whole tiles
and buffers.

Example:
    >>> from tiletracer.preview.tonemap import to_display_color, to_rgba_image
    >>> from tiletracer.film.spectrum import RGBSpectrum
    >>> to_display_color(RGBSpectrum(0.5, 1.0, 4.0), sensitivity=1.0, gamma=1.0)
    (128, 255, 255, 255)
    >>> image = to_rgba_image(buffer, sensitivity=1.0, gamma=2.2)  # (H, W, 4) uint8
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from tiletracer.film.spectrum import RGBSpectrum

if TYPE_CHECKING:
    from tiletracer.film.framebuffer import FrameBuffer
    from tiletracer.film.tile import Tile


def validate_tone_map(sensitivity: float, gamma: float) -> None:
    """Check tone-mapping parameters.

    Raises:
        ValueError: If either parameter is not a finite number larger than zero.
    """
    for name, value in (("sensitivity", sensitivity), ("gamma", gamma)):
        if math.isnan(value):
            raise ValueError(f"the {name} cannot be NaN")
        if math.isinf(value):
            raise ValueError(f"the {name} cannot be infinite")
        if value <= 0.0:
            raise ValueError(f"the {name} must be larger than zero, got {value}")


def to_display_color(
    radiance: RGBSpectrum,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> tuple[int, int, int, int]:
    """Tone map a single radiance value to an 8-bit RGBA color.

    Args:
        radiance: Linear radiance to convert.
        sensitivity: Inverse exposure; radiance at or above ``1 / sensitivity``
            maps to full intensity.
        gamma: Display gamma (for example 2.2 for sRGB-like output).

    Returns:
        The ``(r, g, b, 255)`` tuple with channels in ``[0, 255]``.

    Raises:
        ValueError: If ``sensitivity`` or ``gamma`` is invalid.
    """
    validate_tone_map(sensitivity, gamma)
    return (
        radiance.clamp(0.0, 1.0 / sensitivity)
        .scale(sensitivity)
        .pow(1.0 / gamma)
        .scale(255.0)
        .to_rgba()
    )


def tone_map_array(
    image: npt.NDArray[np.floating],
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Tone map an array of radiance values.

    Args:
        image: Linear radiance of shape ``(..., 3)``.
        sensitivity: Inverse exposure, as in ``to_display_color``.
        gamma: Display gamma, as in ``to_display_color``.

    Returns:
        ``uint8`` array of shape ``(..., 4)`` with alpha set to 255, in the
        same pixel order as the input.

    Raises:
        ValueError: If the parameters are invalid or the last axis is not 3.
    """
    validate_tone_map(sensitivity, gamma)
    radiance = np.asarray(image, dtype=np.float64)
    if radiance.shape[-1:] != (3,):
        raise ValueError(f"expected an array with 3 channels on the last axis, got {radiance.shape}")

    inv_gamma = 1.0 / gamma
    scaled = np.clip(radiance, 0.0, 1.0 / sensitivity) * sensitivity
    if inv_gamma != 1.0:
        scaled = np.power(scaled, inv_gamma)
    quantized = np.clip(np.floor(scaled * 255.0 + 0.5), 0.0, 255.0)

    result = np.full(radiance.shape[:-1] + (4,), 255, dtype=np.uint8)
    result[..., :3] = quantized.astype(np.uint8)
    return result


def tone_map_tile(
    frame_buffer: FrameBuffer,
    tile: Tile,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Tone map one tile of a frame buffer.

    Returns:
        ``uint8`` array of shape ``(tile.height, tile.width, 4)`` in buffer
        row order (row 0 is ``tile.y_start``).
    """
    return tone_map_array(frame_buffer.radiance(tile), sensitivity, gamma)


def to_rgba_image(
    frame_buffer: FrameBuffer,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Tone map the whole buffer into a display image.

    The rows are flipped: row 0 of the result is the highest ``y`` of the
    buffer, so the image appears upright when shown top-down.

    Returns:
        ``uint8`` array of shape ``(H, W, 4)``.
    """
    return tone_map_array(frame_buffer.radiance(), sensitivity, gamma)[::-1]


def to_rgba_buffer(
    frame_buffer: FrameBuffer,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Tone map the whole buffer into a flat RGBA byte array.

    The layout is ``to_rgba_image`` flattened: ``W * H * 4`` bytes, rows
    ordered from the highest buffer ``y`` down to ``y == 0``.
    """
    return np.ascontiguousarray(to_rgba_image(frame_buffer, sensitivity, gamma)).reshape(-1)
