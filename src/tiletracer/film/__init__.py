"""Film module: radiance storage for rendered images.

Components:
    spectrum: RGB radiance values
    framebuffer: Frame buffer and per-pixel weighted accumulators
    tile: Rectangular tiles, the unit of parallel work
"""

from .framebuffer import FrameBuffer, Pixel
from .spectrum import BLACK, RED, WHITE, RGBSpectrum
from .tile import Tile

__all__ = [
    "BLACK",
    "RED",
    "WHITE",
    "FrameBuffer",
    "Pixel",
    "RGBSpectrum",
    "Tile",
]
