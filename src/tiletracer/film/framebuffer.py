"""Frame buffer of weighted radiance accumulators.

The buffer stores, for every pixel, the weighted sum of the radiance added
to it and the sum of the weights, in two ``float64`` NumPy arrays of shape
``(H, W, 3)`` and ``(H, W)``. A pixel's color is the weighted average
``color_sum / weight_sum``, or black while nothing has been added.

Concurrency: pixels carry no lock. Worker tasks may write concurrently only
when they are restricted to disjoint tiles from ``subdivide``; readers must
wait until all writers have been joined.

Example:
    >>> from tiletracer.film.framebuffer import FrameBuffer
    >>> from tiletracer.film.spectrum import RGBSpectrum
    >>> buffer = FrameBuffer(64, 48)
    >>> buffer.get_pixel(3, 4).add(RGBSpectrum(1.0, 0.0, 0.0))
    >>> tiles = buffer.subdivide(16, 16)
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from tiletracer.film.spectrum import BLACK, RGBSpectrum
from tiletracer.film.tile import Tile


class Pixel:
    """Accumulator view onto one cell of a ``FrameBuffer``.

    Pixels are handed out by ``FrameBuffer.get_pixel``; they share storage
    with the buffer, so adding to a pixel is visible through the buffer.
    """

    __slots__ = ("_color", "_weight", "_index")

    def __init__(
        self,
        color: npt.NDArray[np.float64],
        weight: npt.NDArray[np.float64],
        x: int,
        y: int,
    ) -> None:
        self._color = color
        self._weight = weight
        self._index = (y, x)

    @property
    def x(self) -> int:
        return self._index[1]

    @property
    def y(self) -> int:
        return self._index[0]

    @property
    def weight_sum(self) -> float:
        return float(self._weight[self._index])

    @property
    def color_sum(self) -> RGBSpectrum:
        red, green, blue = self._color[self._index]
        return RGBSpectrum(float(red), float(green), float(blue))

    def add_rgb(self, red: float, green: float, blue: float, weight: float = 1.0) -> None:
        """Add a color weighted by ``weight``.

        Raises:
            ValueError: If a component or the weight is not finite, or the
                weight is negative.
        """
        for name, value in (("red", red), ("green", green), ("blue", blue)):
            if not math.isfinite(value):
                raise ValueError(f"the {name} component is not a valid number: {value}")
        if not math.isfinite(weight):
            raise ValueError(f"the weight is not a valid number: {weight}")
        if weight < 0.0:
            raise ValueError(f"the weight cannot be negative, got {weight}")

        cell = self._color[self._index]
        cell[0] += red * weight
        cell[1] += green * weight
        cell[2] += blue * weight
        self._weight[self._index] += weight

    def add(self, spectrum: RGBSpectrum, weight: float = 1.0) -> None:
        """Add a spectrum weighted by ``weight``."""
        self.add_rgb(spectrum.red, spectrum.green, spectrum.blue, weight)

    @property
    def spectrum(self) -> RGBSpectrum:
        """The weighted average of everything added, or black if nothing was."""
        weight_sum = self.weight_sum
        if weight_sum == 0.0:
            return BLACK
        return self.color_sum.divide(weight_sum)

    def get_color(self) -> RGBSpectrum:
        return self.spectrum

    def __repr__(self) -> str:
        s = self.spectrum
        return f"Pixel(x={self.x}, y={self.y}, color=({s.red:.6f}, {s.green:.6f}, {s.blue:.6f}))"


class FrameBuffer:
    """A two-dimensional grid of pixel accumulators.

    Args:
        x_resolution: Horizontal resolution in pixels.
        y_resolution: Vertical resolution in pixels.

    Raises:
        ValueError: If either resolution is not positive.
    """

    def __init__(self, x_resolution: int, y_resolution: int) -> None:
        if x_resolution <= 0:
            raise ValueError(f"the horizontal resolution must be larger than zero, got {x_resolution}")
        if y_resolution <= 0:
            raise ValueError(f"the vertical resolution must be larger than zero, got {y_resolution}")
        self._x_resolution = int(x_resolution)
        self._y_resolution = int(y_resolution)
        self._color_sum = np.zeros((self._y_resolution, self._x_resolution, 3), dtype=np.float64)
        self._weight_sum = np.zeros((self._y_resolution, self._x_resolution), dtype=np.float64)

    @property
    def x_resolution(self) -> int:
        return self._x_resolution

    @property
    def y_resolution(self) -> int:
        return self._y_resolution

    @property
    def pixel_count(self) -> int:
        return self._x_resolution * self._y_resolution

    @property
    def bounds(self) -> Tile:
        """The tile covering the whole buffer."""
        return Tile(0, 0, self._x_resolution, self._y_resolution)

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at ``(x, y)``.

        Raises:
            IndexError: If the coordinates fall outside the buffer. Negative
                coordinates are rejected rather than wrapped around.
        """
        if not (0 <= x < self._x_resolution and 0 <= y < self._y_resolution):
            raise IndexError(
                f"pixel ({x}, {y}) is outside the {self._x_resolution}x{self._y_resolution} buffer"
            )
        return Pixel(self._color_sum, self._weight_sum, x, y)

    def subdivide(self, width: int, height: int) -> list[Tile]:
        """Split the buffer into non-overlapping tiles of at most ``width x height``.

        Tiles are returned in raster order; the union of their pixels is
        exactly ``[0, W) x [0, H)``.

        Raises:
            ValueError: If ``width`` or ``height`` is not positive.
        """
        return self.bounds.subdivide(width, height)

    def radiance(self, tile: Tile | None = None) -> npt.NDArray[np.float64]:
        """Return the averaged radiance as a new ``(H, W, 3)`` array.

        Pixels with zero accumulated weight are black. When ``tile`` is given
        only that region is returned.
        """
        region = tile if tile is not None else self.bounds
        rows = slice(region.y_start, region.y_end)
        columns = slice(region.x_start, region.x_end)
        color = self._color_sum[rows, columns]
        weight = self._weight_sum[rows, columns]

        # Multiply by the reciprocal, matching Pixel.spectrum bit for bit.
        inv_weight = np.zeros_like(weight)
        np.divide(1.0, weight, out=inv_weight, where=weight != 0.0)
        return color * inv_weight[..., np.newaxis]

    def weights(self) -> npt.NDArray[np.float64]:
        """Return a copy of the per-pixel weight sums, shape ``(H, W)``."""
        return self._weight_sum.copy()

    def clear(self) -> None:
        """Reset every pixel to black with zero weight."""
        self._color_sum.fill(0.0)
        self._weight_sum.fill(0.0)

    def __repr__(self) -> str:
        return f"FrameBuffer({self._x_resolution}x{self._y_resolution})"
