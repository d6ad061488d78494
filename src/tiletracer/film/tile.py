"""Rectangular tiles of a frame buffer.

A tile is the unit of parallel work: the scheduler hands every tile to a
separate task, and because ``subdivide`` produces non-overlapping tiles no
two tasks ever write the same pixel.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Tile:
    """The pixel rectangle ``[x_start, x_end) x [y_start, y_end)``.

    Attributes:
        x_start: Minimum x coordinate (inclusive).
        y_start: Minimum y coordinate (inclusive).
        x_end: Maximum x coordinate (exclusive).
        y_end: Maximum y coordinate (exclusive).

    Raises:
        ValueError: If a start coordinate is negative or larger than its end.
    """

    x_start: int
    y_start: int
    x_end: int
    y_end: int

    def __post_init__(self) -> None:
        if self.x_start < 0 or self.y_start < 0:
            raise ValueError(f"tile start coordinates cannot be negative: {self}")
        if self.x_start > self.x_end:
            raise ValueError(f"tile x_start {self.x_start} is larger than x_end {self.x_end}")
        if self.y_start > self.y_end:
            raise ValueError(f"tile y_start {self.y_start} is larger than y_end {self.y_end}")

    @property
    def width(self) -> int:
        return self.x_end - self.x_start

    @property
    def height(self) -> int:
        return self.y_end - self.y_start

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x_start <= x < self.x_end and self.y_start <= y < self.y_end

    def overlaps(self, other: Tile) -> bool:
        """Return whether the two tiles share at least one pixel."""
        return (
            self.x_start < other.x_end
            and other.x_start < self.x_end
            and self.y_start < other.y_end
            and other.y_start < self.y_end
        )

    def pixels(self) -> Iterator[tuple[int, int]]:
        """Iterate over the ``(x, y)`` coordinates in raster order (rows first)."""
        for y in range(self.y_start, self.y_end):
            for x in range(self.x_start, self.x_end):
                yield x, y

    def subdivide(self, width: int, height: int) -> list[Tile]:
        """Split this tile into sub-tiles of at most ``width x height``.

        The sub-tiles are produced in raster order, stepping ``height``
        vertically and ``width`` horizontally from the tile's start; tiles on
        the right and bottom edges are clamped and may be smaller. The result
        covers this tile exactly, without overlap.

        Raises:
            ValueError: If ``width`` or ``height`` is not positive.
        """
        if width <= 0:
            raise ValueError(f"the width of a tile must be larger than zero, got {width}")
        if height <= 0:
            raise ValueError(f"the height of a tile must be larger than zero, got {height}")

        tiles = []
        for y in range(self.y_start, self.y_end, height):
            y_end = min(self.y_end, y + height)
            for x in range(self.x_start, self.x_end, width):
                tiles.append(Tile(x, y, min(self.x_end, x + width), y_end))
        return tiles
