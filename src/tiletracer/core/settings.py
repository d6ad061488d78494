"""Render configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tiletracer.film.spectrum import BLACK, RED, RGBSpectrum
from tiletracer.preview.tonemap import validate_tone_map

DEFAULT_TILE_SIZE = 32


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of a tile render.

    Attributes:
        tile_width: Preferred tile width in pixels; edge tiles may be narrower.
        tile_height: Preferred tile height in pixels; edge tiles may be shorter.
        workers: Size of the worker pool. ``None`` uses the logical core count.
        hit_color: Radiance added to a pixel whose ray hits a shape.
        miss_color: Radiance added to a pixel whose ray hits nothing.
        sensitivity: Tone-mapping sensitivity for snapshots and export.
        gamma: Tone-mapping gamma for snapshots and export.

    Example:
        >>> settings = RenderSettings(tile_width=16, tile_height=16, workers=4)
        >>> settings.worker_count
        4

    Raises:
        ValueError: If a tile dimension or the worker count is not positive,
            or the tone-mapping parameters are invalid.
    """

    tile_width: int = DEFAULT_TILE_SIZE
    tile_height: int = DEFAULT_TILE_SIZE
    workers: int | None = None
    hit_color: RGBSpectrum = RED
    miss_color: RGBSpectrum = BLACK
    sensitivity: float = 1.0
    gamma: float = 1.0

    def __post_init__(self) -> None:
        if self.tile_width <= 0:
            raise ValueError(f"the tile width must be larger than zero, got {self.tile_width}")
        if self.tile_height <= 0:
            raise ValueError(f"the tile height must be larger than zero, got {self.tile_height}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"the worker count must be at least one, got {self.workers}")
        validate_tone_map(self.sensitivity, self.gamma)

    @property
    def worker_count(self) -> int:
        """The effective pool size."""
        if self.workers is not None:
            return self.workers
        return os.cpu_count() or 1
