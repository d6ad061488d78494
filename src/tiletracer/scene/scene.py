"""Scene description consumed by the tile renderer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tiletracer.camera.perspective import Camera
from tiletracer.core.ray import Ray
from tiletracer.geometry.shape import Shape


@dataclass(frozen=True)
class Scene:
    """An ordered list of shapes seen through one camera.

    Attributes:
        camera: Camera generating the primary rays. If it exposes
            ``x_resolution`` and ``y_resolution`` they must match the scene.
        x_resolution: Output image width in pixels.
        y_resolution: Output image height in pixels.
        shapes: Shapes tested in list order; the first hit wins.
        passes: Number of accumulation passes per pixel. Every pass samples
            the pixel center, so extra passes do not change the result.

    Raises:
        ValueError: If a resolution or the pass count is smaller than one, or
            the camera resolution differs from the scene resolution.
    """

    camera: Camera
    x_resolution: int
    y_resolution: int
    shapes: Sequence[Shape] = field(default_factory=tuple)
    passes: int = 1

    def __post_init__(self) -> None:
        if self.x_resolution < 1 or self.y_resolution < 1:
            raise ValueError(
                f"scene resolution must be at least 1x1, got {self.x_resolution}x{self.y_resolution}"
            )
        if self.passes < 1:
            raise ValueError(f"the number of passes must be at least one, got {self.passes}")
        camera_resolution = (
            getattr(self.camera, "x_resolution", self.x_resolution),
            getattr(self.camera, "y_resolution", self.y_resolution),
        )
        if camera_resolution != (self.x_resolution, self.y_resolution):
            raise ValueError(
                f"camera resolution {camera_resolution[0]}x{camera_resolution[1]} does not match "
                f"the scene resolution {self.x_resolution}x{self.y_resolution}"
            )
        object.__setattr__(self, "shapes", tuple(self.shapes))

    def intersect(self, ray: Ray) -> bool:
        """Return whether the ray hits any shape, stopping at the first hit."""
        for shape in self.shapes:
            if shape.intersect(ray):
                return True
        return False
