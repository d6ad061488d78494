"""Image-space samples."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """A continuous position on the image plane, in pixel units.

    The pixel ``(x, y)`` covers ``[x, x + 1) x [y, y + 1)``; its center is
    ``Sample(x + 0.5, y + 0.5)``.
    """

    x: float
    y: float

    @classmethod
    def pixel_center(cls, x: int, y: int) -> "Sample":
        """Return the sample at the center of pixel ``(x, y)``."""
        return cls(x + 0.5, y + 0.5)
