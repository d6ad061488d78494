"""Ray data structure.

A ray is an origin point and a direction vector. The direction is not
required to be unit length: camera rays are generated unnormalized and the
intersection tests only depend on the sign of the ray parameter.

Example:
    >>> from tiletracer.core.ray import Ray
    >>> from tiletracer.core.vector import Point, Vector
    >>> ray = Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, 1.0))
    >>> ray.at(5.0)  # Point 5 units along the ray
    Point(x=0.0, y=0.0, z=5.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from tiletracer.core.vector import Point, Vector


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. Need not be normalized.
    """

    origin: Point
    direction: Vector

    def __post_init__(self) -> None:
        if not isinstance(self.origin, Point):
            raise TypeError(f"ray origin must be a Point, got {type(self.origin).__name__}")
        if not isinstance(self.direction, Vector):
            raise TypeError(
                f"ray direction must be a Vector, got {type(self.direction).__name__}"
            )

    def at(self, t: float) -> Point:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point ``origin + t * direction``.
        """
        return self.origin + self.direction * t
