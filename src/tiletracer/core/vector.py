"""Point and vector value types for the geometry kernel.

Points and vectors are kept as distinct types: a point has an absolute
position, a vector only a direction and magnitude. The arithmetic operators
only allow the combinations that make geometric sense:

    point + vector -> point
    point - point  -> vector
    point - vector -> point
    vector +/- vector -> vector

Example:
    >>> from tiletracer.core.vector import Point, Vector
    >>> p = Point(0.0, 0.0, -5.0)
    >>> d = Point(0.0, 0.0, 0.0) - p
    >>> d.normalize()
    Vector(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _component(obj: Vector | Point, axis: int) -> float:
    if axis == 0:
        return obj.x
    if axis == 1:
        return obj.y
    if axis == 2:
        return obj.z
    raise IndexError(f"axis must be 0, 1 or 2, got {axis}")


@dataclass(frozen=True)
class Vector:
    """A direction in 3D space.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def get(self, axis: int) -> float:
        """Return the component along the given axis (0, 1 or 2)."""
        return _component(self, axis)

    def __add__(self, other: object) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vector:
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        inv = 1.0 / divisor
        return Vector(self.x * inv, self.y * inv, self.z * inv)

    def scale(self, scalar: float) -> Vector:
        """Return this vector scaled by the given scalar."""
        return self * scalar

    def dot(self, other: Vector) -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        """Return the cross product ``self x other``."""
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        """Return the squared Euclidean length."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector:
        """Return a unit vector in the same direction.

        Raises:
            ValueError: If the vector has zero length.
        """
        length = self.length()
        if length == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / length

    def to_point(self) -> Point:
        """Interpret this vector as an offset from the origin."""
        return Point(self.x, self.y, self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Point:
    """A position in 3D space.

    Attributes:
        x: The x coordinate.
        y: The y coordinate.
        z: The z coordinate.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def get(self, axis: int) -> float:
        """Return the coordinate along the given axis (0, 1 or 2)."""
        return _component(self, axis)

    def __add__(self, other: object) -> Point:
        if not isinstance(other, Vector):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vector | Point:
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def scale(self, scalar: float) -> Point:
        """Return this point with every coordinate scaled by ``scalar``."""
        return Point(self.x * scalar, self.y * scalar, self.z * scalar)

    def to_vector(self) -> Vector:
        """Return the vector from the origin to this point."""
        return Vector(self.x, self.y, self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Point(0.0, 0.0, 0.0)
