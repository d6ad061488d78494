"""Affine transforms paired with their exact inverses.

Every constructor in this module builds the forward matrix together with its
analytic inverse, so no general matrix inversion is ever performed:

- translation: negated offsets
- scale: reciprocal factors
- rotation: the transpose, since rotation matrices are orthonormal

Composition keeps the pair consistent: ``compose(a, b)`` applies ``b`` first
and then ``a``; its forward matrix is ``a.matrix @ b.matrix`` and its inverse
is ``b.inverse @ a.inverse``.

Example:
    >>> from tiletracer.core.vector import Point
    >>> from tiletracer.geometry.transform import compose, rotate_y, translate
    >>> p = Point(1.0, 2.0, 3.0)
    >>> t = compose(translate(0, 0, 10), rotate_y(45))
    >>> t.inverse_transform_point(t.transform_point(p))  # == p
"""

from __future__ import annotations

import math
from functools import reduce

from tiletracer.core.ray import Ray
from tiletracer.core.vector import Point, Vector
from tiletracer.geometry.matrix import IDENTITY as IDENTITY_MATRIX
from tiletracer.geometry.matrix import Matrix


class Transform:
    """An immutable affine transform with a cached inverse.

    Args:
        matrix: The forward transformation matrix.
        inverse: The inverse of ``matrix``. The caller is responsible for the
            pair being consistent; use the module constructors where possible.
    """

    __slots__ = ("_matrix", "_inverse")

    def __init__(self, matrix: Matrix, inverse: Matrix) -> None:
        self._matrix = matrix
        self._inverse = inverse

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    def invert(self) -> Transform:
        """Return the inverse transform (forward and inverse swapped)."""
        return Transform(self._inverse, self._matrix)

    def append(self, other: Transform) -> Transform:
        """Return ``compose(self, other)``: ``other`` is applied first."""
        return Transform(self._matrix @ other._matrix, other._inverse @ self._inverse)

    def is_identity(self) -> bool:
        return self._matrix.is_identity()

    def transform_point(self, point: Point) -> Point:
        return self._matrix.transform_point(point)

    def transform_vector(self, vector: Vector) -> Vector:
        return self._matrix.transform_vector(vector)

    def transform_ray(self, ray: Ray) -> Ray:
        """Transform a ray's origin and direction independently."""
        return Ray(
            self._matrix.transform_point(ray.origin),
            self._matrix.transform_vector(ray.direction),
        )

    def inverse_transform_point(self, point: Point) -> Point:
        return self._inverse.transform_point(point)

    def inverse_transform_vector(self, vector: Vector) -> Vector:
        return self._inverse.transform_vector(vector)

    def inverse_transform_ray(self, ray: Ray) -> Ray:
        return Ray(
            self._inverse.transform_point(ray.origin),
            self._inverse.transform_vector(ray.direction),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self._matrix == other._matrix

    def __hash__(self) -> int:
        return hash(self._matrix)

    def __repr__(self) -> str:
        return f"Transform({self._matrix!r})"


IDENTITY = Transform(IDENTITY_MATRIX, IDENTITY_MATRIX)


def compose(*transforms: Transform) -> Transform:
    """Compose transforms so the rightmost one is applied first.

    ``compose(a, b).transform_point(p) == a.transform_point(b.transform_point(p))``.
    With no arguments the identity is returned.
    """
    return reduce(Transform.append, transforms, IDENTITY)


def translate(x: float, y: float, z: float) -> Transform:
    """Create a translation by ``(x, y, z)``."""
    # fmt: off
    matrix = Matrix((
        1.0, 0.0, 0.0, x,
        0.0, 1.0, 0.0, y,
        0.0, 0.0, 1.0, z,
        0.0, 0.0, 0.0, 1.0,
    ))
    inverse = Matrix((
        1.0, 0.0, 0.0, -x,
        0.0, 1.0, 0.0, -y,
        0.0, 0.0, 1.0, -z,
        0.0, 0.0, 0.0, 1.0,
    ))
    # fmt: on
    return Transform(matrix, inverse)


def scale(x: float, y: float, z: float) -> Transform:
    """Create a scale by factors ``(x, y, z)``.

    Raises:
        ValueError: If any factor is zero, since the transform would not be
            invertible.
    """
    if x == 0.0 or y == 0.0 or z == 0.0:
        raise ValueError(f"scale factors must be non-zero, got ({x}, {y}, {z})")
    # fmt: off
    matrix = Matrix((
        x,   0.0, 0.0, 0.0,
        0.0, y,   0.0, 0.0,
        0.0, 0.0, z,   0.0,
        0.0, 0.0, 0.0, 1.0,
    ))
    inverse = Matrix((
        1.0 / x, 0.0,     0.0,     0.0,
        0.0,     1.0 / y, 0.0,     0.0,
        0.0,     0.0,     1.0 / z, 0.0,
        0.0,     0.0,     0.0,     1.0,
    ))
    # fmt: on
    return Transform(matrix, inverse)


def _rotation(matrix: Matrix) -> Transform:
    return Transform(matrix, matrix.transpose())


def rotate_x(angle: float) -> Transform:
    """Create a rotation of ``angle`` degrees around the x axis."""
    rad = math.radians(angle)
    sin, cos = math.sin(rad), math.cos(rad)
    # fmt: off
    return _rotation(Matrix((
        1.0, 0.0, 0.0,  0.0,
        0.0, cos, -sin, 0.0,
        0.0, sin, cos,  0.0,
        0.0, 0.0, 0.0,  1.0,
    )))
    # fmt: on


def rotate_y(angle: float) -> Transform:
    """Create a rotation of ``angle`` degrees around the y axis."""
    rad = math.radians(angle)
    sin, cos = math.sin(rad), math.cos(rad)
    # fmt: off
    return _rotation(Matrix((
        cos,  0.0, sin, 0.0,
        0.0,  1.0, 0.0, 0.0,
        -sin, 0.0, cos, 0.0,
        0.0,  0.0, 0.0, 1.0,
    )))
    # fmt: on


def rotate_z(angle: float) -> Transform:
    """Create a rotation of ``angle`` degrees around the z axis."""
    rad = math.radians(angle)
    sin, cos = math.sin(rad), math.cos(rad)
    # fmt: off
    return _rotation(Matrix((
        cos, -sin, 0.0, 0.0,
        sin, cos,  0.0, 0.0,
        0.0, 0.0,  1.0, 0.0,
        0.0, 0.0,  0.0, 1.0,
    )))
    # fmt: on


def rotate(axis: Vector, angle: float) -> Transform:
    """Create a rotation of ``angle`` degrees around an arbitrary axis.

    Args:
        axis: The rotation axis; need not be normalized.
        angle: The rotation angle in degrees (counter-clockwise looking down
            the axis toward the origin).

    Raises:
        ValueError: If the axis has zero length.
    """
    length = axis.length()
    if length == 0.0:
        raise ValueError("the rotation axis is degenerate (length is zero)")
    n = axis / length

    rad = math.radians(angle)
    sin, cos = math.sin(rad), math.cos(rad)
    ncos = 1.0 - cos

    # fmt: off
    return _rotation(Matrix((
        n.x * n.x * ncos + cos,
        n.y * n.x * ncos - n.z * sin,
        n.z * n.x * ncos + n.y * sin,
        0.0,

        n.x * n.y * ncos + n.z * sin,
        n.y * n.y * ncos + cos,
        n.z * n.y * ncos - n.x * sin,
        0.0,

        n.x * n.z * ncos - n.y * sin,
        n.y * n.z * ncos + n.x * sin,
        n.z * n.z * ncos + cos,
        0.0,

        0.0, 0.0, 0.0, 1.0,
    )))
    # fmt: on
