"""Immutable 4x4 matrices for affine geometry.

Matrices are stored as read-only ``float64`` NumPy arrays. Matrix-matrix
products, transposes and comparisons use NumPy; the per-ray hot path
(``transform_point`` / ``transform_vector``) uses the rows cached as plain
Python floats, which is considerably faster than NumPy for single 3-vectors.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np
import numpy.typing as npt

from tiletracer.core.vector import Point, Vector


class Matrix:
    """A 4x4 row-major matrix.

    Args:
        elements: Either 16 numbers in row-major order or a 4x4 array-like.

    Raises:
        ValueError: If the input does not describe a 4x4 matrix or contains
            non-finite values.
    """

    __slots__ = ("_array", "_rows")

    def __init__(self, elements: Iterable[float] | npt.ArrayLike) -> None:
        array = np.array(elements, dtype=np.float64)
        if array.shape == (16,):
            array = array.reshape(4, 4)
        if array.shape != (4, 4):
            raise ValueError(f"a matrix needs 16 elements or a 4x4 array, got shape {array.shape}")
        if not np.all(np.isfinite(array)):
            raise ValueError("matrix elements must be finite")
        array.flags.writeable = False
        self._array = array
        self._rows = tuple(tuple(float(value) for value in row) for row in array)

    @property
    def array(self) -> npt.NDArray[np.float64]:
        """The read-only 4x4 NumPy array backing this matrix."""
        return self._array

    def get(self, row: int, column: int) -> float:
        """Return the element at ``(row, column)``.

        Raises:
            IndexError: If either index is outside ``[0, 3]``.
        """
        if not (0 <= row < 4 and 0 <= column < 4):
            raise IndexError(f"matrix index ({row}, {column}) out of range")
        return self._rows[row][column]

    def is_identity(self) -> bool:
        return bool(np.array_equal(self._array, _IDENTITY_ARRAY))

    def __add__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(self._array + other._array)

    def __sub__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(self._array - other._array)

    def __mul__(self, scalar: float) -> Matrix:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Matrix(self._array * scalar)

    __rmul__ = __mul__

    def __matmul__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(self._array @ other._array)

    def multiply(self, other: Matrix) -> Matrix:
        """Return the matrix product ``self @ other``."""
        return self @ other

    def transpose(self) -> Matrix:
        return Matrix(self._array.T)

    def transform_point(self, point: Point) -> Point:
        """Transform a point, including translation and the homogeneous divide."""
        (r0, r1, r2, r3) = self._rows
        px, py, pz = point.x, point.y, point.z
        x = r0[0] * px + r0[1] * py + r0[2] * pz + r0[3]
        y = r1[0] * px + r1[1] * py + r1[2] * pz + r1[3]
        z = r2[0] * px + r2[1] * py + r2[2] * pz + r2[3]
        w = r3[0] * px + r3[1] * py + r3[2] * pz + r3[3]
        if w == 1.0:
            return Point(x, y, z)
        inv_w = 1.0 / w
        return Point(x * inv_w, y * inv_w, z * inv_w)

    def transform_vector(self, vector: Vector) -> Vector:
        """Transform a vector, ignoring the translation column."""
        (r0, r1, r2, _) = self._rows
        vx, vy, vz = vector.x, vector.y, vector.z
        return Vector(
            r0[0] * vx + r0[1] * vy + r0[2] * vz,
            r1[0] * vx + r1[1] * vy + r1[2] * vz,
            r2[0] * vx + r2[1] * vy + r2[2] * vz,
        )

    def allclose(self, other: Matrix, atol: float = 1e-9) -> bool:
        """Return whether every element is within ``atol`` of ``other``."""
        return bool(np.allclose(self._array, other._array, rtol=0.0, atol=atol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.array_equal(self._array, other._array))

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        rows = ", ".join("(" + ", ".join(_format(v) for v in row) + ")" for row in self._rows)
        return f"Matrix({rows})"


def _format(value: float) -> str:
    if math.isfinite(value) and value == int(value):
        return f"{int(value)}"
    return f"{value:g}"


_IDENTITY_ARRAY = np.eye(4, dtype=np.float64)

IDENTITY = Matrix(_IDENTITY_ARRAY)
