"""Orthonormal bases built from one or two directions.

A basis ``(u, v, w)`` is a right-handed frame of mutually perpendicular unit
vectors with ``w x u == v``. Cameras use it as their view frame: ``w`` is the
viewing direction, ``u`` the image-plane right axis and ``v`` the image-plane
up axis.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tiletracer.core.vector import Vector

logger = logging.getLogger(__name__)

# |a . b| above 1 - COLLINEAR_EPSILON (for unit a, b) is reported as degenerate.
COLLINEAR_EPSILON = 1e-9


@dataclass(frozen=True)
class OrthonormalBasis:
    """Three mutually orthogonal unit vectors.

    Prefer the ``from_vector`` / ``from_vectors`` constructors, which
    guarantee orthonormality; the plain constructor stores its arguments as
    given.

    Attributes:
        u: First axis (image-plane right for cameras).
        v: Second axis, ``w x u``.
        w: Third axis, the direction the basis was built around.
    """

    u: Vector
    v: Vector
    w: Vector

    @classmethod
    def from_vector(cls, a: Vector) -> OrthonormalBasis:
        """Build a basis with ``w`` along ``a``.

        ``u`` is chosen in the plane spanned by ``w`` and the axis on which
        ``w`` has the smaller component, which keeps the normalization well
        away from zero for axis-aligned inputs.

        Raises:
            ValueError: If ``a`` has zero length.
        """
        w = a.normalize()
        if abs(w.x) > abs(w.y):
            inv_length = 1.0 / math.sqrt(w.x * w.x + w.z * w.z)
            u = Vector(-w.z * inv_length, 0.0, w.x * inv_length)
        else:
            inv_length = 1.0 / math.sqrt(w.y * w.y + w.z * w.z)
            u = Vector(0.0, w.z * inv_length, -w.y * inv_length)
        return cls(u, w.cross(u), w)

    @classmethod
    def from_vectors(cls, a: Vector, b: Vector) -> OrthonormalBasis:
        """Build a basis with ``w`` along ``a`` and ``v`` in the plane of ``a`` and ``b``.

        ``u = normalize(b x w)`` and ``v = w x u``. When ``a`` and ``b`` are
        nearly collinear a warning is logged and the result may be
        inaccurate; when they are exactly collinear the basis falls back to
        ``from_vector(a)``.

        Raises:
            ValueError: If ``a`` or ``b`` has zero length.
        """
        w = a.normalize()
        b_unit = b.normalize()
        if abs(w.dot(b_unit)) > 1.0 - COLLINEAR_EPSILON:
            logger.warning("basis vectors a=%s and b=%s are nearly collinear", a, b)

        cross = b.cross(w)
        if cross.length_squared() == 0.0:
            return cls.from_vector(a)
        u = cross.normalize()
        return cls(u, w.cross(u), w)

    def to_world(self, x: float, y: float, z: float) -> Vector:
        """Return ``x * u + y * v + z * w``."""
        u, v, w = self.u, self.v, self.w
        return Vector(
            x * u.x + y * v.x + z * w.x,
            x * u.y + y * v.y + z * w.y,
            x * u.z + y * v.z + z * w.z,
        )
