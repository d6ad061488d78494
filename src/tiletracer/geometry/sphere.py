"""Sphere primitive with robust ray-sphere intersection.

A sphere is stored in object space, centered at the origin, and placed in
the world by an affine transform. Rays are moved into object space with the
transform's cached inverse before the quadratic is solved.

The roots are extracted with the numerically stable formulation

    q  = -0.5 * (b + sign(b) * sqrt(b^2 - 4ac))
    t0 = q / a
    t1 = c / q

which avoids the catastrophic cancellation of the textbook formula when
``b^2`` is nearly equal to ``4ac``.

The test reports a hit when either root is non-negative. There is no
minimum-distance epsilon and no maximum distance: a ray whose origin lies
exactly on the surface, or whose sphere is entirely behind the origin but
still has a root at zero, counts as a hit.

Example:
    >>> from tiletracer.geometry.sphere import Sphere
    >>> from tiletracer.core.ray import Ray
    >>> from tiletracer.core.vector import Point, Vector
    >>> sphere = Sphere.at(Point(0.0, 0.0, 10.0), radius=5.0)
    >>> sphere.intersect(Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, 1.0)))
    True
"""

from __future__ import annotations

import math

from tiletracer.core.ray import Ray
from tiletracer.core.vector import Point
from tiletracer.geometry.transform import IDENTITY, Transform, translate


class Sphere:
    """A sphere of the given radius centered at the origin of its own frame.

    Args:
        transform: Object-to-world transform placing the sphere in the scene.
        radius: Radius in object space (default 1.0).

    Raises:
        ValueError: If the radius is negative or not finite.
    """

    __slots__ = ("_transform", "_radius", "_radius_squared")

    def __init__(self, transform: Transform = IDENTITY, radius: float = 1.0) -> None:
        if not math.isfinite(radius):
            raise ValueError(f"sphere radius must be finite, got {radius}")
        if radius < 0.0:
            raise ValueError(f"sphere radius cannot be negative, got {radius}")
        self._transform = transform
        self._radius = float(radius)
        self._radius_squared = self._radius * self._radius

    @classmethod
    def at(cls, center: Point, radius: float = 1.0) -> Sphere:
        """Create a sphere translated to ``center``."""
        return cls(translate(center.x, center.y, center.z), radius)

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def radius(self) -> float:
        return self._radius

    def intersect(self, ray: Ray) -> bool:
        """Test whether the ray hits this sphere.

        Args:
            ray: The world-space ray. The direction need not be normalized.

        Returns:
            True if either root of the ray-sphere quadratic is non-negative.
            A zero-length direction never hits.
        """
        local = self._transform.inverse_transform_ray(ray)
        o = local.origin
        d = local.direction

        a = d.x * d.x + d.y * d.y + d.z * d.z
        if a == 0.0:
            return False
        b = 2.0 * (d.x * o.x + d.y * o.y + d.z * o.z)
        c = o.x * o.x + o.y * o.y + o.z * o.z - self._radius_squared

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return False

        sqrt_d = math.sqrt(discriminant)
        q = -0.5 * (b - sqrt_d) if b < 0.0 else -0.5 * (b + sqrt_d)

        if q / a >= 0.0:
            return True
        # q == 0 only when b == 0 and c == 0, where t0 == 0 already hit above.
        return c / q >= 0.0

    def __repr__(self) -> str:
        center = self._transform.transform_point(Point(0.0, 0.0, 0.0))
        return f"Sphere(center={center.as_tuple()}, radius={self._radius})"
