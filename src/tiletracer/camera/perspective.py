"""Perspective camera model for primary ray generation.

The camera places a virtual image plane at unit distance along its viewing
direction. The plane is ``2 * tan(fov / 2)`` wide and ``width * H / W`` high,
so the field of view is the horizontal one.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: the viewing direction
- u: image-plane right (increasing sample x)
- v: image-plane up (increasing sample y)

A sample ``(sx, sy)`` in pixel units maps to

    u_coord = (sx / W - 0.5) * plane_width
    v_coord = (sy / H - 0.5) * plane_height
    direction = w + u_coord * u + v_coord * v

The direction is not normalized.

Because w points along the view direction and the basis is right-handed
(``v = w x u``), u is ``normalize(up x w)``. For a camera looking down +z with
+y up, u is world +x: objects at positive x appear in the right half of the
image. A frame built around ``-direction`` with rays ``u + v - w`` would
mirror the image left to right.

Example:
    >>> from tiletracer.camera.perspective import PerspectiveCamera
    >>> from tiletracer.core.sample import Sample
    >>> from tiletracer.core.vector import Point, Vector
    >>>
    >>> camera = PerspectiveCamera(
    ...     x_resolution=640,
    ...     y_resolution=480,
    ...     origin=Point(0.0, 0.0, 0.0),
    ...     direction=Vector(0.0, 0.0, 1.0),
    ...     up=Vector(0.0, 1.0, 0.0),
    ...     fov=90.0,
    ... )
    >>> ray = camera.generate_ray(Sample(320.0, 240.0))  # Ray through image center
"""

from __future__ import annotations

import math
from typing import Protocol

from tiletracer.core.ray import Ray
from tiletracer.core.sample import Sample
from tiletracer.core.vector import Point, Vector
from tiletracer.geometry.basis import OrthonormalBasis


class Camera(Protocol):
    """Maps image-space samples to world-space rays."""

    def generate_ray(self, sample: Sample) -> Ray: ...


class PerspectiveCamera:
    """A pinhole camera producing perfect perspective projection.

    Args:
        x_resolution: Image width in pixels (at least 1).
        y_resolution: Image height in pixels (at least 1).
        origin: Camera position in world space.
        direction: Viewing direction; need not be normalized.
        up: Approximate up direction used to orient the image plane.
        fov: Horizontal field of view in degrees, in the open range (0, 180).

    Raises:
        ValueError: If a resolution is smaller than one, the field of view is
            outside (0, 180) degrees, or ``direction``/``up`` has zero length.
    """

    def __init__(
        self,
        x_resolution: int,
        y_resolution: int,
        origin: Point,
        direction: Vector,
        up: Vector,
        fov: float,
    ) -> None:
        if x_resolution < 1:
            raise ValueError(f"the horizontal resolution cannot be smaller than one, got {x_resolution}")
        if y_resolution < 1:
            raise ValueError(f"the vertical resolution cannot be smaller than one, got {y_resolution}")
        if not math.isfinite(fov) or fov <= 0.0:
            raise ValueError(f"the field of view must be larger than zero degrees, got {fov}")
        if fov >= 180.0:
            raise ValueError(f"the field of view must be smaller than 180 degrees, got {fov}")

        self._x_resolution = int(x_resolution)
        self._y_resolution = int(y_resolution)
        self._origin = origin
        self._fov = float(fov)
        self._basis = OrthonormalBasis.from_vectors(direction, up)

        self._inv_x_resolution = 1.0 / self._x_resolution
        self._inv_y_resolution = 1.0 / self._y_resolution
        self._plane_width = 2.0 * math.tan(0.5 * math.radians(self._fov))
        self._plane_height = self._plane_width * self._y_resolution * self._inv_x_resolution

    @classmethod
    def look_at(
        cls,
        x_resolution: int,
        y_resolution: int,
        origin: Point,
        destination: Point,
        up: Vector,
        fov: float,
    ) -> PerspectiveCamera:
        """Create a camera at ``origin`` looking toward ``destination``.

        Raises:
            ValueError: If ``destination`` equals ``origin``, or for any of the
                reasons the main constructor raises.
        """
        return cls(x_resolution, y_resolution, origin, destination - origin, up, fov)

    @property
    def x_resolution(self) -> int:
        return self._x_resolution

    @property
    def y_resolution(self) -> int:
        return self._y_resolution

    @property
    def origin(self) -> Point:
        return self._origin

    @property
    def basis(self) -> OrthonormalBasis:
        return self._basis

    @property
    def fov(self) -> float:
        return self._fov

    @property
    def plane_width(self) -> float:
        return self._plane_width

    @property
    def plane_height(self) -> float:
        return self._plane_height

    def generate_ray(self, sample: Sample) -> Ray:
        """Generate the primary ray through an image-space sample.

        Args:
            sample: Position on the image plane in pixel units; the pixel
                ``(x, y)`` is centered on ``(x + 0.5, y + 0.5)``.

        Returns:
            A ray from the camera origin through the sample. The direction is
            not normalized.
        """
        u = self._plane_width * (sample.x * self._inv_x_resolution - 0.5)
        v = self._plane_height * (sample.y * self._inv_y_resolution - 0.5)
        return Ray(self._origin, self._basis.to_world(u, v, 1.0))

    def __repr__(self) -> str:
        return (
            f"PerspectiveCamera({self._x_resolution}x{self._y_resolution}, "
            f"origin={self._origin.as_tuple()}, w={self._basis.w.as_tuple()}, fov={self._fov})"
        )
