"""The intersection contract shared by all shapes."""

from typing import Protocol, runtime_checkable

from tiletracer.core.ray import Ray


@runtime_checkable
class Shape(Protocol):
    """Anything a ray can be tested against."""

    def intersect(self, ray: Ray) -> bool:
        """Return whether the ray hits this shape."""
        ...
