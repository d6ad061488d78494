"""Core rendering module.

This module contains the fundamental building blocks of the renderer:

Components:
    vector: Point and vector value types
    ray: Ray data structure
    sample: Image-space sample positions
    settings: Render configuration (tile size, pool size, colors, tone mapping)
    scheduler: Tile-parallel render scheduler and render reports

The scheduler fans out one task per tile to a thread pool and joins every
task before the frame buffer is read.
"""

from .ray import Ray
from .sample import Sample
from .vector import ORIGIN, Point, Vector

# Note: settings and scheduler are NOT imported here to avoid circular imports
# (the scheduler depends on scene, which depends on camera and geometry, which
# import from this package). Import them directly when needed:
#
#   from tiletracer.core.scheduler import TileRenderer

__all__ = [
    "ORIGIN",
    "Point",
    "Ray",
    "Sample",
    "Vector",
]
