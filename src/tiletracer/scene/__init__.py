"""Scene module: what gets rendered.

Components:
    scene: Scene description (camera, resolution, ordered shapes)
    spheres: Stock five-sphere test scene
"""

from .scene import Scene
from .spheres import SphereSceneParams, create_sphere_scene

__all__ = [
    "Scene",
    "SphereSceneParams",
    "create_sphere_scene",
]
