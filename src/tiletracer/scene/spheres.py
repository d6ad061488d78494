"""Stock five-sphere test scene.

The scene places a large sphere straight ahead of the camera and four
smaller spheres behind it at the corners of a square:

- radius 5 at (0, 0, 10)
- radius 4 at (4, -4, 12), (-4, -4, 12), (4, 4, 12) and (-4, 4, 12)

The camera sits at the origin looking down +z with +y up and a 90 degree
field of view.

Example:
    >>> from tiletracer.scene.spheres import create_sphere_scene
    >>> scene = create_sphere_scene(320, 240)
"""

from dataclasses import dataclass

from tiletracer.camera.perspective import PerspectiveCamera
from tiletracer.core.vector import Point, Vector
from tiletracer.geometry.sphere import Sphere
from tiletracer.geometry.transform import translate
from tiletracer.scene.scene import Scene


@dataclass(frozen=True)
class SphereSceneParams:
    """Parameters of the stock sphere scene.

    Attributes:
        fov: Horizontal field of view in degrees.
        center_radius: Radius of the central sphere.
        corner_radius: Radius of the four corner spheres.
        corner_offset: Distance of the corner spheres from the view axis,
            along both x and y.
    """

    fov: float = 90.0
    center_radius: float = 5.0
    corner_radius: float = 4.0
    corner_offset: float = 4.0


def create_sphere_scene(
    width: int = 640,
    height: int = 640,
    params: SphereSceneParams | None = None,
) -> Scene:
    """Create the stock sphere scene at the given resolution."""
    if params is None:
        params = SphereSceneParams()

    camera = PerspectiveCamera(
        x_resolution=width,
        y_resolution=height,
        origin=Point(0.0, 0.0, 0.0),
        direction=Vector(0.0, 0.0, 1.0),
        up=Vector(0.0, 1.0, 0.0),
        fov=params.fov,
    )

    offset = params.corner_offset
    shapes = [
        Sphere(translate(0.0, 0.0, 10.0), params.center_radius),
        Sphere(translate(offset, -offset, 12.0), params.corner_radius),
        Sphere(translate(-offset, -offset, 12.0), params.corner_radius),
        Sphere(translate(offset, offset, 12.0), params.corner_radius),
        Sphere(translate(-offset, offset, 12.0), params.corner_radius),
    ]
    return Scene(camera=camera, x_resolution=width, y_resolution=height, shapes=shapes)
