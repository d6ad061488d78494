"""Pytest configuration for tiletracer tests.

This module provides shared fixtures for all test modules: small scenes,
cameras and frame buffers that are cheap enough to render in every test.
"""

import pytest

from tiletracer.camera.perspective import PerspectiveCamera
from tiletracer.core.settings import RenderSettings
from tiletracer.core.vector import Point, Vector
from tiletracer.film.framebuffer import FrameBuffer
from tiletracer.geometry.sphere import Sphere
from tiletracer.scene.scene import Scene


def _camera(width=64, height=64, fov=90.0):
    return PerspectiveCamera(
        x_resolution=width,
        y_resolution=height,
        origin=Point(0.0, 0.0, 0.0),
        direction=Vector(0.0, 0.0, 1.0),
        up=Vector(0.0, 1.0, 0.0),
        fov=fov,
    )


@pytest.fixture
def make_camera():
    """Factory for cameras at the origin looking down +z with +y up."""
    return _camera


@pytest.fixture
def camera():
    """64x64 camera with a 90 degree field of view."""
    return _camera()


@pytest.fixture
def single_sphere_scene(camera):
    """One sphere of radius 5 at (0, 0, 10) in front of a 64x64 camera."""
    return Scene(
        camera=camera,
        x_resolution=64,
        y_resolution=64,
        shapes=[Sphere.at(Point(0.0, 0.0, 10.0), radius=5.0)],
    )


@pytest.fixture
def settings():
    """Small tiles on a few workers so every render uses many tasks."""
    return RenderSettings(tile_width=16, tile_height=16, workers=4)


@pytest.fixture
def frame_buffer():
    """Empty 8x6 frame buffer."""
    return FrameBuffer(8, 6)
