"""Tests for the tile-parallel render scheduler.

Tests cover:
- Rendering a single sphere: hit pixels red, miss pixels black
- Determinism across renders and worker counts
- Render state transitions and progress reporting
- Failure isolation: a raising tile is logged and reported, not fatal
- Render settings validation
"""

import logging
import threading

import numpy as np
import pytest

from tiletracer.core.scheduler import (
    RenderIncompleteError,
    RenderState,
    TileRenderer,
    render,
)
from tiletracer.core.settings import RenderSettings
from tiletracer.core.vector import Point
from tiletracer.film.framebuffer import FrameBuffer
from tiletracer.film.spectrum import BLACK, RED, RGBSpectrum
from tiletracer.geometry.sphere import Sphere
from tiletracer.preview.progress import ProgressReporter
from tiletracer.preview.tonemap import to_rgba_buffer, to_rgba_image
from tiletracer.scene.scene import Scene
from tiletracer.scene.spheres import create_sphere_scene


class FailingShape:
    """Shape that raises for rays through the lower-left quadrant of the image."""

    def intersect(self, ray):
        if ray.direction.x < 0.0 and ray.direction.y < 0.0:
            raise RuntimeError("simulated intersection failure")
        return False


class RecordingListener:
    """Progress listener that records every notification."""

    def __init__(self):
        self.values = []
        self.finished_calls = 0
        self._lock = threading.Lock()

    def update(self, progress):
        with self._lock:
            self.values.append(progress)

    def finished(self):
        self.finished_calls += 1


class TestSingleSphere:
    """Tests rendering one sphere of radius 5 at distance 10 with a 90 degree camera."""

    def test_center_hit_corners_miss(self, single_sphere_scene, settings):
        """Test that the center pixel is red and the corner pixels are black."""
        report = TileRenderer(single_sphere_scene, settings).render()
        buffer = report.frame_buffer

        assert buffer.get_pixel(32, 32).spectrum == RED
        for x, y in [(0, 0), (63, 0), (0, 63), (63, 63)]:
            assert buffer.get_pixel(x, y).spectrum == BLACK

    def test_every_pixel_written_once(self, single_sphere_scene, settings):
        """Test that each pixel received exactly one sample."""
        report = TileRenderer(single_sphere_scene, settings).render()
        assert (report.frame_buffer.weights() == 1.0).all()
        assert report.completed_pixels == 64 * 64
        assert report.completed_tiles == len(report.tiles) == 16
        assert not report.degraded

    def test_snapshot_center_red_corners_black(self, single_sphere_scene, settings):
        """Test the tone-mapped snapshot of the render."""
        report = TileRenderer(single_sphere_scene, settings).render()
        image = to_rgba_image(report.frame_buffer)
        assert tuple(image[32, 32]) == (255, 0, 0, 255)
        assert tuple(image[0, 0]) == (0, 0, 0, 255)
        assert tuple(image[63, 63]) == (0, 0, 0, 255)

    def test_hit_region_is_a_disc(self, single_sphere_scene, settings):
        """Test that the red pixels form a disc of the expected apparent size."""
        report = TileRenderer(single_sphere_scene, settings).render()
        hits = report.frame_buffer.radiance()[..., 0] > 0.5
        # Angular radius asin(5 / 10) = 30 degrees -> tan(30) / tan(45) of the half width.
        expected = np.pi * (32 * np.tan(np.radians(30.0))) ** 2
        assert hits.sum() == pytest.approx(expected, rel=0.05)

    def test_custom_colors(self, single_sphere_scene):
        """Test that hit and miss colors come from the settings."""
        settings = RenderSettings(
            tile_width=32,
            tile_height=32,
            workers=2,
            hit_color=RGBSpectrum(0.0, 1.0, 0.0),
            miss_color=RGBSpectrum(0.0, 0.0, 0.5),
        )
        buffer = TileRenderer(single_sphere_scene, settings).render().frame_buffer
        assert buffer.get_pixel(32, 32).spectrum == RGBSpectrum(0.0, 1.0, 0.0)
        assert buffer.get_pixel(0, 0).spectrum == RGBSpectrum(0.0, 0.0, 0.5)

    def test_multiple_passes_average_to_same_color(self, camera, settings):
        """Test that extra accumulation passes do not change the result."""
        scene = Scene(
            camera=camera,
            x_resolution=64,
            y_resolution=64,
            shapes=[Sphere.at(Point(0.0, 0.0, 10.0), radius=5.0)],
            passes=3,
        )
        buffer = TileRenderer(scene, settings).render().frame_buffer
        assert buffer.get_pixel(32, 32).weight_sum == 3.0
        assert buffer.get_pixel(32, 32).spectrum == RED


class TestDeterminism:
    """Tests that tile scheduling does not affect the image."""

    def test_two_renders_are_identical(self):
        """Test that rendering the same scene twice gives identical bytes."""
        scene = create_sphere_scene(48, 40)
        settings = RenderSettings(tile_width=7, tile_height=9, workers=4)
        first = to_rgba_buffer(render(scene, settings).frame_buffer)
        second = to_rgba_buffer(render(scene, settings).frame_buffer)
        np.testing.assert_array_equal(first, second)

    @pytest.mark.parametrize("workers, tile_size", [(1, 64), (3, 5), (8, 1)])
    def test_independent_of_workers_and_tile_size(self, workers, tile_size):
        """Test that the image does not depend on the pool or tile size."""
        scene = create_sphere_scene(32, 24)
        reference = render(scene, RenderSettings(workers=1)).frame_buffer.radiance()
        settings = RenderSettings(tile_width=tile_size, tile_height=tile_size, workers=workers)
        np.testing.assert_array_equal(render(scene, settings).frame_buffer.radiance(), reference)


class TestRendererLifecycle:
    """Tests for render state and collaborators."""

    def test_state_transitions(self, single_sphere_scene, settings):
        """Test that a renderer starts idle and ends done."""
        renderer = TileRenderer(single_sphere_scene, settings)
        assert renderer.state is RenderState.IDLE
        renderer.render()
        assert renderer.state is RenderState.DONE

    def test_state_is_rendering_inside_tasks(self, single_sphere_scene, settings):
        """Test that tile listeners observe the rendering state."""
        seen = set()

        def listener(tile):
            seen.add(renderer.state)

        renderer = TileRenderer(single_sphere_scene, settings, tile_listener=listener)
        renderer.render()
        assert seen <= {RenderState.DISPATCHED, RenderState.RENDERING}

    def test_renderer_can_be_reused(self, single_sphere_scene, settings):
        """Test that a finished renderer can render again."""
        renderer = TileRenderer(single_sphere_scene, settings)
        first = renderer.render()
        second = renderer.render()
        assert second.completed_pixels == first.completed_pixels == 64 * 64
        assert renderer.completed_pixels == 64 * 64

    def test_accumulates_into_given_buffer(self, single_sphere_scene, settings):
        """Test rendering twice into the same buffer doubles the weights."""
        buffer = FrameBuffer(64, 64)
        renderer = TileRenderer(single_sphere_scene, settings)
        renderer.render(buffer)
        renderer.render(buffer)
        assert (buffer.weights() == 2.0).all()
        assert buffer.get_pixel(32, 32).spectrum == RED

    def test_mismatched_buffer_raises(self, single_sphere_scene, settings):
        """Test that a buffer of the wrong size is rejected."""
        with pytest.raises(ValueError, match="frame buffer"):
            TileRenderer(single_sphere_scene, settings).render(FrameBuffer(32, 64))

    def test_tile_listener_sees_every_tile(self, single_sphere_scene, settings):
        """Test that the tile listener is called once per tile."""
        finished = []
        lock = threading.Lock()

        def listener(tile):
            with lock:
                finished.append(tile)

        report = TileRenderer(single_sphere_scene, settings, tile_listener=listener).render()
        assert sorted(finished, key=lambda t: (t.y_start, t.x_start)) == report.tiles

    def test_progress_reaches_completion(self, single_sphere_scene, settings):
        """Test that the progress reporter counts every pixel and is finished."""
        listener = RecordingListener()
        progress = ProgressReporter("Rendering", total_work=64 * 64, quiet=True)
        progress.add_listener(listener)

        TileRenderer(single_sphere_scene, settings, progress=progress).render()

        assert progress.completed == 64 * 64
        assert progress.is_finished
        assert listener.finished_calls == 1
        assert max(listener.values) == 1.0


class TestFailureIsolation:
    """Tests that a failing tile does not abort the render."""

    @pytest.fixture
    def failing_scene(self, camera):
        """Scene whose first shape raises for the lower-left quadrant."""
        return Scene(
            camera=camera,
            x_resolution=64,
            y_resolution=64,
            shapes=[FailingShape(), Sphere.at(Point(0.0, 0.0, 10.0), radius=5.0)],
        )

    def test_failed_tiles_are_reported(self, failing_scene, settings):
        """Test that tiles touching the failing region are recorded as failures."""
        report = TileRenderer(failing_scene, settings).render()

        assert report.degraded
        assert len(report.failures) == 4
        for failure in report.failures:
            assert failure.tile.x_end <= 32 and failure.tile.y_end <= 32
            assert isinstance(failure.error, RuntimeError)
        assert report.completed_tiles == len(report.tiles) - 4
        assert report.completed_pixels == 64 * 64 - 32 * 32

    def test_other_tiles_still_render(self, failing_scene, settings):
        """Test that pixels outside the failed tiles are rendered normally."""
        buffer = TileRenderer(failing_scene, settings).render().frame_buffer
        assert buffer.get_pixel(40, 40).spectrum == RED
        assert buffer.get_pixel(63, 63).weight_sum == 1.0
        assert buffer.get_pixel(63, 0).weight_sum == 1.0

    def test_failure_is_logged(self, failing_scene, settings, caplog):
        """Test that each failure is logged with its tile and a warning summarizes them."""
        with caplog.at_level(logging.WARNING, logger="tiletracer.core.scheduler"):
            TileRenderer(failing_scene, settings).render()

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 4
        assert all(r.exc_info is not None for r in errors)
        assert "incomplete" in caplog.text

    def test_raise_for_failures(self, failing_scene, settings):
        """Test that raise_for_failures surfaces the failed tiles."""
        report = TileRenderer(failing_scene, settings).render()
        with pytest.raises(RenderIncompleteError, match="4 tile") as excinfo:
            report.raise_for_failures()
        assert excinfo.value.failures == report.failures

    def test_renderer_finishes_after_failures(self, failing_scene, settings):
        """Test that the renderer still reaches the done state."""
        renderer = TileRenderer(failing_scene, settings)
        renderer.render()
        assert renderer.state is RenderState.DONE

    def test_failing_listener_fails_only_its_tile(self, single_sphere_scene, settings):
        """Test that an exception from the tile listener is isolated like a render error."""
        def listener(tile):
            if tile.x_start == 0 and tile.y_start == 0:
                raise ValueError("listener failure")

        report = TileRenderer(single_sphere_scene, settings, tile_listener=listener).render()
        assert len(report.failures) == 1
        assert report.completed_tiles == len(report.tiles) - 1


class RaisingReporter(ProgressReporter):
    """Reporter whose notifications fail on demand."""

    def __init__(self, total_work, fail_update=False, fail_done=False):
        super().__init__("Rendering", total_work, quiet=True)
        self.fail_update = fail_update
        self.fail_done = fail_done

    def update(self, work):
        super().update(work)
        if self.fail_update:
            raise RuntimeError("progress display unavailable")

    def done(self):
        super().done()
        if self.fail_done:
            raise RuntimeError("preview window closed")


class TestProgressFailures:
    """Tests that a failing progress collaborator never degrades a render."""

    def test_update_failure_keeps_tiles_completed(self, single_sphere_scene, settings, caplog):
        """Test that tiles stay completed when the progress update raises."""
        progress = RaisingReporter(64 * 64, fail_update=True)
        with caplog.at_level(logging.ERROR, logger="tiletracer.core.scheduler"):
            report = TileRenderer(single_sphere_scene, settings, progress=progress).render()

        assert report.completed_tiles + len(report.failures) == len(report.tiles)
        assert report.completed_tiles == len(report.tiles)
        assert not report.degraded
        report.raise_for_failures()
        assert "progress update failed" in caplog.text

    def test_listener_failure_keeps_tiles_completed(self, single_sphere_scene, settings):
        """Test that a raising progress listener does not fail the tile."""

        class PartialListener:
            def update(self, progress):
                if progress < 1.0:
                    raise ValueError("listener failure")

            def finished(self):
                pass

        progress = ProgressReporter("Rendering", 64 * 64, quiet=True)
        progress.add_listener(PartialListener())
        report = TileRenderer(single_sphere_scene, settings, progress=progress).render()

        assert report.completed_tiles + len(report.failures) == len(report.tiles)
        assert not report.failures

    def test_done_failure_still_returns_report(self, single_sphere_scene, settings, caplog):
        """Test that a raising terminal signal is logged and the render completes."""
        progress = RaisingReporter(64 * 64, fail_done=True)
        renderer = TileRenderer(single_sphere_scene, settings, progress=progress)
        with caplog.at_level(logging.ERROR, logger="tiletracer.core.scheduler"):
            report = renderer.render()

        assert renderer.state is RenderState.DONE
        assert report.completed_pixels == 64 * 64
        assert report.frame_buffer.get_pixel(32, 32).spectrum == RED
        assert "failed to finish" in caplog.text

    def test_degraded_render_finishes_below_full_progress(self, camera, settings):
        """Test that progress reflects only the tiles that actually completed."""
        scene = Scene(
            camera=camera,
            x_resolution=64,
            y_resolution=64,
            shapes=[FailingShape()],
        )
        progress = ProgressReporter("Rendering", 64 * 64, quiet=True)
        TileRenderer(scene, settings, progress=progress).render()

        assert progress.is_finished
        assert progress.completed == 64 * 64 - 32 * 32


class TestRenderSettings:
    """Tests for render settings validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tile_width": 0},
            {"tile_height": -1},
            {"workers": 0},
            {"sensitivity": 0.0},
            {"gamma": float("nan")},
        ],
    )
    def test_invalid_settings_raise(self, kwargs):
        """Test that invalid settings are rejected at construction."""
        with pytest.raises(ValueError):
            RenderSettings(**kwargs)

    def test_default_worker_count(self):
        """Test that the default pool size is at least one."""
        assert RenderSettings().worker_count >= 1
        assert RenderSettings(workers=3).worker_count == 3
