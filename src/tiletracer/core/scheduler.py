"""Tile-parallel render scheduler.

The scheduler renders a scene into a frame buffer by fanning out one task
per tile to a fixed-size thread pool and joining all of them before the
buffer is read. Each render walks through the states

    IDLE -> DISPATCHED -> RENDERING -> JOINED -> DONE

Tiles come from ``FrameBuffer.subdivide`` and never overlap, so tasks write
disjoint pixels and the buffer needs no per-pixel locking. The only shared
mutable state is the completed-work counter, which is updated under a lock
as tasks finish.

A task that raises only loses its own tile: the failure is logged and
recorded in the ``RenderReport`` while the remaining tasks run to
completion. The affected pixels stay black or partially accumulated, and
the report is flagged as degraded.

Example:
    >>> from tiletracer.core.scheduler import TileRenderer
    >>> from tiletracer.core.settings import RenderSettings
    >>> from tiletracer.preview.tonemap import to_rgba_buffer
    >>> from tiletracer.scene.spheres import create_sphere_scene
    >>>
    >>> scene = create_sphere_scene(256, 256)
    >>> renderer = TileRenderer(scene, RenderSettings(tile_width=32, tile_height=32))
    >>> report = renderer.render()
    >>> report.raise_for_failures()
    >>> rgba = to_rgba_buffer(report.frame_buffer)
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from tiletracer.core.sample import Sample
from tiletracer.core.settings import RenderSettings
from tiletracer.film.framebuffer import FrameBuffer
from tiletracer.film.tile import Tile
from tiletracer.preview.progress import ProgressReporter
from tiletracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Called from worker threads with each tile as soon as it is finished.
TileListener = Callable[[Tile], None]


class RenderState(enum.Enum):
    """Lifecycle of a single render."""

    IDLE = "idle"
    DISPATCHED = "dispatched"
    RENDERING = "rendering"
    JOINED = "joined"
    DONE = "done"


class RenderIncompleteError(RuntimeError):
    """Raised by ``RenderReport.raise_for_failures`` when tiles failed."""

    def __init__(self, failures: list[TileFailure]) -> None:
        self.failures = failures
        tiles = ", ".join(_describe(failure.tile) for failure in failures)
        super().__init__(f"{len(failures)} tile(s) failed to render: {tiles}")


@dataclass(frozen=True)
class TileFailure:
    """A tile whose task raised, with the exception it raised."""

    tile: Tile
    error: BaseException


@dataclass
class RenderReport:
    """Outcome of one render.

    Attributes:
        frame_buffer: The buffer that was rendered into.
        tiles: All tiles that were dispatched, in raster order.
        completed_tiles: Number of tiles that finished successfully.
        completed_pixels: Number of pixels in successfully finished tiles.
        failures: Tiles whose task raised.
        elapsed: Wall-clock seconds from dispatch to join.
    """

    frame_buffer: FrameBuffer
    tiles: list[Tile]
    completed_tiles: int
    completed_pixels: int
    failures: list[TileFailure] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def degraded(self) -> bool:
        """True when some tiles failed and the image is incomplete."""
        return bool(self.failures)

    def raise_for_failures(self) -> None:
        """Raise ``RenderIncompleteError`` if any tile failed."""
        if self.failures:
            raise RenderIncompleteError(self.failures)


def _describe(tile: Tile) -> str:
    return f"[{tile.x_start}, {tile.x_end}) x [{tile.y_start}, {tile.y_end})"


class TileRenderer:
    """Renders a scene tile by tile on a worker pool.

    Args:
        scene: The scene to render.
        settings: Tile size, pool size and colors. Defaults to ``RenderSettings()``.
        progress: Optional progress collaborator; receives the pixel count of
            every finished tile and a final ``done()``. Exceptions it raises
            are logged and do not affect the report.
        tile_listener: Optional callback receiving every finished tile, for
            example to tone map it into a preview. Called on worker threads.
    """

    def __init__(
        self,
        scene: Scene,
        settings: RenderSettings | None = None,
        progress: ProgressReporter | None = None,
        tile_listener: TileListener | None = None,
    ) -> None:
        self._scene = scene
        self._settings = settings if settings is not None else RenderSettings()
        self._progress = progress
        self._tile_listener = tile_listener

        self._lock = threading.Lock()
        self._state = RenderState.IDLE
        self._completed_tiles = 0
        self._completed_pixels = 0

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def state(self) -> RenderState:
        with self._lock:
            return self._state

    @property
    def completed_pixels(self) -> int:
        """Pixels finished so far in the current or last render."""
        with self._lock:
            return self._completed_pixels

    def _set_state(self, state: RenderState) -> None:
        with self._lock:
            self._state = state
        logger.debug("render state -> %s", state.value)

    def render(self, frame_buffer: FrameBuffer | None = None) -> RenderReport:
        """Render the scene and block until every tile task has finished.

        Args:
            frame_buffer: Buffer to accumulate into. A new black buffer of the
                scene's resolution is created when omitted.

        Returns:
            The render report. Check ``degraded`` or call
            ``raise_for_failures()`` before trusting the image.

        Raises:
            ValueError: If the buffer size does not match the scene.
            RuntimeError: If this renderer is already rendering.
        """
        scene = self._scene
        if frame_buffer is None:
            frame_buffer = FrameBuffer(scene.x_resolution, scene.y_resolution)
        elif (frame_buffer.x_resolution, frame_buffer.y_resolution) != (
            scene.x_resolution,
            scene.y_resolution,
        ):
            raise ValueError(
                f"frame buffer is {frame_buffer.x_resolution}x{frame_buffer.y_resolution} "
                f"but the scene is {scene.x_resolution}x{scene.y_resolution}"
            )

        settings = self._settings
        tiles = frame_buffer.subdivide(settings.tile_width, settings.tile_height)
        workers = settings.worker_count

        with self._lock:
            if self._state in (RenderState.DISPATCHED, RenderState.RENDERING):
                raise RuntimeError("a render is already in progress")
            self._state = RenderState.DISPATCHED
            self._completed_tiles = 0
            self._completed_pixels = 0

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tile") as executor:
            futures: list[tuple[Tile, Future[None]]] = [
                (tile, executor.submit(self._run_tile, frame_buffer, tile)) for tile in tiles
            ]
            logger.debug("dispatched %d tiles to %d workers", len(tiles), workers)

            self._set_state(RenderState.RENDERING)
            wait([future for _, future in futures])
        self._set_state(RenderState.JOINED)
        elapsed = time.perf_counter() - start

        failures = []
        for tile, future in futures:
            error = future.exception()
            if error is not None:
                logger.error("tile %s failed", _describe(tile), exc_info=error)
                failures.append(TileFailure(tile, error))

        with self._lock:
            report = RenderReport(
                frame_buffer=frame_buffer,
                tiles=tiles,
                completed_tiles=self._completed_tiles,
                completed_pixels=self._completed_pixels,
                failures=failures,
                elapsed=elapsed,
            )

        try:
            if self._progress is not None:
                self._progress.done()
        except Exception:
            logger.exception("progress reporter failed to finish")
        finally:
            self._set_state(RenderState.DONE)

        if failures:
            logger.warning(
                "render finished with %d of %d tiles failed; output is incomplete",
                len(failures),
                len(tiles),
            )
        else:
            logger.info(
                "rendered %dx%d in %d tiles on %d workers (%.2fs)",
                frame_buffer.x_resolution,
                frame_buffer.y_resolution,
                len(tiles),
                workers,
                elapsed,
            )
        return report

    def render_tile(self, frame_buffer: FrameBuffer, tile: Tile) -> None:
        """Trace every pixel of one tile into the frame buffer.

        Each pixel is sampled at its center once per accumulation pass; the
        hit or miss color is added with weight 1.
        """
        scene = self._scene
        camera = scene.camera
        passes = scene.passes
        hit_color = self._settings.hit_color
        miss_color = self._settings.miss_color

        for x, y in tile.pixels():
            pixel = frame_buffer.get_pixel(x, y)
            sample = Sample.pixel_center(x, y)
            for _ in range(passes):
                ray = camera.generate_ray(sample)
                pixel.add(hit_color if scene.intersect(ray) else miss_color)

    def _run_tile(self, frame_buffer: FrameBuffer, tile: Tile) -> None:
        self.render_tile(frame_buffer, tile)
        if self._tile_listener is not None:
            self._tile_listener(tile)

        with self._lock:
            self._completed_tiles += 1
            self._completed_pixels += tile.pixel_count
        if self._progress is not None:
            # The tile is already complete; progress failures must not undo that.
            try:
                self._progress.update(tile.pixel_count)
            except Exception:
                logger.exception("progress update failed for tile %s", _describe(tile))


def render(
    scene: Scene,
    settings: RenderSettings | None = None,
    progress: ProgressReporter | None = None,
    tile_listener: TileListener | None = None,
) -> RenderReport:
    """Render a scene into a new frame buffer with a one-off ``TileRenderer``."""
    return TileRenderer(scene, settings, progress, tile_listener).render()
