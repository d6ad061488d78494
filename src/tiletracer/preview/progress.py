"""Console progress reporting for tile renders.

``ProgressReporter`` is the progress collaborator of the tile scheduler:
workers call ``update`` with the number of pixels they just finished and
the scheduler calls ``done`` once every tile has been joined. Updates arrive
from several worker threads at once, so all state changes happen under a
lock.

Example:
    >>> reporter = ProgressReporter("Rendering", total_work=640 * 640)
    >>> reporter.add_listener(my_listener)
    >>> renderer = TileRenderer(scene, progress=reporter)
"""

from __future__ import annotations

import sys
import threading
import time
from typing import Protocol, TextIO


class ProgressListener(Protocol):
    """Receives progress fractions in ``[0, 1]`` and a completion signal."""

    def update(self, progress: float) -> None: ...

    def finished(self) -> None: ...


class ProgressReporter:
    """Thread-safe progress counter with an optional text progress bar.

    Args:
        title: Label printed in front of the bar.
        total_work: Amount of work (pixels) that corresponds to 100%.
        bar_length: Width of the bar in characters.
        quiet: If True, nothing is printed; listeners are still notified.
        stream: Where the bar is written (default ``sys.stdout``).

    Raises:
        ValueError: If ``total_work`` or ``bar_length`` is not positive.
    """

    def __init__(
        self,
        title: str,
        total_work: int,
        bar_length: int = 40,
        quiet: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        if total_work <= 0:
            raise ValueError(f"the total work must be larger than zero, got {total_work}")
        if bar_length <= 0:
            raise ValueError(f"the bar length must be larger than zero, got {bar_length}")
        self._title = title
        self._total_work = total_work
        self._bar_length = bar_length
        self._quiet = quiet
        self._stream = stream if stream is not None else sys.stdout

        self._lock = threading.Lock()
        self._listeners: list[ProgressListener] = []
        self._done = 0
        self._finished = False
        self._start_time = time.perf_counter()
        self._max_print_length = 0

    @property
    def total_work(self) -> int:
        return self._total_work

    @property
    def completed(self) -> int:
        with self._lock:
            return self._done

    @property
    def fraction(self) -> float:
        with self._lock:
            return self._done / self._total_work

    @property
    def is_finished(self) -> bool:
        with self._lock:
            return self._finished

    def add_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def update(self, work: int) -> None:
        """Record ``work`` newly completed units; non-positive values are ignored.

        Listeners are notified after the lock is released, so they may read
        the reporter.
        """
        if work <= 0:
            return
        with self._lock:
            self._done = min(self._total_work, self._done + work)
            fraction = self._done / self._total_work
            listeners = list(self._listeners)
            if not self._quiet:
                elapsed = time.perf_counter() - self._start_time
                remaining = elapsed * (1.0 - fraction) / fraction
                self._print(self._bar(fraction), f"({elapsed:.2f}s | {remaining:.2f}s)")
        for listener in listeners:
            listener.update(fraction)

    def done(self) -> None:
        """Mark the work as finished and notify listeners.

        The completed count is left as it is, so a render that lost tiles
        finishes below 100%.
        """
        with self._lock:
            self._finished = True
            fraction = self._done / self._total_work
            listeners = list(self._listeners)
            if not self._quiet:
                elapsed = time.perf_counter() - self._start_time
                self._print(self._bar(fraction), f"({elapsed:.2f}s)")
                self._stream.write("\n")
                self._stream.flush()
        for listener in listeners:
            listener.finished()

    def _bar(self, fraction: float) -> str:
        filled = int(self._bar_length * fraction)
        return "+" * filled + " " * (self._bar_length - filled)

    def _print(self, bar: str, time_string: str) -> None:
        padding = " " * max(0, self._max_print_length - len(time_string))
        self._max_print_length = max(self._max_print_length, len(time_string))
        self._stream.write(f"\r{self._title} [{bar}] {time_string}{padding}")
        self._stream.flush()
