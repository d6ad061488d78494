"""Preview module for output and progress.

This module handles everything that consumes a rendered frame buffer:

Components:
    tonemap: Radiance to 8-bit RGBA conversion (clamp, scale, gamma, round)
    export: PNG export via Pillow
    progress: Thread-safe console progress bar and listeners

Example:
    >>> from tiletracer.preview import save_png, to_rgba_buffer
    >>> rgba = to_rgba_buffer(report.frame_buffer, sensitivity=1.0, gamma=2.2)
    >>> save_png(report.frame_buffer, "output.png", gamma=2.2)
"""

from tiletracer.preview.export import save_png, save_png_from_rgba
from tiletracer.preview.progress import ProgressListener, ProgressReporter
from tiletracer.preview.tonemap import (
    to_display_color,
    to_rgba_buffer,
    to_rgba_image,
    tone_map_array,
    tone_map_tile,
    validate_tone_map,
)

__all__ = [
    # Tone mapping
    "to_display_color",
    "tone_map_array",
    "tone_map_tile",
    "to_rgba_image",
    "to_rgba_buffer",
    "validate_tone_map",
    # Export
    "save_png",
    "save_png_from_rgba",
    # Progress
    "ProgressListener",
    "ProgressReporter",
]
