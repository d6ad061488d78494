#!/usr/bin/env python3
"""Render the stock five-sphere scene.

This script demonstrates end-to-end rendering with the tile-parallel
renderer. It creates the scene, renders it tile by tile on a worker pool
and saves the tone-mapped result as a PNG.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH         Image width in pixels (default: 640)
    --height HEIGHT       Image height in pixels (default: 640)
    --tile-size SIZE      Tile width and height in pixels (default: 32)
    --workers N           Worker threads (default: number of CPUs)
    --gamma GAMMA         Display gamma (default: 1.0)
    --sensitivity S       Tone-mapping sensitivity (default: 1.0)
    --output OUTPUT       Output file path (default: spheres.png)
    --quiet               Suppress progress output
    --verbose             Log scheduler details

Example:
    python examples/render_spheres.py --width 256 --height 256 --workers 4
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tiletracer.core.scheduler import render
from tiletracer.core.settings import DEFAULT_TILE_SIZE, RenderSettings
from tiletracer.preview.export import save_png
from tiletracer.preview.progress import ProgressReporter
from tiletracer.scene.spheres import create_sphere_scene

logger = logging.getLogger("render_spheres")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the stock five-sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=640, help="Image height in pixels (default: 640)")
    parser.add_argument(
        "--tile-size",
        type=int,
        default=DEFAULT_TILE_SIZE,
        help=f"Tile width and height in pixels (default: {DEFAULT_TILE_SIZE})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads (default: number of CPUs)",
    )
    parser.add_argument("--gamma", type=float, default=1.0, help="Display gamma (default: 1.0)")
    parser.add_argument(
        "--sensitivity",
        type=float,
        default=1.0,
        help="Tone-mapping sensitivity (default: 1.0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Log scheduler details")
    return parser.parse_args()


def render_spheres(
    width: int = 640,
    height: int = 640,
    tile_size: int = DEFAULT_TILE_SIZE,
    workers: int | None = None,
    sensitivity: float = 1.0,
    gamma: float = 1.0,
    output_path: str = "spheres.png",
    quiet: bool = False,
) -> Path:
    """Render the sphere scene and save it to a PNG file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        tile_size: Tile width and height in pixels.
        workers: Worker pool size, or None for the CPU count.
        sensitivity: Tone-mapping sensitivity.
        gamma: Display gamma.
        output_path: Output file path (PNG).
        quiet: If True, suppress the progress bar.

    Returns:
        Path to the saved image file.

    Raises:
        RenderIncompleteError: If any tile failed to render.
    """
    settings = RenderSettings(
        tile_width=tile_size,
        tile_height=tile_size,
        workers=workers,
        sensitivity=sensitivity,
        gamma=gamma,
    )
    scene = create_sphere_scene(width, height)
    logger.info("rendering %dx%d with %d workers", width, height, settings.worker_count)

    progress = ProgressReporter("Rendering", total_work=width * height, quiet=quiet)
    report = render(scene, settings, progress=progress)
    report.raise_for_failures()

    output_file = save_png(
        report.frame_buffer,
        output_path,
        sensitivity=settings.sensitivity,
        gamma=settings.gamma,
    )
    logger.info("total time: %.2fs", report.elapsed)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        output = render_spheres(
            width=args.width,
            height=args.height,
            tile_size=args.tile_size,
            workers=args.workers,
            sensitivity=args.sensitivity,
            gamma=args.gamma,
            output_path=args.output,
            quiet=args.quiet,
        )
    except Exception:
        logger.exception("render failed")
        return 1
    print(f"Saved to: {output.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
