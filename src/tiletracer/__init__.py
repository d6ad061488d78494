"""Tile-parallel CPU ray tracer.

This package renders a scene of shapes through a perspective camera by
splitting the output image into tiles and tracing each tile on a worker
thread, then tone mapping the accumulated radiance for display.

Subpackages:
    core: Vectors, points, rays, samples, render settings and the tile scheduler
    geometry: Matrices, affine transforms, orthonormal bases and shapes
    camera: Camera models with ray generation
    film: Spectra, pixel accumulators, frame buffer and tiles
    scene: Scene description and stock scenes
    preview: Tone mapping, RGBA snapshots, PNG export and progress reporting
"""

__version__ = "0.1.0"
