"""Camera module for view and ray generation.

Components:
    perspective: Pinhole (perspective) camera model

Camera responsibilities:
    - Transform image-space samples to world-space rays
    - Build the view frame from a viewing direction and an up vector
    - Derive the image-plane size from field of view and aspect ratio
"""

from .perspective import Camera, PerspectiveCamera

__all__ = [
    "Camera",
    "PerspectiveCamera",
]
