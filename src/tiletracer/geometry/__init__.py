"""Geometry module for affine transforms and shape primitives.

Components:
    matrix: Immutable 4x4 matrices
    transform: Affine transforms paired with their exact inverses
    basis: Orthonormal bases for local coordinate frames
    shape: The intersection protocol shared by all shapes
    sphere: Sphere primitive with robust ray-sphere intersection

Intersection routines are boolean predicates: they report whether a ray hits
a shape, not where.
"""

from .basis import OrthonormalBasis
from .matrix import Matrix
from .shape import Shape
from .sphere import Sphere
from .transform import (
    IDENTITY,
    Transform,
    compose,
    rotate,
    rotate_x,
    rotate_y,
    rotate_z,
    scale,
    translate,
)

__all__ = [
    "IDENTITY",
    "Matrix",
    "OrthonormalBasis",
    "Shape",
    "Sphere",
    "Transform",
    "compose",
    "rotate",
    "rotate_x",
    "rotate_y",
    "rotate_z",
    "scale",
    "translate",
]
