"""Core value types and rendering loop.

This module contains the fundamental building blocks of the kernel:

Components:
    approx: Shared EPSILON and approximate float comparison
    tuple: Homogeneous points and vectors
    color: RGB color values with channel-wise arithmetic
    matrix: 2x2/3x3/4x4 matrices, cofactor-expansion inverse, affine constructors
    ray: Ray data structure and transformation into object space
    renderer: Silhouette renderer mapping canvas pixels to rays

All value types are immutable; every operation returns a new value.
"""

from .approx import EPSILON, approx_equal, near_zero
from .color import BLACK, RED, WHITE, Color
from .matrix import (
    IDENTITY,
    Matrix,
    SingularMatrixError,
    identity,
    inverse,
    invertible,
    scale,
    translation,
)
from .ray import Ray, make_ray
from .tuple import ORIGIN, Tuple, point, vector

# Note: renderer is NOT imported here to avoid circular imports.
# Import it directly from raykernel.core.renderer when needed.

__all__ = [
    "EPSILON",
    "approx_equal",
    "near_zero",
    "Tuple",
    "point",
    "vector",
    "ORIGIN",
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "Matrix",
    "SingularMatrixError",
    "IDENTITY",
    "identity",
    "translation",
    "scale",
    "inverse",
    "invertible",
    "Ray",
    "make_ray",
]
