"""Minimal geometry kernel for ray-based rendering.

This package provides homogeneous-coordinate tuples, small square matrices
with cofactor-expansion inverses, rays, and ray-sphere intersection with a
nearest-non-negative hit rule, plus a pixel buffer that serializes to PPM.

Subpackages:
    core: Approximate equality, tuples, matrices, rays, and the silhouette renderer
    geometry: Shape abstraction, sphere primitive, intersections and the hit rule
    scene: Flat shape list and Taichi kernels for parallel ray casting
    preview: Canvas pixel buffer and PPM/PNG export
"""

__version__ = "0.1.0"
