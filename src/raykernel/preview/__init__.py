"""Preview module for pixel buffers and image output.

Components:
    canvas: RGB pixel buffer backed by a NumPy array
    export: Plain PPM (P3) serialization and PNG export

Example:
    >>> from raykernel.preview import Canvas, save_canvas
    >>> canvas = Canvas(200, 200)
    >>> save_canvas(canvas, "output.ppm")
"""

from raykernel.core.color import BLACK, Color
from raykernel.preview.canvas import Canvas
from raykernel.preview.export import (
    canvas_to_ppm,
    float_to_255,
    image_to_uint8,
    limit_line_length,
    save_canvas,
    save_png,
    save_ppm,
)

__all__ = [
    "Canvas",
    "Color",
    "BLACK",
    "canvas_to_ppm",
    "float_to_255",
    "image_to_uint8",
    "limit_line_length",
    "save_canvas",
    "save_png",
    "save_ppm",
]
