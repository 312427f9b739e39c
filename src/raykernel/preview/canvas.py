"""Pixel buffer for rendered images.

The Canvas stores linear RGB colors as a float32 NumPy array in row-major
image order, so `pixels[y, x]` is the pixel in column x of row y. The
accessors take and return Color values. Colors are not clamped on write;
clamping happens when the canvas is exported.

Example:
    >>> from raykernel.core.color import Color
    >>> from raykernel.preview.canvas import Canvas
    >>> canvas = Canvas(20, 40)
    >>> canvas.set(12, 22, Color(0.2, 0.3, 0.4))
    >>> canvas.get(12, 22) == Color(0.2, 0.3, 0.4)
    True
"""

import numpy as np
import numpy.typing as npt

from raykernel.core.color import Color


class Canvas:
    """A width x height grid of RGB colors, initialized to black.

    Args:
        width: Number of columns.
        height: Number of rows.

    Raises:
        ValueError: If either dimension is not positive.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.float32)

    @classmethod
    def from_array(cls, image: npt.ArrayLike) -> "Canvas":
        """Create a canvas from an array of shape (height, width, 3).

        Raises:
            ValueError: If the array does not have shape (H, W, 3).
        """
        arr = np.asarray(image, dtype=np.float32)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (H, W, 3), got {arr.shape}")
        canvas = cls(arr.shape[1], arr.shape[0])
        canvas._pixels[...] = arr
        return canvas

    @property
    def width(self) -> int:
        """Get the canvas width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the canvas height."""
        return self._height

    @property
    def pixels(self) -> npt.NDArray[np.float32]:
        """Get the underlying (height, width, 3) array (not a copy)."""
        return self._pixels

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} canvas"
            )

    def get(self, x: int, y: int) -> Color:
        """Get the color at column x, row y.

        Raises:
            IndexError: If (x, y) is outside the canvas.
        """
        self._check_bounds(x, y)
        r, g, b = (float(c) for c in self._pixels[y, x])
        return Color(r, g, b)

    def set(self, x: int, y: int, color: Color) -> None:
        """Set the color at column x, row y.

        Raises:
            IndexError: If (x, y) is outside the canvas.
        """
        self._check_bounds(x, y)
        self._pixels[y, x] = color.to_tuple()

    def fill(self, color: Color) -> None:
        """Set every pixel to the same color."""
        self._pixels[...] = color.to_tuple()

    def __repr__(self) -> str:
        return f"Canvas(width={self._width}, height={self._height})"
