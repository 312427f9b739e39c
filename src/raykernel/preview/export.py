"""Image export utilities for canvases.

This module serializes a Canvas to plain-text PPM (P3) and to PNG.

Supported formats:
    - PPM (plain P3, 8-bit, lines kept under 70 characters)
    - PNG (8-bit RGB via Pillow)

Both formats scale linear colors by 255, clamp to [0, 255] and round half
up, so 0.5 becomes 128.

Example:
    >>> from raykernel.core.color import Color
    >>> from raykernel.preview.canvas import Canvas
    >>> from raykernel.preview.export import canvas_to_ppm, save_png
    >>>
    >>> canvas = Canvas(5, 3)
    >>> canvas.set(0, 0, Color(1.5, 0.0, 0.0))
    >>> text = canvas_to_ppm(canvas)
    >>> save_png(canvas, "output.png")
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raykernel.preview.canvas import Canvas

# PPM lines must stay shorter than this many characters
PPM_LINE_LIMIT = 70

# Maximum color value written to the PPM header
PPM_MAX_COLOR = 255


def float_to_255(value: float) -> int:
    """Convert a linear color channel to an 8-bit integer.

    Args:
        value: The channel value, nominally in [0, 1].

    Returns:
        round(value * 255) clamped to [0, 255], rounding halves up.
    """
    scaled = value * PPM_MAX_COLOR
    if scaled < 0.0:
        return 0
    if scaled > PPM_MAX_COLOR:
        return PPM_MAX_COLOR
    return int(math.floor(scaled + 0.5))


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 with the float_to_255 rule.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        Array of the same shape with dtype uint8.
    """
    scaled = np.asarray(image, dtype=np.float64) * PPM_MAX_COLOR
    return np.clip(np.floor(scaled + 0.5), 0, PPM_MAX_COLOR).astype(np.uint8)


def limit_line_length(line: str, limit: int = PPM_LINE_LIMIT) -> str:
    """Wrap a space-separated line so every output line is shorter than limit.

    With the default limit of 70 no line is longer than 69 characters.
    Breaks only between tokens; a single token that does not fit is kept
    whole on its own line.

    Args:
        line: Tokens separated by single spaces.
        limit: Exclusive upper bound on the characters per output line.

    Returns:
        The wrapped text, without a trailing newline.
    """
    lines: list[str] = []
    current: list[str] = []
    length = 0
    for token in line.split(" "):
        if current and length + 1 + len(token) >= limit:
            lines.append(" ".join(current))
            current = []
            length = 0
        length += len(token) + (1 if current else 0)
        current.append(token)
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines)


def canvas_to_ppm(canvas: Canvas) -> str:
    """Serialize a canvas to plain PPM (P3) text.

    Args:
        canvas: The canvas to serialize.

    Returns:
        The PPM header followed by one wrapped line group per canvas row,
        ending with a newline.
    """
    header = f"P3\n{canvas.width} {canvas.height}\n{PPM_MAX_COLOR}\n"
    image = image_to_uint8(canvas.pixels)
    rows = [
        limit_line_length(" ".join(str(int(v)) for v in row.flat))
        for row in image
    ]
    return header + "\n".join(rows) + "\n"


def save_ppm(canvas: Canvas, filepath: str | Path) -> None:
    """Save the canvas as a plain PPM file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .ppm).
    """
    Path(filepath).write_text(canvas_to_ppm(canvas))


def save_png(canvas: Canvas, filepath: str | Path) -> None:
    """Save the canvas as an 8-bit RGB PNG file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .png).
    """
    image_uint8 = image_to_uint8(canvas.pixels)

    # Save using Pillow
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(str(filepath))


def save_canvas(canvas: Canvas, filepath: str | Path) -> Path:
    """Save the canvas in the format implied by the file extension.

    Args:
        canvas: The canvas to save.
        filepath: Output path ending in .ppm or .png.

    Returns:
        The output path.

    Raises:
        ValueError: If the extension is not .ppm or .png.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".ppm":
        save_ppm(canvas, path)
    elif suffix == ".png":
        save_png(canvas, path)
    else:
        raise ValueError(f"Unsupported output format: {suffix or '(none)'} (use .ppm or .png)")
    return path
