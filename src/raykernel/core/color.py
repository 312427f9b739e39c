"""RGB color values.

Colors are linear and unbounded: channels may go below 0 or above 1 while
colors are combined, and are only clamped when a canvas is exported.

Example:
    >>> from raykernel.core.color import Color
    >>> Color(1.0, 0.2, 0.4).multiply_color(Color(0.9, 1.0, 0.1))
    Color(red=0.9, green=0.2, blue=0.04000000000000001)
"""

from dataclasses import dataclass

from raykernel.core.approx import approx_equal


@dataclass(frozen=True, eq=False)
class Color:
    """An (red, green, blue) triple.

    Equality is approximate (channel-wise within EPSILON), so colors are not
    hashable.
    """

    red: float
    green: float
    blue: float

    def add(self, other: "Color") -> "Color":
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def subtract(self, other: "Color") -> "Color":
        return Color(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def multiply(self, k: float) -> "Color":
        return Color(k * self.red, k * self.green, k * self.blue)

    def multiply_color(self, other: "Color") -> "Color":
        """Blend two colors with the channel-wise (Hadamard) product."""
        return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def __add__(self, other: "Color") -> "Color":
        return self.add(other)

    def __sub__(self, other: "Color") -> "Color":
        return self.subtract(other)

    def __mul__(self, other: "float | Color") -> "Color":
        if isinstance(other, Color):
            return self.multiply_color(other)
        return self.multiply(other)

    def __rmul__(self, k: float) -> "Color":
        return self.multiply(k)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (
            approx_equal(self.red, other.red)
            and approx_equal(self.green, other.green)
            and approx_equal(self.blue, other.blue)
        )

    __hash__ = None  # type: ignore[assignment]


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
