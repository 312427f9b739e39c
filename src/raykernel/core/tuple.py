"""Homogeneous 4-component tuples for points and vectors.

A Tuple with w == 1 is a point and a Tuple with w == 0 is a vector. The
arithmetic below never checks the tag: subtracting two points yields a vector
and adding a vector to a point yields a point purely through the w component.
Callers are responsible for avoiding meaningless combinations such as adding
two points.

Example:
    >>> from raykernel.core.tuple import point, vector
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 0.0, 1.0)
    >>> (p + v * 2.0).is_point()
    True
"""

import math
from dataclasses import dataclass

from raykernel.core.approx import approx_equal


@dataclass(frozen=True, eq=False)
class Tuple:
    """A homogeneous (x, y, z, w) value.

    Equality is approximate (component-wise within EPSILON), so tuples are
    not hashable.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
        w: 1.0 for points, 0.0 for vectors, anything else for raw tuples.
    """

    x: float
    y: float
    z: float
    w: float

    def is_point(self) -> bool:
        """Check whether w is 1 within EPSILON."""
        return approx_equal(self.w, 1.0)

    def is_vector(self) -> bool:
        """Check whether w is 0 within EPSILON."""
        return approx_equal(self.w, 0.0)

    def as_vector(self) -> "Tuple":
        """Return a copy with w set to 0."""
        return Tuple(self.x, self.y, self.z, 0.0)

    def add(self, other: "Tuple") -> "Tuple":
        return Tuple(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def subtract(self, other: "Tuple") -> "Tuple":
        return Tuple(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def negate(self) -> "Tuple":
        return Tuple(-self.x, -self.y, -self.z, -self.w)

    def multiply(self, k: float) -> "Tuple":
        return Tuple(k * self.x, k * self.y, k * self.z, k * self.w)

    def divide(self, k: float) -> "Tuple":
        return Tuple(self.x / k, self.y / k, self.z / k, self.w / k)

    def norm(self) -> float:
        """Compute the Euclidean length over all four components."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

    def unit(self) -> "Tuple":
        """Divide the tuple by its norm.

        A zero-length tuple is not guarded against; the division raises
        ZeroDivisionError.
        """
        return self.divide(self.norm())

    def dot(self, other: "Tuple") -> float:
        """Compute the dot product over all four components."""
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def cross(self, other: "Tuple") -> "Tuple":
        """Compute the cross product of two vectors.

        Only meaningful when both operands are vectors; w is ignored and the
        result is always a vector.
        """
        return vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z, self.w]

    def __add__(self, other: "Tuple") -> "Tuple":
        return self.add(other)

    def __sub__(self, other: "Tuple") -> "Tuple":
        return self.subtract(other)

    def __neg__(self) -> "Tuple":
        return self.negate()

    def __mul__(self, k: float) -> "Tuple":
        return self.multiply(k)

    def __rmul__(self, k: float) -> "Tuple":
        return self.multiply(k)

    def __truediv__(self, k: float) -> "Tuple":
        return self.divide(k)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return (
            approx_equal(self.x, other.x)
            and approx_equal(self.y, other.y)
            and approx_equal(self.z, other.z)
            and approx_equal(self.w, other.w)
        )

    __hash__ = None  # type: ignore[assignment]


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1)."""
    return Tuple(x, y, z, 1.0)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0)."""
    return Tuple(x, y, z, 0.0)


ORIGIN = point(0.0, 0.0, 0.0)
