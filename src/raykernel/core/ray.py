"""Ray data structure.

A ray is an origin point and a direction vector in homogeneous form. Rays
are moved into a shape's object space by transforming them with the
shape's inverse transform.

Example:
    >>> from raykernel.core.ray import make_ray
    >>> from raykernel.core.tuple import point, vector
    >>> ray = make_ray(point(2.0, 3.0, 4.0), vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5)
    Tuple(x=4.5, y=3.0, z=4.0, w=1.0)
"""

from dataclasses import dataclass

from raykernel.core.matrix import Matrix
from raykernel.core.tuple import Tuple


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (w == 1).
        direction: The direction of the ray (w == 0). Not required to be
            normalized; intersection distances are measured in multiples
            of this vector.

    Raises:
        ValueError: If origin is not a point or direction is not a vector.
    """

    origin: Tuple
    direction: Tuple

    def __post_init__(self) -> None:
        if not self.origin.is_point():
            raise ValueError(f"Ray origin must be a point, got {self.origin}")
        if not self.direction.is_vector():
            raise ValueError(f"Ray direction must be a vector, got {self.direction}")

    def position(self, t: float) -> Tuple:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Negative values lie behind the origin.

        Returns:
            The point origin + direction * t.
        """
        return self.origin + self.direction * t

    def transform(self, m: Matrix) -> "Ray":
        """Apply a 4x4 matrix to both the origin and the direction.

        Args:
            m: An affine 4x4 transform.

        Returns:
            A new Ray in the transformed coordinate space.
        """
        return Ray(m @ self.origin, m @ self.direction)


def make_ray(origin: Tuple, direction: Tuple) -> Ray:
    """Create a ray, checking that origin is a point and direction a vector.

    Raises:
        ValueError: If either argument has the wrong w tag.
    """
    return Ray(origin=origin, direction=direction)
