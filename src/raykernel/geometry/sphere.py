"""Unit sphere primitive with ray-sphere intersection.

A Sphere is always the unit sphere centred on the object-space origin; its
size and position in the world come entirely from its transform. The
intersection solves

    |origin + t * direction|^2 = 1

in object space, which expands to the quadratic a*t^2 + b*t + c = 0 with

    a = dot(direction, direction)
    b = 2 * dot(direction, origin - center)
    c = dot(origin - center, origin - center) - 1

Example:
    >>> from raykernel.core.matrix import scale
    >>> from raykernel.core.ray import make_ray
    >>> from raykernel.core.tuple import point, vector
    >>> s = make_sphere(scale(2.0, 2.0, 2.0))
    >>> [i.t for i in s.intersects(make_ray(point(0, 0, -5), vector(0, 0, 1)))]
    [3.0, 7.0]
"""

import math

from raykernel.core.matrix import Matrix
from raykernel.core.ray import Ray
from raykernel.core.tuple import ORIGIN
from raykernel.geometry.shape import Intersection, Shape


class Sphere(Shape):
    """The unit sphere at the object-space origin, placed by its transform."""

    def local_intersects(self, local_ray: Ray) -> list[Intersection]:
        """Solve the ray-sphere quadratic in object space.

        Args:
            local_ray: The ray in object space.

        Returns:
            An empty list when the ray misses or its direction has zero
            length, otherwise exactly two intersections with the smaller
            root first. A tangent ray yields two equal roots.
        """
        sphere_to_ray = local_ray.origin - ORIGIN
        direction = local_ray.direction

        a = direction.dot(direction)
        b = 2.0 * direction.dot(sphere_to_ray)
        c = sphere_to_ray.dot(sphere_to_ray) - 1.0

        # A zero-length direction never moves off its origin
        if a == 0.0:
            return []

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return []

        sqrt_d = math.sqrt(discriminant)
        return [
            Intersection((-b - sqrt_d) / (2.0 * a), self),
            Intersection((-b + sqrt_d) / (2.0 * a), self),
        ]


def make_sphere(transform: Matrix) -> Sphere:
    """Create a sphere placed in the world by the given transform."""
    return Sphere(transform)


def sphere_unit() -> Sphere:
    """Create a unit sphere at the world origin (identity transform)."""
    return Sphere()
