"""Shape abstraction, intersection records and the hit rule.

Every shape carries an object-to-world transform and a process-wide unique
integer id. Intersection is always solved in object space: the world-space
ray is moved into object space with the inverse transform, and the concrete
shape solves its local equation in `local_intersects`.

Intersections refer back to the shape that produced them without copying
it, so an Intersection is only meaningful while its shape is alive.
"""

import itertools
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cached_property

from raykernel.core.matrix import IDENTITY, Matrix
from raykernel.core.ray import Ray

# Process-wide shape id counter; one locked fetch-and-increment per shape
_shape_ids = itertools.count()
_shape_id_lock = threading.Lock()


def _next_shape_id() -> int:
    with _shape_id_lock:
        return next(_shape_ids)


class Shape(ABC):
    """Base class for shapes that can be intersected by a ray.

    Args:
        transform: 4x4 matrix mapping object space into world space.
            Defaults to the identity.

    Raises:
        ValueError: If transform is not 4x4.
    """

    def __init__(self, transform: Matrix | None = None) -> None:
        transform = IDENTITY if transform is None else transform
        if transform.size != 4:
            raise ValueError(f"Shape transform must be 4x4, got {transform.size}x{transform.size}")
        self._transform = transform
        self._id = _next_shape_id()

    @property
    def id(self) -> int:
        """Get the unique id assigned at construction."""
        return self._id

    @property
    def transform(self) -> Matrix:
        """Get the object-to-world transform."""
        return self._transform

    @cached_property
    def inverse_transform(self) -> Matrix:
        """Get the world-to-object transform.

        Raises:
            SingularMatrixError: If the transform cannot be inverted.
        """
        return self._transform.inverse()

    def intersects(self, ray: Ray) -> list["Intersection"]:
        """Intersect a world-space ray with this shape.

        Args:
            ray: The ray in world space.

        Returns:
            The intersections in ascending order of t. Negative t values
            (behind the ray origin) are included.

        Raises:
            SingularMatrixError: If the shape transform cannot be inverted.
        """
        return self.local_intersects(ray.transform(self.inverse_transform))

    @abstractmethod
    def local_intersects(self, local_ray: Ray) -> list["Intersection"]:
        """Intersect a ray already expressed in this shape's object space."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, transform={self._transform!r})"


@dataclass(frozen=True)
class Intersection:
    """A parametric distance along a ray, tagged with the shape it hit.

    Attributes:
        t: The ray parameter at the crossing.
        object: The shape that produced this intersection (not a copy).
    """

    t: float
    object: Shape

    @property
    def object_id(self) -> int:
        """Get the id of the owning shape."""
        return self.object.id


def hit(intersections: Iterable[Intersection]) -> Intersection | None:
    """Select the visible intersection: the smallest non-negative t.

    Scans the input once and does not assume it is sorted. Comparison is
    exact; when two intersections share the smallest t, the first one
    encountered is returned.

    Args:
        intersections: Intersections in any order.

    Returns:
        The nearest intersection with t >= 0, or None if the input is empty
        or every t is negative.
    """
    best: Intersection | None = None
    for i in intersections:
        if i.t >= 0.0 and (best is None or i.t < best.t):
            best = i
    return best
