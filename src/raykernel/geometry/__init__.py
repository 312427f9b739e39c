"""Geometry module for shape primitives and intersection.

Components:
    shape: Shape base class, Intersection records and the hit rule
    sphere: Unit sphere primitive placed by an object-to-world transform

Ray-object intersection follows the pattern:
    intersections = shape.intersects(world_ray)
    visible = hit(intersections)
"""

from .shape import Intersection, Shape, hit
from .sphere import Sphere, make_sphere, sphere_unit

__all__ = [
    "Shape",
    "Intersection",
    "hit",
    "Sphere",
    "make_sphere",
    "sphere_unit",
]
