"""Flat-list scene container.

This module provides a Scene that owns a flat list of shapes, intersects a
world-space ray against all of them, and round-trips its contents through a
plain SceneConfig (dict/JSON friendly).

Example:
    >>> from raykernel.core.matrix import translation
    >>> from raykernel.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere()
    >>> scene.add_sphere(translation(0.0, 0.0, 5.0))
    >>> scene.save_json("scene.json")
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from raykernel.core.matrix import Matrix
from raykernel.core.ray import Ray
from raykernel.geometry.shape import Intersection, Shape, hit
from raykernel.geometry.sphere import Sphere


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: One entry per sphere, each {"transform": 4x4 nested list}.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """A flat list of shapes.

    Shapes are kept in insertion order. The scene holds references, so
    intersections returned by `intersect` stay valid while the scene does.

    Attributes:
        shapes: The shapes in the scene.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.shapes: list[Shape] = []

    def clear(self) -> None:
        """Remove every shape from the scene."""
        self.shapes.clear()

    def add_shape(self, shape: Shape) -> Shape:
        """Add an existing shape and return it."""
        self.shapes.append(shape)
        return shape

    def add_sphere(self, transform: Matrix | None = None) -> Sphere:
        """Create a sphere with the given transform and add it.

        Args:
            transform: Object-to-world transform. Defaults to identity.

        Returns:
            The new Sphere.
        """
        sphere = Sphere(transform)
        self.shapes.append(sphere)
        return sphere

    def get_shape(self, shape_id: int) -> Shape | None:
        """Look up a shape by its id, or None if it is not in the scene."""
        for shape in self.shapes:
            if shape.id == shape_id:
                return shape
        return None

    def get_shape_count(self) -> int:
        return len(self.shapes)

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray with every shape.

        Args:
            ray: The ray in world space.

        Returns:
            All intersections from all shapes, sorted ascending by t.

        Raises:
            SingularMatrixError: If any shape has a singular transform.
        """
        intersections: list[Intersection] = []
        for shape in self.shapes:
            intersections.extend(shape.intersects(ray))
        intersections.sort(key=lambda i: i.t)
        return intersections

    def hit(self, ray: Ray) -> Intersection | None:
        """Find the nearest non-negative intersection of a ray with the scene."""
        return hit(self.intersect(ray))

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing every sphere's transform.

        Raises:
            TypeError: If the scene contains a shape that is not a Sphere.
        """
        config = SceneConfig()
        for shape in self.shapes:
            if not isinstance(shape, Sphere):
                raise TypeError(f"Cannot serialize shape of type {type(shape).__name__}")
            config.spheres.append({"transform": shape.transform.rows()})
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every entry is validated before anything changes, so on error the
        scene keeps its previous contents. On success the current shapes
        are replaced. Spheres without a "transform" key use the identity.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If an entry is not a mapping or a transform is not
                a 4x4 matrix.
        """
        transforms: list[Matrix | None] = []
        for index, sphere_config in enumerate(config.spheres):
            if not isinstance(sphere_config, dict):
                raise ValueError(f"Sphere entry {index} must be an object, got {sphere_config!r}")
            rows = sphere_config.get("transform")
            if rows is None:
                transforms.append(None)
                continue
            transform = Matrix(rows)
            if transform.size != 4:
                raise ValueError(f"Sphere transform must be 4x4, got {transform.size}x{transform.size}")
            transforms.append(transform)

        self.clear()
        for transform in transforms:
            self.add_sphere(transform)

    def save_json(self, path: str | Path) -> None:
        """Write the scene configuration to a JSON file."""
        Path(path).write_text(json.dumps(asdict(self.to_config()), indent=2))

    @classmethod
    def load_json(cls, path: str | Path) -> "Scene":
        """Create a scene from a JSON file written by save_json.

        Raises:
            ValueError: If the file is not valid JSON, is not a JSON object
                with a "spheres" list, or holds a bad transform.
        """
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid scene file {path}: expected a JSON object")
        spheres = data.get("spheres", [])
        if not isinstance(spheres, list):
            raise ValueError(f"Invalid scene file {path}: \"spheres\" must be a list")
        scene = cls()
        scene.from_config(SceneConfig(spheres=spheres))
        return scene

    def __repr__(self) -> str:
        return f"Scene(shapes={len(self.shapes)})"
