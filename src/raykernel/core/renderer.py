"""Silhouette renderer mapping canvas pixels to rays.

The renderer places an eye point on the z axis and a square wall plane in
front of it. Each canvas pixel corresponds to one point on the wall; a ray is
cast from the eye through that point, and the pixel is painted with the hit
color when the scene has a non-negative intersection along the ray, or the
background color otherwise. There is no shading and one ray per pixel.

Two backends produce the same image:
    - "taichi": casts every pixel in parallel with the kernels in
      raykernel.scene.kernels (requires ti.init() beforehand)
    - "python": walks the pixels with the Shape/hit object API

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
    >>> from raykernel.scene.manager import Scene
    >>>
    >>> scene = Scene()
    >>> scene.add_sphere()
    >>> renderer = SilhouetteRenderer(RenderConfig(width=200, height=200))
    >>> canvas = renderer.render(scene)
"""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from raykernel.core.color import BLACK, RED, Color
from raykernel.core.ray import Ray, make_ray
from raykernel.core.tuple import point, vector
from raykernel.preview.canvas import Canvas
from raykernel.scene.manager import Scene

# Type alias for progress callback
# Callback receives (columns_done, total_columns)
ProgressCallback = Callable[[int, int], None]

Backend = Literal["taichi", "python"]

# Largest canvas the taichi backend can fill (matches the kernel buffers)
MAX_RENDER_SIZE = 2048


@dataclass
class RenderConfig:
    """Parameters for the silhouette render.

    All parameters have defaults matching a 200x200 view of a unit sphere
    at the origin.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        eye_z: z coordinate of the eye point (the eye sits on the z axis).
        wall_z: z coordinate of the wall plane the rays pass through.
        wall_size: Side length of the square wall area mapped to the canvas.
        hit_color: RGB color for pixels whose ray hits a shape.
        background: RGB color for pixels whose ray hits nothing.
        batch_size: Number of canvas columns rendered per progress update.
        backend: "taichi" for the parallel kernels, "python" for the object API.

    Example:
        >>> config = RenderConfig()
        >>> config.wall_size
        7.0
        >>> small = RenderConfig(width=64, height=64, hit_color=Color(0.0, 0.0, 1.0))
    """

    width: int = 200
    height: int = 200
    eye_z: float = -5.0
    wall_z: float = 10.0
    wall_size: float = 7.0
    hit_color: Color = field(default_factory=lambda: RED)
    background: Color = field(default_factory=lambda: BLACK)
    batch_size: int = 20
    backend: Backend = "taichi"

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If a dimension is out of range, the wall has no
                area, the batch size is not positive, the eye lies on the
                wall, or the backend is unknown.
        """
        if not (0 < self.width <= MAX_RENDER_SIZE and 0 < self.height <= MAX_RENDER_SIZE):
            raise ValueError(
                f"Canvas dimensions ({self.width}x{self.height}) must be between 1 and "
                f"{MAX_RENDER_SIZE}"
            )
        if self.wall_size <= 0.0:
            raise ValueError(f"wall_size must be positive, got {self.wall_size}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.eye_z == self.wall_z:
            raise ValueError("eye_z and wall_z must differ")
        if self.backend not in ("taichi", "python"):
            raise ValueError(f"Unknown backend: {self.backend}")


class SilhouetteRenderer:
    """Casts one ray per pixel through the wall and paints hits.

    Args:
        config: Render parameters. Defaults to RenderConfig().

    Raises:
        ValueError: If the configuration is invalid.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config if config is not None else RenderConfig()
        self._config.validate()

    @property
    def config(self) -> RenderConfig:
        """Get the render configuration."""
        return self._config

    def ray_for_pixel(self, x: int, y: int) -> Ray:
        """Build the world-space ray for pixel (x, y).

        The wall point is (-wall_size/2 + x * wall_size/width,
        -wall_size/2 + y * wall_size/height, wall_z) and the direction is
        normalized.
        """
        cfg = self._config
        half = cfg.wall_size / 2.0
        world_x = -half + (cfg.wall_size / cfg.width) * x
        world_y = -half + (cfg.wall_size / cfg.height) * y
        eye = point(0.0, 0.0, cfg.eye_z)
        direction = (vector(world_x, world_y, cfg.wall_z) - eye.as_vector()).unit()
        return make_ray(eye, direction)

    def render(self, scene: Scene, callback: ProgressCallback | None = None) -> Canvas:
        """Render the scene to a new canvas.

        Args:
            scene: The shapes to render.
            callback: Optional function called after each batch of columns.
                Receives (columns_done, total_columns).

        Returns:
            The filled canvas.

        Raises:
            SingularMatrixError: If a shape has a singular transform.
        """
        canvas = Canvas(self._config.width, self._config.height)
        for done, total in self._render_columns(scene, canvas):
            if callback is not None:
                callback(done, total)
        return canvas

    def render_progressive(
        self,
        scene: Scene,
        canvas: Canvas | None = None,
    ) -> Generator[tuple[int, int], None, Canvas]:
        """Render batch by batch, yielding progress after each batch.

        Generator-based alternative to render() with callbacks.

        Args:
            scene: The shapes to render.
            canvas: Canvas to fill. A new one is created when omitted.

        Yields:
            Tuple of (columns_done, total_columns).

        Returns:
            The filled canvas (as the generator's return value).

        Raises:
            ValueError: If the canvas size does not match the configuration.
        """
        if canvas is None:
            canvas = Canvas(self._config.width, self._config.height)
        elif (canvas.width, canvas.height) != (self._config.width, self._config.height):
            raise ValueError(
                f"Canvas is {canvas.width}x{canvas.height}, expected "
                f"{self._config.width}x{self._config.height}"
            )
        yield from self._render_columns(scene, canvas)
        return canvas

    def _render_columns(
        self,
        scene: Scene,
        canvas: Canvas,
    ) -> Generator[tuple[int, int], None, None]:
        cfg = self._config
        if cfg.backend == "taichi":
            yield from self._render_taichi(scene, canvas)
        else:
            yield from self._render_python(scene, canvas)

    def _render_python(
        self,
        scene: Scene,
        canvas: Canvas,
    ) -> Generator[tuple[int, int], None, None]:
        cfg = self._config
        for x_start in range(0, cfg.width, cfg.batch_size):
            x_end = min(x_start + cfg.batch_size, cfg.width)
            for x in range(x_start, x_end):
                for y in range(cfg.height):
                    hit = scene.hit(self.ray_for_pixel(x, y))
                    canvas.set(x, y, cfg.hit_color if hit is not None else cfg.background)
            yield (x_end, cfg.width)

    def _render_taichi(
        self,
        scene: Scene,
        canvas: Canvas,
    ) -> Generator[tuple[int, int], None, None]:
        # Lazy import so callers can run ti.init() before the fields exist
        from raykernel.scene.kernels import NO_HIT, cast_wall, get_hit_ids_numpy, upload_scene

        cfg = self._config
        upload_scene(scene)
        for x_start in range(0, cfg.width, cfg.batch_size):
            x_end = min(x_start + cfg.batch_size, cfg.width)
            cast_wall(x_start, x_end, cfg.width, cfg.height, cfg.eye_z, cfg.wall_z, cfg.wall_size)
            if x_end < cfg.width:
                yield (x_end, cfg.width)

        hit_ids = get_hit_ids_numpy(cfg.width, cfg.height)
        mask = hit_ids != NO_HIT
        pixels = canvas.pixels
        pixels[mask] = np.asarray(cfg.hit_color.to_tuple(), dtype=np.float32)
        pixels[~mask] = np.asarray(cfg.background.to_tuple(), dtype=np.float32)
        yield (cfg.width, cfg.width)
