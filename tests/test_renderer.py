"""Tests for the silhouette renderer.

Tests cover:
- RenderConfig defaults and validation
- Pixel-to-ray mapping
- Rendering with the Taichi and Python backends, and their agreement
- Progress reporting via callbacks and via the generator API
"""

import numpy as np
import pytest

BACKENDS = ["taichi", "python"]


def _unit_sphere_scene():
    from raykernel.scene.manager import Scene

    scene = Scene()
    scene.add_sphere()
    return scene


def _drain(gen):
    """Run a render_progressive generator to completion."""
    updates = []
    while True:
        try:
            updates.append(next(gen))
        except StopIteration as stop:
            return updates, stop.value


class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_defaults(self):
        """Test the default view of a unit sphere."""
        from raykernel.core.color import BLACK, RED
        from raykernel.core.renderer import RenderConfig

        config = RenderConfig()
        assert (config.width, config.height) == (200, 200)
        assert config.eye_z == -5.0
        assert config.wall_z == 10.0
        assert config.wall_size == 7.0
        assert config.hit_color == RED
        assert config.background == BLACK
        assert config.backend == "taichi"
        config.validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -3},
            {"width": 4096},
            {"wall_size": 0.0},
            {"batch_size": 0},
            {"eye_z": 10.0},
            {"backend": "cuda"},
        ],
    )
    def test_invalid(self, overrides):
        """Test each bad setting is rejected."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        config = RenderConfig(**overrides)
        with pytest.raises(ValueError):
            config.validate()
        with pytest.raises(ValueError):
            SilhouetteRenderer(config)


class TestRayForPixel:
    """Tests for SilhouetteRenderer.ray_for_pixel."""

    def test_centre_pixel(self):
        """Test the centre pixel looks straight down the z axis."""
        from raykernel.core.renderer import SilhouetteRenderer
        from raykernel.core.tuple import point, vector

        ray = SilhouetteRenderer().ray_for_pixel(100, 100)
        assert ray.origin == point(0.0, 0.0, -5.0)
        assert ray.direction == vector(0.0, 0.0, 1.0)

    def test_corner_pixel(self):
        """Test pixel (0, 0) aims at the wall's lower-left corner."""
        from raykernel.core.renderer import SilhouetteRenderer
        from raykernel.core.tuple import vector

        ray = SilhouetteRenderer().ray_for_pixel(0, 0)
        assert ray.direction == vector(-3.5, -3.5, 15.0).unit()
        assert ray.direction.norm() == pytest.approx(1.0)

    def test_ray_reaches_wall(self):
        """Test the ray passes through the mapped wall point."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.core.tuple import point

        renderer = SilhouetteRenderer(RenderConfig(width=100, height=50))
        ray = renderer.ray_for_pixel(25, 40)
        # 15 units from the eye to the wall along z
        t = 15.0 / ray.direction.z
        assert ray.position(t) == point(-3.5 + 0.07 * 25, -3.5 + 0.14 * 40, 10.0)


class TestRender:
    """Tests for SilhouetteRenderer.render."""

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_centre_hit_corner_miss(self, backend):
        """Test the sphere covers the middle of the image but not the corners."""
        from raykernel.core.color import BLACK, RED
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        renderer = SilhouetteRenderer(RenderConfig(width=20, height=20, backend=backend))
        canvas = renderer.render(_unit_sphere_scene())

        assert (canvas.width, canvas.height) == (20, 20)
        assert canvas.get(10, 10) == RED
        assert canvas.get(0, 0) == BLACK
        assert canvas.get(19, 19) == BLACK
        assert canvas.get(0, 19) == BLACK

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_custom_colors(self, backend):
        """Test hit and background colors come from the config."""
        from raykernel.core.color import Color
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        config = RenderConfig(
            width=20,
            height=20,
            hit_color=Color(0.0, 0.0, 1.0),
            background=Color(0.1, 0.1, 0.1),
            backend=backend,
        )
        canvas = SilhouetteRenderer(config).render(_unit_sphere_scene())
        assert canvas.get(10, 10) == Color(0.0, 0.0, 1.0)
        assert canvas.get(0, 0) == Color(0.1, 0.1, 0.1)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_empty_scene(self, backend):
        """Test an empty scene renders only background."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.scene.manager import Scene

        canvas = SilhouetteRenderer(RenderConfig(width=8, height=8, backend=backend)).render(Scene())
        assert np.all(canvas.pixels == 0.0)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_sphere_behind_eye(self, backend):
        """Test a sphere behind the eye is not drawn."""
        from raykernel.core.matrix import translation
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.scene.manager import Scene

        scene = Scene()
        scene.add_sphere(translation(0.0, 0.0, -20.0))
        canvas = SilhouetteRenderer(RenderConfig(width=8, height=8, backend=backend)).render(scene)
        assert np.all(canvas.pixels == 0.0)

    def test_backends_agree(self):
        """Test both backends paint exactly the same pixels."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        scene = _unit_sphere_scene()
        fast = SilhouetteRenderer(RenderConfig(width=20, height=20, backend="taichi")).render(scene)
        slow = SilhouetteRenderer(RenderConfig(width=20, height=20, backend="python")).render(scene)

        np.testing.assert_array_equal(fast.pixels, slow.pixels)
        assert np.count_nonzero(fast.pixels[:, :, 0]) > 0

    def test_silhouette_is_symmetric_disc(self):
        """Test the unit sphere renders as a disc centred on pixel (10, 10)."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        canvas = SilhouetteRenderer(RenderConfig(width=20, height=20)).render(_unit_sphere_scene())
        mask = canvas.pixels[:, :, 0] > 0.5
        # Row and column 10 pass through the centre
        assert mask[10, 10]
        assert mask[10, 10 - 8] == mask[10, 10 + 8]
        assert mask[10 - 8, 10] == mask[10 + 8, 10]
        assert not mask[10, 1]

    def test_taichi_backend_rejects_other_shapes(self):
        """Test the kernel path refuses shapes it cannot cast."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.geometry.shape import Shape
        from raykernel.scene.manager import Scene

        class Nothing(Shape):
            def local_intersects(self, local_ray):
                return []

        scene = Scene()
        scene.add_shape(Nothing())
        with pytest.raises(TypeError):
            SilhouetteRenderer(RenderConfig(width=4, height=4)).render(scene)

    def test_python_backend_accepts_other_shapes(self):
        """Test the object path works with any Shape subclass."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.geometry.shape import Intersection, Shape
        from raykernel.scene.manager import Scene

        class Everywhere(Shape):
            def local_intersects(self, local_ray):
                return [Intersection(1.0, self)]

        scene = Scene()
        scene.add_shape(Everywhere())
        canvas = SilhouetteRenderer(RenderConfig(width=4, height=4, backend="python")).render(scene)
        assert np.all(canvas.pixels[:, :, 0] == 1.0)


class TestProgress:
    """Tests for progress reporting."""

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_callback(self, backend):
        """Test the callback sees each batch boundary once."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        updates = []
        renderer = SilhouetteRenderer(
            RenderConfig(width=20, height=6, batch_size=5, backend=backend)
        )
        renderer.render(_unit_sphere_scene(), callback=lambda done, total: updates.append((done, total)))
        assert updates == [(5, 20), (10, 20), (15, 20), (20, 20)]

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_uneven_batches(self, backend):
        """Test the last batch covers the remaining columns."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        updates = []
        renderer = SilhouetteRenderer(
            RenderConfig(width=7, height=3, batch_size=3, backend=backend)
        )
        renderer.render(_unit_sphere_scene(), callback=lambda done, total: updates.append(done))
        assert updates == [3, 6, 7]

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_render_progressive(self, backend):
        """Test the generator yields progress and returns the canvas."""
        from raykernel.core.color import RED
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer

        renderer = SilhouetteRenderer(
            RenderConfig(width=20, height=20, batch_size=10, backend=backend)
        )
        updates, canvas = _drain(renderer.render_progressive(_unit_sphere_scene()))
        assert updates == [(10, 20), (20, 20)]
        assert canvas.get(10, 10) == RED

    def test_render_progressive_into_canvas(self):
        """Test rendering into a caller-supplied canvas."""
        from raykernel.core.color import RED
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.preview.canvas import Canvas

        canvas = Canvas(20, 20)
        renderer = SilhouetteRenderer(RenderConfig(width=20, height=20))
        _, result = _drain(renderer.render_progressive(_unit_sphere_scene(), canvas))
        assert result is canvas
        assert canvas.get(10, 10) == RED

    def test_render_progressive_size_mismatch(self):
        """Test a canvas of the wrong size is rejected."""
        from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
        from raykernel.preview.canvas import Canvas

        renderer = SilhouetteRenderer(RenderConfig(width=20, height=20))
        with pytest.raises(ValueError):
            _drain(renderer.render_progressive(_unit_sphere_scene(), Canvas(10, 20)))
