"""Tests for the render options and the Renderer.

Tests cover:
- RenderOptions defaults, presets and validation
- Supersampling with zero jitter matches the single-sample result
- Jittered supersampling
- Image orientation (row 0 at the top)
- Row-batch progress reporting
- Gamma handling and saving
"""

import numpy as np
import pytest


def _setup_supersampling_scene():
    from whitted.camera.pinhole import setup_camera
    from whitted.scene.default_scenes import create_supersampling_scene

    scene, camera = create_supersampling_scene()
    setup_camera(camera)
    return scene


class TestRenderOptions:
    """Tests for RenderOptions."""

    def test_defaults(self):
        """Defaults are a 512x512 single-sample render with 100 bounces."""
        from whitted.core.options import RenderOptions

        options = RenderOptions()

        assert (options.width, options.height) == (512, 512)
        assert options.sample_count == 1
        assert options.jitter_enabled is False
        assert options.gamma == 2.2
        assert options.max_depth == 100

    def test_single_sample_preset(self):
        """One centered sample, gamma on, ambient always added."""
        from whitted.core.options import RenderOptions

        options = RenderOptions.single_sample()

        assert options.sample_count == 1
        assert options.jitter_enabled is False
        assert options.gamma_correct is True
        assert options.ambient_always_added is True

    def test_supersampled_preset(self):
        """Sixteen jittered samples, no gamma, ambient only in shadow."""
        from whitted.core.options import RenderOptions

        options = RenderOptions.supersampled()

        assert options.sample_count == 16
        assert options.jitter_enabled is True
        assert options.gamma_correct is False
        assert options.ambient_always_added is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"sample_count": 0},
            {"gamma": 0.0},
            {"max_depth": 0},
        ],
    )
    def test_invalid_options(self, kwargs):
        """Out-of-range options raise ValueError."""
        from whitted.core.options import RenderOptions

        with pytest.raises(ValueError):
            RenderOptions(**kwargs)


class TestSupersampling:
    """Tests for the sampling driver."""

    def test_zero_jitter_matches_single_sample(self):
        """N identical center samples give exactly the single-sample image."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()

        single = Renderer(RenderOptions(width=16, height=16, sample_count=1))
        single.render()
        single_image = single.get_image_numpy()

        multi = Renderer(RenderOptions(width=16, height=16, sample_count=5))
        multi.render()
        multi_image = multi.get_image_numpy()

        assert np.array_equal(single_image, multi_image)

    def test_jittered_render(self):
        """Jittered samples stay finite and non-negative and cover the scene."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()

        renderer = Renderer(RenderOptions.supersampled(4, width=16, height=16))
        renderer.render()
        image = renderer.get_image_numpy()

        assert image.shape == (16, 16, 3)
        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
        assert image.max() > 0.0

    def test_image_orientation(self):
        """Row 0 is the sky and the last row is the ground; red is on the left."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()

        renderer = Renderer(RenderOptions(width=16, height=16))
        renderer.render()
        image = renderer.get_image_numpy()

        assert image[0, 8].sum() == 0.0
        assert image[15, 8].sum() > 0.0
        # The red sphere at x = -1 fills the left edge of the middle row
        assert image[8, 0, 0] > image[8, 0, 1]


class TestRenderer:
    """Tests for the Renderer class."""

    def test_progress_callback(self):
        """The callback reports rows done after each batch."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()
        renderer = Renderer(RenderOptions(width=8, height=10))
        calls = []

        renderer.render(rows_per_batch=4, callback=lambda done, total: calls.append((done, total)))

        assert calls == [(4, 10), (8, 10), (10, 10)]
        assert renderer.rows_done == 10

    def test_render_progressive_matches_render(self):
        """Rendering through the generator gives the same image."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()
        renderer = Renderer(RenderOptions(width=8, height=8))

        renderer.render()
        expected = renderer.get_image_numpy()

        renderer.reset()
        assert renderer.get_image_numpy().max() == 0.0

        progress = list(renderer.render_progressive(rows_per_batch=3))
        assert progress[-1] == (8, 8)
        assert np.array_equal(renderer.get_image_numpy(), expected)

    def test_invalid_batch_size(self):
        """rows_per_batch must be positive."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        renderer = Renderer(RenderOptions(width=8, height=8))

        with pytest.raises(ValueError, match="rows_per_batch"):
            renderer.render(rows_per_batch=0)

    def test_render_applies_max_depth(self):
        """The renderer pushes its bounce bound to the integrator."""
        from whitted.core.integrator import get_max_depth
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()
        renderer = Renderer(RenderOptions(width=4, height=4, max_depth=3))
        renderer.render()

        assert get_max_depth() == 3

    def test_render_applies_ambient_setting(self):
        """The renderer pushes its ambient option to the lighting state."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer
        from whitted.scene.lighting import get_lighting_info

        _setup_supersampling_scene()
        Renderer(RenderOptions.supersampled(1, width=4, height=4)).render()

        assert get_lighting_info()["ambient_always_added"] is False

    def test_output_image_gamma(self):
        """The output image is gamma corrected only when the options ask for it."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer
        from whitted.preview.display import apply_gamma

        _setup_supersampling_scene()
        renderer = Renderer(RenderOptions(width=8, height=8, gamma_correct=True))
        renderer.render()
        linear = renderer.get_image_numpy()

        assert np.allclose(renderer.get_output_image(), apply_gamma(linear, 2.2))

        renderer.options.gamma_correct = False
        assert np.array_equal(renderer.get_output_image(), linear)

    def test_save_image(self, tmp_path):
        """The output image is written with the requested size."""
        from PIL import Image

        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        _setup_supersampling_scene()
        renderer = Renderer(RenderOptions(width=12, height=8))
        renderer.render()

        path = tmp_path / "out.ppm"
        renderer.save_image(path)

        with Image.open(path) as img:
            assert img.size == (12, 8)
            assert img.mode == "RGB"

    def test_repr(self):
        """Test string representation."""
        from whitted.core.options import RenderOptions
        from whitted.core.renderer import Renderer

        renderer = Renderer(RenderOptions(width=8, height=4, sample_count=2))

        assert repr(renderer) == "Renderer(width=8, height=4, samples=2, jitter=False)"
