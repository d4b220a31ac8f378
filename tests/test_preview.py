"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Gamma correction and the clamp + gamma display pipeline
- PNG export
- RMSE computation
- InteractivePreview key handling without opening a window

Note: Tests avoid displaying actual windows by not calling show_preview
or InteractivePreview.run in automated tests.
"""

import os

import numpy as np
import pytest
from PIL import Image as PILImage


class TestApplyGamma:
    """Test gamma correction."""

    def test_gamma_1_no_change(self):
        """Test that gamma 1.0 returns the input unchanged."""
        from whitted.preview.display import apply_gamma

        image = np.random.rand(4, 4, 3).astype(np.float32)
        assert np.array_equal(apply_gamma(image, gamma=1.0), image)

    def test_gamma_brightens_midtones(self):
        """Test that gamma 2.2 brightens midtones."""
        from whitted.preview.display import apply_gamma

        image = np.full((2, 2, 3), 0.5, dtype=np.float32)
        result = apply_gamma(image, gamma=2.2)

        assert np.allclose(result, 0.5 ** (1.0 / 2.2), atol=1e-6)
        assert np.all(result > 0.5)

    def test_gamma_preserves_black_and_white(self):
        """Test that 0 and 1 are fixed points."""
        from whitted.preview.display import apply_gamma

        image = np.array([[[0.0, 1.0, 0.0]]], dtype=np.float32)
        assert np.allclose(apply_gamma(image), image)

    def test_gamma_clamps_negative(self):
        """Test that negative input does not produce NaN."""
        from whitted.preview.display import apply_gamma

        image = np.full((2, 2, 3), -0.5, dtype=np.float32)
        result = apply_gamma(image)

        assert not np.any(np.isnan(result))
        assert np.all(result == 0.0)

    @pytest.mark.parametrize("gamma", [0.0, -2.2])
    def test_non_positive_gamma_raises(self, gamma):
        """Test that gamma must be positive."""
        from whitted.preview.display import apply_gamma

        with pytest.raises(ValueError, match="Gamma"):
            apply_gamma(np.zeros((1, 1, 3), dtype=np.float32), gamma=gamma)


class TestProcessImageForDisplay:
    """Test the full display pipeline."""

    def test_clamps_bright_values(self):
        """Test values above 1 display as full intensity."""
        from whitted.preview.display import process_image_for_display

        image = np.full((3, 3, 3), 4.0, dtype=np.float32)
        result = process_image_for_display(image)

        assert np.allclose(result, 1.0)

    def test_linear_when_gamma_1(self):
        """Test gamma 1.0 only clamps."""
        from whitted.preview.display import process_image_for_display

        image = np.array([[[0.25, 1.5, -0.5]]], dtype=np.float32)
        result = process_image_for_display(image, gamma=1.0)

        assert np.allclose(result, [[[0.25, 1.0, 0.0]]])

    def test_output_always_valid(self):
        """Test output is float32 in [0, 1] for any input range."""
        from whitted.preview.display import process_image_for_display

        image = np.random.uniform(-5.0, 5.0, (8, 8, 3)).astype(np.float32)
        result = process_image_for_display(image)

        assert result.dtype == np.float32
        assert np.all(result >= 0.0)
        assert np.all(result <= 1.0)


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_output_type(self):
        """Test output dtype and shape."""
        from whitted.preview.export import image_to_uint8

        result = image_to_uint8(np.zeros((4, 5, 3), dtype=np.float32))
        assert result.dtype == np.uint8
        assert result.shape == (4, 5, 3)

    def test_black_and_white(self):
        """Test 0 maps to 0 and 1 maps to 255."""
        from whitted.preview.export import image_to_uint8

        image = np.array([[[0.0, 1.0, 2.0]]], dtype=np.float32)
        assert image_to_uint8(image).tolist() == [[[0, 255, 255]]]

    def test_linear_rounding(self):
        """Test values are rounded, not truncated."""
        from whitted.preview.export import image_to_uint8

        image = np.full((1, 1, 3), 0.5, dtype=np.float32)
        assert image_to_uint8(image, gamma=1.0)[0, 0, 0] == 128


class TestSavePng:
    """Test PNG export."""

    def test_save_png_from_array(self, tmp_path):
        """Test an array is written as an RGB PNG with matching pixels."""
        from whitted.preview.export import save_png_from_array

        image = np.zeros((6, 10, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)
        path = tmp_path / "array.png"

        save_png_from_array(image, str(path), gamma=1.0)

        with PILImage.open(path) as img:
            assert img.size == (10, 6)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (255, 0, 0)

    def test_save_png_from_array_bad_shape(self, tmp_path):
        """Test non-RGB arrays are rejected."""
        from whitted.preview.export import save_png_from_array

        with pytest.raises(ValueError, match="H, W, 3"):
            save_png_from_array(np.zeros((4, 4), dtype=np.float32), str(tmp_path / "x.png"))

    def test_save_png_from_session(self, tmp_path, matte_material):
        """Test save_png writes the session image."""
        from whitted.core.renderer import RenderSession
        from whitted.preview.export import save_png
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder(light_position=(0.0, 2.0, 0.0))
        builder.add_sphere((0.0, 0.0, -3.0), 1.0, matte_material)
        session = RenderSession(24, 16)
        session.set_scene(builder.build())

        path = tmp_path / "session.png"
        save_png(session, str(path))

        assert os.path.exists(path)
        with PILImage.open(path) as img:
            assert img.size == (24, 16)
            assert np.asarray(img).max() > 0


class TestComputeRmse:
    """Test RMSE computation."""

    def test_rmse_identical_images(self):
        """Test RMSE of identical images is zero."""
        from whitted.preview.export import compute_rmse

        image = np.random.rand(5, 5, 3).astype(np.float32)
        assert compute_rmse(image, image) == 0.0

    def test_rmse_constant_offset(self):
        """Test RMSE of a constant offset equals the offset."""
        from whitted.preview.export import compute_rmse

        a = np.zeros((4, 4, 3), dtype=np.float32)
        b = np.full((4, 4, 3), 0.25, dtype=np.float32)
        assert compute_rmse(a, b) == pytest.approx(0.25)

    def test_rmse_shape_mismatch_raises(self):
        """Test mismatched shapes raise ValueError."""
        from whitted.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))


class TestModuleExports:
    """Test the package re-exports."""

    def test_preview_exports(self):
        """Test all public functions are importable from whitted.preview."""
        import whitted.preview as preview

        for name in preview.__all__:
            assert hasattr(preview, name)


class TestInteractivePreview:
    """Test InteractivePreview without creating a window.

    Only non-GUI paths are exercised; the window is created lazily.
    """

    def test_init_defers_window_creation(self):
        """Test no window exists until it is needed."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        assert preview._window is None
        assert preview.current_preset is None
        assert preview.display_image.shape == (16, 16)

    def test_unknown_initial_preset(self):
        """Test an unknown starting preset raises ValueError."""
        from whitted.preview.interactive import InteractivePreview

        with pytest.raises(ValueError, match="Unknown preset"):
            InteractivePreview(16, 16, initial_preset=7)

    @pytest.mark.parametrize("key", ["q", "Escape"])
    def test_quit_keys(self, key):
        """Test quit keys ask the loop to stop."""
        import taichi as ti

        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        key = ti.ui.ESCAPE if key == "Escape" else key
        assert preview.handle_key(key) is False

    def test_digit_key_switches_preset(self):
        """Test pressing '2' renders preset scene 2."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        preview.select_preset(1)
        assert preview.session.render_count == 1

        assert preview.handle_key("2") is True
        assert preview.current_preset == 2
        assert preview.session.scene.name == "scene two"
        assert preview.session.render_count == 2

    def test_same_preset_rerendered(self):
        """Test pressing the active preset's key renders it again."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        preview.select_preset(1)
        preview.handle_key("1")
        assert preview.session.render_count == 2
        assert preview.current_preset == 1

    def test_other_keys_ignored(self):
        """Test unbound keys keep the loop running and change nothing."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        assert preview.handle_key("9") is True
        assert preview.handle_key("x") is True
        assert preview.current_preset is None

    def test_update_image_validates_shape(self):
        """Test update_image rejects an image of the wrong size."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 8)
        with pytest.raises(ValueError, match="doesn't match"):
            preview.update_image(np.zeros((16, 8, 3), dtype=np.float32))

    def test_update_image_orientation(self):
        """Test the top-left array pixel lands at field (0, height - 1)."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(4, 3, gamma=1.0)
        image = np.zeros((3, 4, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.5, 0.25)
        preview.update_image(image)

        data = preview.display_image.to_numpy()
        assert tuple(data[0, 2]) == pytest.approx((1.0, 0.5, 0.25))

    def test_export_png(self, tmp_path):
        """Test export_png writes the current image."""
        from whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(16, 16)
        preview.select_preset(2)
        path = preview.export_png(str(tmp_path / "export.png"))

        with PILImage.open(path) as img:
            assert img.size == (16, 16)

    def test_is_display_available_returns_bool(self):
        """Test the display check returns a bool."""
        from whitted.preview.interactive import InteractivePreview

        assert isinstance(InteractivePreview.is_display_available(), bool)
