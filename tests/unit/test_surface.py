"""Tests for the raster surface and drawing context."""

import base64
import math

import numpy as np
import pytest

from avatarseed.core.colors import BLACK, Color
from avatarseed.core.surface import Surface, SurfaceError, get_surface, to_image_data

RED = (255, 0, 0, 255)
EMPTY = (0, 0, 0, 0)


def painted(surface: Surface) -> np.ndarray:
    """Boolean mask of pixels that are no longer transparent."""
    return surface.pixels[:, :, 3] > 0


class TestSurface:
    """Tests for Surface buffers."""

    def test_square_by_default(self):
        surface = Surface(4)
        assert surface.pixels.shape == (4, 4, 4)
        assert surface.pixels.dtype == np.uint8
        assert not surface.pixels.any()

    def test_rectangular(self):
        surface = Surface(3, 5)
        assert (surface.width, surface.height) == (3, 5)
        assert surface.pixels.shape == (5, 3, 4)

    @pytest.mark.parametrize("size", [0, -3])
    def test_non_positive_size_rejected(self, size):
        with pytest.raises(ValueError):
            Surface(size)

    def test_context_is_cached(self, surface):
        assert surface.get_context() is surface.get_context()

    def test_resize_clears_and_resets(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = "#ff0000"
        ctx.fill_rect(0, 0, 8, 8)
        surface.resize(5)
        assert surface.pixels.shape == (5, 5, 4)
        assert not surface.pixels.any()
        assert ctx.fill_style == BLACK

    def test_rgb_view(self, surface):
        assert surface.rgb().shape == (8, 8, 3)

    def test_repr(self):
        assert repr(Surface(3, 2)) == "Surface(3x2)"


class TestDrawState:
    """Tests for styles, save/restore and transforms."""

    def test_fill_style_parses(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = "#00f"
        assert ctx.fill_style == Color(0, 0, 255)

    def test_save_restore(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = "#f00"
        ctx.save()
        ctx.fill_style = "#00f"
        ctx.translate(3, 3)
        ctx.restore()
        assert ctx.fill_style == Color(255, 0, 0)
        assert ctx.transform == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    def test_unbalanced_restore_ignored(self, surface):
        ctx = surface.get_context()
        ctx.restore()
        assert ctx.fill_style == BLACK

    def test_non_positive_line_width_ignored(self, surface):
        ctx = surface.get_context()
        ctx.line_width = 3
        ctx.line_width = 0
        assert ctx.line_width == 3.0

    def test_translate(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = "#f00"
        ctx.translate(2, 1)
        ctx.fill_rect(0, 0, 1, 1)
        assert tuple(surface.pixels[1, 2]) == RED
        assert painted(surface).sum() == 1

    def test_rotate_half_turn(self, surface):
        """A half turn around (4, 4) maps the rect to the opposite quadrant."""
        ctx = surface.get_context()
        ctx.fill_style = "#f00"
        ctx.translate(4, 4)
        ctx.rotate(math.pi)
        ctx.fill_rect(0, 0, 2, 2)
        expected = np.zeros((8, 8), dtype=bool)
        expected[2:4, 2:4] = True
        assert np.array_equal(painted(surface), expected)

    def test_reset_transform(self, surface):
        ctx = surface.get_context()
        ctx.translate(5, 5)
        ctx.reset_transform()
        ctx.fill_rect(0, 0, 1, 1)
        assert painted(surface)[0, 0]


class TestPrimitives:
    """Tests for filling, stroking and clipping."""

    def test_fill_rect(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = "#ff0000"
        ctx.fill_rect(1, 1, 2, 2)
        expected = np.zeros((8, 8), dtype=bool)
        expected[1:3, 1:3] = True
        assert np.array_equal(painted(surface), expected)
        assert tuple(surface.pixels[1, 1]) == RED

    def test_fill_rect_samples_pixel_centers(self, surface):
        """A rect covering less than half a pixel column leaves it empty."""
        ctx = surface.get_context()
        ctx.fill_rect(0.6, 0, 1, 1)
        assert painted(surface)[0].tolist() == [False, True] + [False] * 6

    def test_fill_rect_clipped_to_bounds(self, surface):
        ctx = surface.get_context()
        ctx.fill_rect(-10, -10, 100, 100)
        assert painted(surface).all()

    def test_paint_rounds_fractional_color(self, surface):
        ctx = surface.get_context()
        ctx.fill_style = Color(127.5, 0.49, 254.6)
        ctx.fill_rect(0, 0, 1, 1)
        assert tuple(surface.pixels[0, 0]) == (128, 0, 255, 255)

    def test_arc_fill(self):
        surface = Surface(10)
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.arc(5, 5, 3, 0, math.pi * 2)
        ctx.fill()
        mask = painted(surface)
        assert mask[5, 5]
        assert mask[4, 4]
        assert not mask[0, 0]
        assert not mask[5, 1]

    def test_ellipse_is_stretched(self):
        surface = Surface(20)
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.ellipse(10, 10, 2, 8, 0, 0, math.pi * 2)
        ctx.fill()
        mask = painted(surface)
        assert mask[4, 10]
        assert not mask[10, 4]

    def test_rect_path(self, surface):
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.rect(2, 2, 4, 4)
        ctx.fill()
        expected = np.zeros((8, 8), dtype=bool)
        expected[2:6, 2:6] = True
        assert np.array_equal(painted(surface), expected)

    def test_bezier_fill(self, surface):
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.move_to(0, 0)
        ctx.bezier_curve_to(0, 8, 8, 8, 8, 0)
        ctx.fill()
        mask = painted(surface)
        assert mask[2, 4]
        assert not mask[7, 4]

    def test_quadratic_fill(self, surface):
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.move_to(0, 0)
        ctx.quadratic_curve_to(4, 12, 8, 0)
        ctx.fill()
        mask = painted(surface)
        assert mask[3, 4]
        assert not mask[7, 0]

    def test_stroke_line(self, surface):
        ctx = surface.get_context()
        ctx.stroke_style = "#f00"
        ctx.line_width = 1
        ctx.begin_path()
        ctx.move_to(0, 2.5)
        ctx.line_to(8, 2.5)
        ctx.stroke()
        expected = np.zeros((8, 8), dtype=bool)
        expected[2, :] = True
        assert np.array_equal(painted(surface), expected)

    def test_clip(self, surface):
        ctx = surface.get_context()
        ctx.save()
        ctx.begin_path()
        ctx.rect(0, 0, 2, 2)
        ctx.clip()
        ctx.fill_rect(0, 0, 8, 8)
        ctx.restore()
        expected = np.zeros((8, 8), dtype=bool)
        expected[0:2, 0:2] = True
        assert np.array_equal(painted(surface), expected)

    def test_restore_removes_clip(self, surface):
        ctx = surface.get_context()
        ctx.save()
        ctx.begin_path()
        ctx.rect(0, 0, 2, 2)
        ctx.clip()
        ctx.restore()
        ctx.fill_rect(0, 0, 8, 8)
        assert painted(surface).all()

    def test_empty_path_fill_is_noop(self, surface):
        ctx = surface.get_context()
        ctx.begin_path()
        ctx.fill()
        assert not surface.pixels.any()


class TestPixelBuffer:
    """Tests for image data access."""

    def test_create_image_data(self, surface):
        data = surface.get_context().create_image_data(3, 2)
        assert data.shape == (2, 3, 4)
        assert not data.any()

    def test_put_image_data(self, surface):
        ctx = surface.get_context()
        block = np.full((2, 2, 4), 200, dtype=np.uint8)
        ctx.put_image_data(block, 3, 3)
        expected = np.zeros((8, 8), dtype=bool)
        expected[3:5, 3:5] = True
        assert np.array_equal(painted(surface), expected)

    def test_put_image_data_partially_off_surface(self, surface):
        block = np.arange(16, dtype=np.uint8).reshape(2, 2, 4)
        surface.get_context().put_image_data(block, -1, -1)
        assert tuple(surface.pixels[0, 0]) == tuple(block[1, 1])
        assert painted(surface).sum() == 1

    def test_put_image_data_ignores_transform(self, surface):
        ctx = surface.get_context()
        ctx.translate(4, 4)
        ctx.put_image_data(np.full((1, 1, 4), 9, dtype=np.uint8), 0, 0)
        assert tuple(surface.pixels[0, 0]) == (9, 9, 9, 9)

    def test_bad_shape_raises(self, surface):
        with pytest.raises(SurfaceError):
            surface.blit(0, 0, np.zeros((2, 2, 3), dtype=np.uint8))

    def test_get_image_data_is_copy(self, surface):
        data = surface.get_context().get_image_data()
        data[:] = 255
        assert not surface.pixels.any()

    def test_to_image_data_rounds_half_even(self):
        rgb = np.array([[[0.5, 1.5, 2.5], [300.0, -4.0, 254.5]]])
        data = to_image_data(rgb)
        assert data.dtype == np.uint8
        assert data[0, 0].tolist() == [0, 2, 2, 255]
        assert data[0, 1].tolist() == [255, 0, 254, 255]


class TestEncoding:
    """Tests for Pillow encoding helpers."""

    def test_to_image(self, surface):
        image = surface.to_image()
        assert image.size == (8, 8)
        assert image.mode == "RGBA"

    def test_png_bytes(self, surface):
        assert surface.to_bytes("PNG").startswith(b"\x89PNG")

    def test_jpeg_bytes(self, surface):
        assert surface.to_bytes("jpeg").startswith(b"\xff\xd8")

    def test_data_url(self, surface):
        url = surface.to_data_url()
        prefix = "data:image/png;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]).startswith(b"\x89PNG")


class TestGetSurface:
    """Tests for surface creation and reuse."""

    def test_creates_new(self):
        surface, ctx = get_surface(6)
        assert isinstance(surface, Surface)
        assert surface.width == 6
        assert ctx is surface.get_context()

    def test_reuses_and_resizes(self, surface):
        reused, ctx = get_surface(12, surface)
        assert reused is surface
        assert surface.pixels.shape == (12, 12, 4)

    def test_unusable_existing_raises(self):
        with pytest.raises(SurfaceError):
            get_surface(8, object())

    def test_missing_context_raises(self):
        class Broken:
            def resize(self, size):
                pass

            def get_context(self):
                return None

        with pytest.raises(SurfaceError):
            get_surface(8, Broken())

    def test_surface_error_is_runtime_error(self):
        assert issubclass(SurfaceError, RuntimeError)
