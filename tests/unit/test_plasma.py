"""Tests for the plasma theme."""

import math

import numpy as np
import pytest

from avatarseed.core.colors import Color
from avatarseed.core.config import Fixed, Randomized
from avatarseed.core.seeded_random import SeededRandom
from avatarseed.themes.plasma import (
    PlasmaOptions,
    PlasmaParams,
    PlasmaTheme,
    build_palette,
    palette_indices,
    plasma_field,
    resolve_params,
)

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)


class TestOptions:
    """Tests for PlasmaOptions."""

    def test_defaults_are_randomized(self):
        options = PlasmaOptions(id="p", size=8)
        assert options.time_offset == Randomized(0.0, math.pi * 2)
        assert options.scale1 == Randomized(2.0, 4.0)
        assert options.scale3 == Randomized(15.0, 30.0)
        assert options.weight2 == Randomized(0.5, 1.5)
        assert options.palette_size == 256

    def test_pinned_and_sentinel(self):
        options = PlasmaOptions(id="p", size=8, scale1=3, weight1=-1)
        assert options.scale1 == Fixed(3.0)
        assert options.weight1 == Randomized(0.5, 1.5)

    def test_palette_size_clamped(self):
        assert PlasmaOptions(id="p", size=8, palette_size=0).palette_size == 1


class TestResolveParams:
    """Tests for parameter draw order."""

    def test_draw_order(self):
        """time, scale1-3, angle, weight1-3 are drawn in that order."""
        params = resolve_params(PlasmaOptions(id="p", size=8), SeededRandom("order"))
        rng = SeededRandom("order")
        assert params.time == rng.random_float(0, math.pi * 2)
        assert params.scale1 == rng.random_float(2, 4)
        assert params.scale2 == rng.random_float(2, 4)
        assert params.scale3 == rng.random_float(15, 30)
        assert params.angle1 == rng.random_float(0, math.pi * 2)
        assert params.weight1 == rng.random_float(0.5, 1.5)
        assert params.weight2 == rng.random_float(0.5, 1.5)
        assert params.weight3 == rng.random_float(0.5, 1.5)

    def test_pinned_skip_draws_but_angle_is_always_drawn(self):
        options = PlasmaOptions(
            id="p", size=8, time_offset=0, scale1=2, scale2=2, scale3=20, weight1=1, weight2=1, weight3=1,
        )
        params = resolve_params(options, SeededRandom("angle"))
        assert params.angle1 == SeededRandom("angle").random_float(0, math.pi * 2)
        assert params.time == 0
        assert params.scale3 == 20


class TestPalette:
    """Tests for build_palette and palette_indices."""

    def test_loops_through_base_colors(self):
        palette = build_palette([RED, GREEN, BLUE], 6)
        assert palette[0] == RED
        assert palette[2] == GREEN
        assert palette[4] == BLUE
        assert palette[5] == Color(127.5, 0, 127.5)

    def test_palette_length(self):
        assert len(build_palette([RED, GREEN, BLUE], 256)) == 256

    def test_indices_span(self):
        values = np.array([-3.0, 0.0, 3.0])
        assert palette_indices(values, 256).tolist() == [0, 127, 255]

    def test_negative_indices_clamped(self):
        values = np.array([-10.0, -3.5])
        assert palette_indices(values, 256).tolist() == [0, 0]

    def test_out_of_range_wraps_before_clamping(self):
        """Values past 3 wrap around the palette instead of saturating."""
        # floor(4.5 / 6 * 255) = 191
        assert palette_indices(np.array([1.5]), 256).tolist() == [191]
        # floor(9.1 / 6 * 255) = 386, 386 % 256 = 130
        assert palette_indices(np.array([6.1]), 256).tolist() == [130]


class TestField:
    """Tests for plasma_field."""

    def test_bounded_by_weights(self):
        params = PlasmaParams(1.0, 3.0, 3.0, 20.0, 0.5, 1.5, 1.5, 1.5)
        field = plasma_field(16, params)
        assert field.shape == (16, 16)
        assert np.abs(field).max() <= 4.5 + 1e-9

    def test_matches_formula(self):
        params = PlasmaParams(0.7, 2.5, 3.5, 18.0, 1.1, 0.9, 1.2, 0.6)
        field = plasma_field(4, params)
        x = 3 / 4 - 0.5
        y = 1 / 4 - 0.5
        t = params.time
        v1 = math.sin(math.pi * params.scale1 * (math.cos(params.angle1) * x + math.sin(params.angle1) * y) + t)
        v2 = math.sin(params.scale2 * (math.pi * math.sin(t / 2) * x + y * math.cos(t / 2)) + t)
        cx = x + 0.5 * math.sin(t / 5)
        cy = y + 0.5 * math.cos(t / 3)
        v3 = math.sin(math.sqrt(params.scale3 * (cx * cx + cy * cy) + 1) + t)
        expected = params.weight1 * v1 + params.weight2 * v2 + params.weight3 * v3
        assert field[1, 3] == pytest.approx(expected)


class TestPlasmaTheme:
    """Tests for rendering."""

    def test_colors_come_from_palette(self):
        surface = PlasmaTheme().generate(
            id="pal", size=16, foreground=["#000000", "#000000", "#000000"], interpolate=False,
        )
        assert not surface.rgb().any()
        assert (surface.pixels[:, :, 3] == 255).all()

    def test_pinned_parameters_change_output(self):
        a = PlasmaTheme().generate(id="pin", size=16)
        b = PlasmaTheme().generate(id="pin", size=16, scale3=15)
        assert not np.array_equal(a.pixels, b.pixels)
