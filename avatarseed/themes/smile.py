"""
Smile theme - a procedural smiley face.

An outer disc in the first picked color, clipped to itself, holds a second
disc in the second color with two oval eyes and a mouth. The face is
shifted and tilted by a few random degrees so no two look quite aligned.
"""

import math
from dataclasses import dataclass

from ..core.colors import BLACK, WHITE, Color, pick_background_color, pick_colors, relative_luminance
from ..core.config import ThemeOptions
from ..core.seeded_random import SeededRandom
from ..core.surface import DrawContext
from .base import AvatarTheme

# Features switch to white ink below this face luminance
DARK_THRESHOLD = 0.35

FACE_SCALE = 0.7
LINE_WIDTH = 0.04
EYE_RADIUS_X = 0.025
EYE_RADIUS_Y = 0.055
EYE_HEIGHT = 0.125
MOUTH_HEIGHT = 0.15
GRIN_DEPTH = 0.25
GRIN_CORNER = 0.04
SMILE_DEPTH = 0.18


@dataclass(frozen=True)
class SmileOptions(ThemeOptions):
    wide_smile_probability: float = 0.5

    def __post_init__(self):
        super().__post_init__()
        self._clamp("wide_smile_probability", low=0.0, high=1.0, cast=float)


def ink_color(face: Color) -> Color:
    """Eye and mouth color that stays visible on the given face."""
    return WHITE if relative_luminance(face) < DARK_THRESHOLD else BLACK


class SmileTheme(AvatarTheme):
    """Smiley face avatars."""

    name = "smile"
    options_class = SmileOptions

    def render(self, ctx: DrawContext, random: SeededRandom, options: SmileOptions) -> None:
        size = options.size
        outer, inner = pick_colors(options, random, 2)
        background = pick_background_color(options, random)
        ink = ink_color(inner)

        ctx.fill_style = background
        ctx.fill_rect(0, 0, size, size)

        center = size / 2
        radius = math.ceil(size / 2)

        ctx.fill_style = outer
        ctx.begin_path()
        ctx.arc(center, center, radius, 0, math.pi * 2)
        ctx.fill()

        ctx.save()
        ctx.begin_path()
        ctx.arc(center, center, radius, 0, math.pi * 2)
        ctx.clip()
        self._draw_face(ctx, random, options, inner, ink)
        ctx.restore()

    def _draw_face(self, ctx: DrawContext, random: SeededRandom, options: SmileOptions, face: Color, ink: Color):
        size = options.size
        face_size = size * FACE_SCALE

        mouth_width = random.random_float(0.3, 0.4)
        eye_offset = random.random_float(0.2, 0.25)
        wide = random.random_boolean(options.wide_smile_probability)

        shift_x = random.random_float(-size * 0.1, size * 0.1)
        shift_y = random.random_float(-size * 0.02, size * 0.02)
        rotation = random.random_float(-math.pi / 12, math.pi / 12)

        ctx.save()
        ctx.translate(size / 2, size / 2)
        ctx.translate(shift_x, shift_y)
        ctx.rotate(rotation)

        # shift_y applies twice to the face disc
        ctx.fill_style = face
        ctx.begin_path()
        ctx.arc(0, shift_y, size / 2, 0, math.pi * 2)
        ctx.fill()

        ctx.stroke_style = ink
        ctx.fill_style = ink
        ctx.line_width = size * LINE_WIDTH

        eye_y = -face_size * EYE_HEIGHT
        for eye_x in (-face_size * eye_offset, face_size * eye_offset):
            ctx.begin_path()
            ctx.ellipse(eye_x, eye_y, size * EYE_RADIUS_X, size * EYE_RADIUS_Y, 0, 0, math.pi * 2)
            ctx.fill()

        if wide:
            draw_grin(ctx, face_size, mouth_width * 0.5)
        else:
            draw_smile(ctx, face_size, mouth_width * 0.5)

        ctx.restore()


def draw_grin(ctx: DrawContext, face_size: float, half_width: float):
    """Open :D mouth with rounded top corners, filled."""
    top = face_size * MOUTH_HEIGHT
    left = -face_size * half_width
    right = face_size * half_width
    depth = face_size * GRIN_DEPTH
    corner = face_size * GRIN_CORNER

    ctx.begin_path()
    ctx.move_to(left + corner, top)
    ctx.line_to(right - corner, top)
    ctx.quadratic_curve_to(right, top, right, top + corner)
    ctx.line_to(right, top + corner)
    ctx.bezier_curve_to(
        face_size * half_width * 0.5, top + depth,
        -face_size * half_width * 0.5, top + depth,
        left, top + corner,
    )
    ctx.line_to(left, top + corner)
    ctx.quadratic_curve_to(left, top, left + corner, top)
    ctx.fill()


def draw_smile(ctx: DrawContext, face_size: float, half_width: float):
    """Closed :) mouth, a single stroked curve."""
    top = face_size * MOUTH_HEIGHT
    depth = face_size * SMILE_DEPTH

    ctx.begin_path()
    ctx.move_to(-face_size * half_width, top)
    ctx.bezier_curve_to(
        -face_size * half_width * 0.5, top + depth * 0.7,
        face_size * half_width * 0.5, top + depth * 0.7,
        face_size * half_width, top,
    )
    ctx.stroke()
