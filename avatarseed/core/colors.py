"""Color model and palette resolution for avatar themes.

Palettes may be given as:
- a single color: "#f80", "#ff8800", (255, 136, 0) or a Color
- a flat list of colors
- a list of color lists (coordinated sets, e.g. themed palettes)

Every function here draws from the caller's SeededRandom, so color
choice consumes the same deterministic stream as shape choice.
Malformed palette input never raises: it degrades to neutral gray or to
generated contrasting colors.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

if TYPE_CHECKING:
    from .seeded_random import SeededRandom

logger = logging.getLogger(__name__)


# =============================================================================
# Color value
# =============================================================================

@dataclass(frozen=True)
class Color:
    """RGB color with 0-255 channels. Channels may be fractional until painted."""
    r: float
    g: float
    b: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def to_rgb8(self) -> tuple[int, int, int]:
        """Round half up and clamp each channel to 0-255."""
        return tuple(max(0, min(255, math.floor(c + 0.5))) for c in self.as_tuple())

    @property
    def hex(self) -> str:
        """Get hex color string."""
        r, g, b = self.to_rgb8()
        return f"#{r:02x}{g:02x}{b:02x}"

    @property
    def css(self) -> str:
        """Get CSS rgb() string."""
        r, g, b = self.to_rgb8()
        return f"rgb({r}, {g}, {b})"


ColorValue = Union[str, Color, Sequence[float]]
ColorPalette = Union[ColorValue, Sequence[ColorValue], Sequence[Sequence[ColorValue]]]

NEUTRAL_GRAY = Color(128, 128, 128)
WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)

DEFAULT_BACKGROUND = "#ffffff"


@dataclass(frozen=True)
class ColorOptions:
    """Palette and jitter settings shared by every themed generator."""
    background: Optional[Any] = None
    foreground: Optional[Any] = None
    interpolate: bool = True
    hue_variation: float = 0.0
    saturation_variation: float = 0.0
    lightness_variation: float = 0.0

    def __post_init__(self):
        for name in ("hue_variation", "saturation_variation", "lightness_variation"):
            value = getattr(self, name)
            if not isinstance(value, Real) or not value >= 0:
                object.__setattr__(self, name, 0.0)


# =============================================================================
# Parsing and conversion
# =============================================================================

def parse_color(value: ColorValue) -> Color:
    """Parse a color value to RGB. Unrecognized values yield neutral gray."""
    if isinstance(value, Color):
        return value

    if isinstance(value, str):
        if value.startswith("#"):
            digits = value[1:]
            if len(digits) == 3:
                digits = "".join(ch * 2 for ch in digits)
            if len(digits) == 6:
                try:
                    return Color(
                        int(digits[0:2], 16),
                        int(digits[2:4], 16),
                        int(digits[4:6], 16),
                    )
                except ValueError:
                    pass
        logger.debug("Unrecognized color %r, using neutral gray", value)
        return NEUTRAL_GRAY

    if _is_triple(value):
        return Color(value[0], value[1], value[2])

    return NEUTRAL_GRAY


def rgb_to_hsl(color: Color) -> tuple[float, float, float]:
    """Convert RGB to (hue degrees, saturation %, lightness %)."""
    r = color.r / 255
    g = color.g / 255
    b = color.b / 255

    high = max(r, g, b)
    low = min(r, g, b)
    l = (high + low) / 2

    if high == low:
        return 0.0, 0.0, l * 100

    d = high - low
    s = d / (2 - high - low) if l > 0.5 else d / (high + low)

    if high == r:
        h = ((g - b) / d + (6 if g < b else 0)) / 6
    elif high == g:
        h = ((b - r) / d + 2) / 6
    else:
        h = ((r - g) / d + 4) / 6

    return h * 360, s * 100, l * 100


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Color:
    """Convert (hue degrees, saturation %, lightness %) to RGB."""
    h = h / 360
    s = s / 100
    l = l / 100

    if s == 0:
        gray = l * 255
        return Color(gray, gray, gray)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    return Color(
        _hue_to_channel(p, q, h + 1 / 3) * 255,
        _hue_to_channel(p, q, h) * 255,
        _hue_to_channel(p, q, h - 1 / 3) * 255,
    )


def interpolate_colors(a: Color, b: Color, t: float) -> Color:
    """Linear interpolation per channel, t in [0, 1]."""
    return Color(
        a.r + (b.r - a.r) * t,
        a.g + (b.g - a.g) * t,
        a.b + (b.b - a.b) * t,
    )


def relative_luminance(color: Color) -> float:
    """Perceived brightness in [0, 1] using Rec. 601 weights."""
    return (0.299 * color.r + 0.587 * color.g + 0.114 * color.b) / 255


def vary_color(color: Color, random: "SeededRandom", options: ColorOptions) -> Color:
    """Jitter hue, saturation and lightness by the configured amounts.

    Returns the input unchanged when no variation is configured, so exact
    palette colors survive.
    """
    hue_var = options.hue_variation
    sat_var = options.saturation_variation
    light_var = options.lightness_variation

    if hue_var <= 0 and sat_var <= 0 and light_var <= 0:
        return color

    h, s, l = rgb_to_hsl(color)

    if hue_var > 0:
        h = (h + random.random_float(-hue_var, hue_var) + 360) % 360
    if sat_var > 0:
        s = max(0.0, min(100.0, s + random.random_float(-sat_var, sat_var)))
    if light_var > 0:
        l = max(0.0, min(100.0, l + random.random_float(-light_var, light_var)))

    return hsl_to_rgb(h, s, l)


# =============================================================================
# Palette shape helpers
# =============================================================================

def _is_triple(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(isinstance(c, Real) and not isinstance(c, bool) for c in value)
    )


def is_single_color(value: Any) -> bool:
    """True for one color value, False for a list of colors."""
    return isinstance(value, (str, Color)) or _is_triple(value)


def _is_color_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_nested_palette(palette: Sequence[Any]) -> bool:
    first = palette[0]
    return _is_color_list(first) and not is_single_color(first)


def _inner_lists(palette: Sequence[Any]) -> list[Sequence[ColorValue]]:
    """Members of a list-of-lists palette that are lists themselves; anything else is dropped."""
    return [member for member in palette if _is_color_list(member)]


# =============================================================================
# Single picks
# =============================================================================

def _pick_from_color_list(colors: Sequence[ColorValue], random: "SeededRandom", interpolate: bool) -> Color:
    if len(colors) == 0:
        return NEUTRAL_GRAY

    if len(colors) == 1 or not interpolate:
        return parse_color(random.random_choice(colors))

    index = random.random_int(0, len(colors) - 1)
    first = parse_color(colors[index])
    second = parse_color(colors[(index + 1) % len(colors)])
    t = random.random()
    return interpolate_colors(first, second, t)


def _pick_from_palette(palette: ColorPalette, random: "SeededRandom", interpolate: bool) -> Color:
    if is_single_color(palette):
        return parse_color(palette)

    if _is_color_list(palette) and len(palette) > 0:
        if _is_nested_palette(palette):
            color_lists = _inner_lists(palette)
            chosen = random.random_choice(color_lists)
            return _pick_from_color_list(chosen, random, interpolate)
        return _pick_from_color_list(palette, random, interpolate)

    logger.debug("Unusable palette %r, using neutral gray", palette)
    return NEUTRAL_GRAY


def pick_background_color(options: ColorOptions, random: "SeededRandom") -> Color:
    palette = options.background if options.background is not None else DEFAULT_BACKGROUND
    color = _pick_from_palette(palette, random, options.interpolate)
    return vary_color(color, random, options)


def pick_foreground_color(options: ColorOptions, random: "SeededRandom") -> Color:
    """Pick one foreground color, or a random vivid color when none is configured."""
    if options.foreground is not None:
        color = _pick_from_palette(options.foreground, random, options.interpolate)
    else:
        color = hsl_to_rgb(
            random.random_float(0, 360),
            random.random_float(60, 90),
            random.random_float(40, 70),
        )
    return vary_color(color, random, options)


# =============================================================================
# Multiple picks
# =============================================================================

def pick_colors(
    options: ColorOptions,
    random: "SeededRandom",
    count: int,
    source: str = "foreground",
) -> list[Color]:
    """
    Pick `count` coordinated colors from the background or foreground palette.

    - no palette: evenly spaced hues on a randomly rotated color wheel
    - single color: hue-shifted variants in 30 degree steps around it
    - flat list: consecutive entries from a random offset (interpolate=False),
      or blends of adjacent entries sharing one random t
    - list of lists: one inner list, or element-wise blends of two adjacent
      inner lists sharing one random t
    """
    if count == 1:
        if source == "background":
            return [pick_background_color(options, random)]
        return [pick_foreground_color(options, random)]

    palette = options.background if source == "background" else options.foreground

    if palette is None:
        return _contrasting_colors(random, count, options)

    if is_single_color(palette):
        return _color_variations(parse_color(palette), random, count, options)

    if not _is_color_list(palette) or len(palette) == 0:
        logger.debug("Unusable %s palette %r, generating contrasting colors", source, palette)
        return _contrasting_colors(random, count, options)

    if _is_nested_palette(palette):
        return _colors_from_nested(_inner_lists(palette), random, count, options)

    return _colors_from_list(palette, random, count, options.interpolate, options)


def _colors_from_nested(
    color_lists: Sequence[Sequence[ColorValue]],
    random: "SeededRandom",
    count: int,
    options: ColorOptions,
) -> list[Color]:
    if len(color_lists) == 1:
        return _colors_from_list(color_lists[0], random, count, options.interpolate, options)

    if not options.interpolate:
        chosen = random.random_choice(color_lists)
        return _colors_from_list(chosen, random, count, False, options)

    index = random.random_int(0, len(color_lists) - 1)
    first = color_lists[index]
    second = color_lists[(index + 1) % len(color_lists)]
    if len(first) == 0 or len(second) == 0:
        return _contrasting_colors(random, count, options)

    t = random.random()

    result = []
    for i in range(count):
        a = parse_color(first[i % len(first)])
        b = parse_color(second[i % len(second)])
        result.append(vary_color(interpolate_colors(a, b, t), random, options))
    return result


def _colors_from_list(
    colors: Sequence[ColorValue],
    random: "SeededRandom",
    count: int,
    interpolate: bool,
    options: ColorOptions,
) -> list[Color]:
    if len(colors) == 0:
        return _contrasting_colors(random, count, options)

    if len(colors) == 1:
        return _color_variations(parse_color(colors[0]), random, count, options)

    # Offset and t are drawn on both paths to keep the stream aligned
    offset = random.random_int(0, len(colors) - 1)
    t = random.random()

    result = []
    for i in range(count):
        index = (i + offset) % len(colors)
        color = parse_color(colors[index])
        if interpolate:
            following = parse_color(colors[(index + 1) % len(colors)])
            color = interpolate_colors(color, following, t)
        result.append(vary_color(color, random, options))
    return result


def _contrasting_colors(random: "SeededRandom", count: int, options: ColorOptions) -> list[Color]:
    base_hue = random.random_float(0, 360)
    hue_step = 360 / count if count else 0

    result = []
    for i in range(count):
        hue = (base_hue + i * hue_step) % 360
        color = hsl_to_rgb(hue, random.random_float(60, 90), random.random_float(40, 70))
        result.append(vary_color(color, random, options))
    return result


def _color_variations(base: Color, random: "SeededRandom", count: int, options: ColorOptions) -> list[Color]:
    h, s, l = rgb_to_hsl(base)

    result = []
    for i in range(count):
        shift = (i - count // 2) * 30
        color = hsl_to_rgb((h + shift + 360) % 360, s, l)
        result.append(vary_color(color, random, options))
    return result
