"""Core utilities - seeded randomness, colors, option resolution and the raster surface."""

from .seeded_random import SeededRandom, string_hash
from .colors import (
    Color,
    ColorOptions,
    parse_color,
    rgb_to_hsl,
    hsl_to_rgb,
    interpolate_colors,
    relative_luminance,
    vary_color,
    pick_background_color,
    pick_foreground_color,
    pick_colors,
)
from .config import (
    Fixed,
    Randomized,
    GeneratorOptions,
    ThemeOptions,
    resolve_options,
    load_options_file,
)
from .surface import DrawContext, Surface, SurfaceError, get_surface

__all__ = [
    # Randomness
    "SeededRandom",
    "string_hash",
    # Colors
    "Color",
    "ColorOptions",
    "parse_color",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "interpolate_colors",
    "relative_luminance",
    "vary_color",
    "pick_background_color",
    "pick_foreground_color",
    "pick_colors",
    # Options
    "Fixed",
    "Randomized",
    "GeneratorOptions",
    "ThemeOptions",
    "resolve_options",
    "load_options_file",
    # Raster surface
    "Surface",
    "DrawContext",
    "SurfaceError",
    "get_surface",
]
