"""
Interference theme - wave interference between point sources.

Each source emits sin(2*pi*d / wavelength), where d is the distance from
the pixel to the source lifted `source_distance` out of the image plane.
The squared sum over sources, normalized by sources**2, blends between two
picked colors.
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..core.colors import Color, pick_colors
from ..core.config import Fixed, Randomized, ThemeOptions, coerce_param
from ..core.seeded_random import SeededRandom
from ..core.surface import DrawContext, to_image_data
from .base import AvatarTheme

DEFAULT_SOURCES = Randomized(2, 5, integer=True)
MIN_WAVELENGTH = 1e-6
MAX_SOURCES = 64


@dataclass(frozen=True)
class InterferenceOptions(ThemeOptions):
    sources: Any = None
    wavelength: float = 1.0
    source_area: float = 10.0
    source_distance: float = 1.0

    def __post_init__(self):
        super().__post_init__()
        sources = coerce_param(self.sources, DEFAULT_SOURCES)
        if isinstance(sources, Fixed):
            sources = Fixed(min(max(1, sources.value), MAX_SOURCES))
        object.__setattr__(self, "sources", sources)
        self._clamp("wavelength", cast=float)
        if not self.wavelength > 0:
            object.__setattr__(self, "wavelength", MIN_WAVELENGTH)
        self._clamp("source_area", low=0.0, cast=float)
        self._clamp("source_distance", cast=float)


# =============================================================================
# Field
# =============================================================================

def interference_field(
    size: int,
    sources: np.ndarray,
    wavelength: float = 1.0,
    source_distance: float = 1.0,
) -> np.ndarray:
    """
    Normalized interference intensity for every pixel.

    Args:
        size: Raster side in pixels
        sources: (n, 2) array of source positions in world units
        wavelength: Wave length in world units
        source_distance: Out-of-plane offset of every source

    Returns:
        (size, size) float array in [0, 1]
    """
    sources = np.asarray(sources, dtype=np.float64).reshape(-1, 2)
    # Pixel (0, 0) maps to -1; the far edge stops one pixel short of 1
    coords = np.arange(size, dtype=np.float64) / size * 2 - 1
    x = coords[np.newaxis, :]
    y = coords[:, np.newaxis]

    total = np.zeros((size, size), dtype=np.float64)
    for sx, sy in sources:
        dx = x - sx
        dy = y - sy
        distance = np.sqrt(dx * dx + dy * dy + source_distance * source_distance)
        total += np.sin(distance / wavelength * math.pi * 2)

    n = len(sources)
    return np.minimum(1.0, total * total / (n * n))


def blend_pixels(a: Color, b: Color, t: np.ndarray) -> np.ndarray:
    """Per-pixel lerp between two colors, as RGBA bytes."""
    start = np.array(a.as_tuple(), dtype=np.float64)
    end = np.array(b.as_tuple(), dtype=np.float64)
    return to_image_data(start + (end - start) * t[..., np.newaxis])


# =============================================================================
# Theme
# =============================================================================

class InterferenceTheme(AvatarTheme):
    """Wave interference avatars."""

    name = "interference"
    options_class = InterferenceOptions

    def render(self, ctx: DrawContext, random: SeededRandom, options: InterferenceOptions) -> None:
        size = options.size
        area = options.source_area

        # Clamped after the draw so a custom range never shifts the stream
        count = min(max(1, int(options.sources.resolve(random))), MAX_SOURCES)
        colors = pick_colors(options, random, 2)
        positions = np.array(
            [(random.random_float(-area, area), random.random_float(-area, area)) for _ in range(count)],
            dtype=np.float64,
        )

        field = interference_field(size, positions, options.wavelength, options.source_distance)
        ctx.put_image_data(blend_pixels(colors[0], colors[1], field), 0, 0)
