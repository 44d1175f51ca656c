"""
Plasma theme - classic demo-scene plasma.

Three weighted sinusoids (an angled wave, a wave whose axis turns with the
time parameter, and rings around an orbiting center) are summed and mapped
through a looping palette built from three picked colors.

Parameters left unset (or at the legacy -1) are drawn at render time, in
the order: time, scale1, scale2, scale3, angle, weight1, weight2, weight3.
The angle of the first wave is always drawn.
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from ..core.colors import Color, interpolate_colors, pick_colors
from ..core.config import Randomized, ThemeOptions, coerce_param
from ..core.seeded_random import SeededRandom
from ..core.surface import DrawContext, to_image_data
from .base import AvatarTheme

DEFAULT_TIME = Randomized(0.0, math.pi * 2)
DEFAULT_SCALE = Randomized(2.0, 4.0)
DEFAULT_RING_SCALE = Randomized(15.0, 30.0)
DEFAULT_WEIGHT = Randomized(0.5, 1.5)

BASE_COLORS = 3
ZOOM = 1.0


@dataclass(frozen=True)
class PlasmaOptions(ThemeOptions):
    time_offset: Any = None
    scale1: Any = None
    scale2: Any = None
    scale3: Any = None
    weight1: Any = None
    weight2: Any = None
    weight3: Any = None
    palette_size: int = 256

    def __post_init__(self):
        super().__post_init__()
        defaults = {
            "time_offset": DEFAULT_TIME,
            "scale1": DEFAULT_SCALE,
            "scale2": DEFAULT_SCALE,
            "scale3": DEFAULT_RING_SCALE,
            "weight1": DEFAULT_WEIGHT,
            "weight2": DEFAULT_WEIGHT,
            "weight3": DEFAULT_WEIGHT,
        }
        for name, default in defaults.items():
            object.__setattr__(self, name, coerce_param(getattr(self, name), default))
        self._clamp("palette_size", low=1, cast=int)


@dataclass(frozen=True)
class PlasmaParams:
    """Concrete plasma parameters for one render."""
    time: float
    scale1: float
    scale2: float
    scale3: float
    angle1: float
    weight1: float
    weight2: float
    weight3: float


def resolve_params(options: PlasmaOptions, random: SeededRandom) -> PlasmaParams:
    time = options.time_offset.resolve(random)
    scale1 = options.scale1.resolve(random)
    scale2 = options.scale2.resolve(random)
    scale3 = options.scale3.resolve(random)
    angle1 = random.random_float(0, math.pi * 2)
    weight1 = options.weight1.resolve(random)
    weight2 = options.weight2.resolve(random)
    weight3 = options.weight3.resolve(random)
    return PlasmaParams(time, scale1, scale2, scale3, angle1, weight1, weight2, weight3)


# =============================================================================
# Palette
# =============================================================================

def build_palette(base_colors: Sequence[Color], size: int) -> list[Color]:
    """Looping gradient of `size` entries through the base colors and back to the first."""
    n = len(base_colors)
    palette = []
    for i in range(size):
        scaled = i / size * n
        index1 = math.floor(scaled) % n
        index2 = (index1 + 1) % n
        palette.append(interpolate_colors(base_colors[index1], base_colors[index2], scaled - math.floor(scaled)))
    return palette


# =============================================================================
# Field
# =============================================================================

def plasma_field(size: int, params: PlasmaParams, zoom: float = ZOOM) -> np.ndarray:
    """Combined plasma value per pixel, nominally within [-3, 3]."""
    coords = (np.arange(size, dtype=np.float64) / size - 0.5) * zoom
    x = coords[np.newaxis, :]
    y = coords[:, np.newaxis]
    t = params.time

    # Angled wave
    v1 = np.sin(math.pi * params.scale1 * (math.cos(params.angle1) * x + math.sin(params.angle1) * y) + t)

    # Axis turning with time
    angle = t / 2
    v2 = np.sin(params.scale2 * (math.pi * math.sin(angle) * x + y * math.cos(angle)) + t)

    # Rings around an orbiting center
    cx = x + 0.5 * math.sin(t / 5)
    cy = y + 0.5 * math.cos(t / 3)
    distance = np.sqrt(cx * cx + cy * cy)
    v3 = np.sin(np.sqrt(params.scale3 * distance * distance + 1) + t)

    return params.weight1 * v1 + params.weight2 * v2 + params.weight3 * v3


def palette_indices(values: np.ndarray, palette_size: int) -> np.ndarray:
    """Map plasma values to palette indices, clamped to the palette."""
    raw = np.floor((values + 3) / 6 * (palette_size - 1))
    # Remainder keeps the sign of the dividend, so negatives clamp to 0
    wrapped = np.fmod(raw, palette_size)
    return np.clip(wrapped, 0, palette_size - 1).astype(np.intp)


# =============================================================================
# Theme
# =============================================================================

class PlasmaTheme(AvatarTheme):
    """Plasma field avatars."""

    name = "plasma"
    options_class = PlasmaOptions

    def render(self, ctx: DrawContext, random: SeededRandom, options: PlasmaOptions) -> None:
        params = resolve_params(options, random)
        base_colors = pick_colors(options, random, BASE_COLORS)

        palette = np.array([c.as_tuple() for c in build_palette(base_colors, options.palette_size)], dtype=np.float64)
        indices = palette_indices(plasma_field(options.size, params), options.palette_size)

        ctx.put_image_data(to_image_data(palette[indices]), 0, 0)
