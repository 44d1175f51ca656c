"""
Seeded random number source for deterministic avatar generation.

Strings are hashed to a 32-bit seed (FNV-1a accumulation followed by a
Murmur-style avalanche tail), then a 32-bit LCG produces the stream.
All arithmetic is integer mod 2^32, so the sequence is identical on
every platform and must never change: stored avatars depend on it.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, TypeVar, Union

from .colors import Color, hsl_to_rgb

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF

FNV_OFFSET = 2166136261
FNV_PRIME = 16777619

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 0x100000000


def string_hash(text: str) -> int:
    """Hash a string to an unsigned 32-bit integer.

    Iterates UTF-16 code units, so a non-BMP character contributes its
    two surrogate halves.
    """
    h = FNV_OFFSET
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h ^ unit) * FNV_PRIME) & MASK_32

    h = (h + (h << 13)) & MASK_32
    h ^= h >> 7
    h = (h + (h << 3)) & MASK_32
    h ^= h >> 17
    h = (h + (h << 5)) & MASK_32
    return h


class SeededRandom:
    """Linear congruential generator seeded from a string or integer."""

    def __init__(self, seed: Union[str, int]):
        if isinstance(seed, str):
            self.seed = string_hash(seed)
        else:
            self.seed = int(seed) & MASK_32
        self.current = self.seed

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed}, current={self.current})"

    def random(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        self.current = (self.current * LCG_MULTIPLIER + LCG_INCREMENT) & MASK_32
        return self.current / LCG_MODULUS

    def random_int(self, min_value: int, max_value: int) -> int:
        """Random integer in [min_value, max_value)."""
        return math.floor(self.random() * (max_value - min_value)) + min_value

    def random_float(self, min_value: float, max_value: float) -> float:
        """Random float in [min_value, max_value)."""
        return self.random() * (max_value - min_value) + min_value

    def random_choice(self, items: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        return items[self.random_int(0, len(items))]

    def random_boolean(self, probability: float = 0.5) -> bool:
        return self.random() < probability

    def random_color(
        self,
        hue: Optional[tuple[int, int]] = None,
        saturation: Optional[tuple[int, int]] = None,
        lightness: Optional[tuple[int, int]] = None,
    ) -> Color:
        """Random HSL color with integer components, drawn as hue, saturation, lightness."""
        h = self.random_int(*hue) if hue else self.random_int(0, 360)
        s = self.random_int(*saturation) if saturation else self.random_int(50, 100)
        l = self.random_int(*lightness) if lightness else self.random_int(40, 70)
        return hsl_to_rgb(h, s, l)

    def random_rgb(self) -> Color:
        r = self.random_int(0, 256)
        g = self.random_int(0, 256)
        b = self.random_int(0, 256)
        return Color(r, g, b)

    def reset(self) -> None:
        """Rewind to the original seed."""
        self.current = self.seed
