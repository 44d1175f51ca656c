"""Shared test fixtures."""

import hashlib

import pytest

from avatarseed.core.seeded_random import SeededRandom
from avatarseed.core.surface import Surface


def pixel_digest(surface: Surface) -> str:
    """Stable fingerprint of a surface's pixel bytes."""
    return hashlib.sha256(surface.pixels.tobytes()).hexdigest()


@pytest.fixture
def rng():
    """Fresh generator seeded from a fixed identifier."""
    return SeededRandom("alice@example.com")


@pytest.fixture
def surface():
    """Small blank surface."""
    return Surface(8)


@pytest.fixture
def sample_ids():
    """Distinct identifiers for seed-sensitivity checks."""
    return [f"user-{i}@example.com" for i in range(40)]


@pytest.fixture
def digest():
    """Pixel fingerprint function."""
    return pixel_digest
