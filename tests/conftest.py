"""Shared pytest fixtures."""

import random

import matplotlib

matplotlib.use("Agg")

import pytest

from config import WantedCard


class ScriptedRandom:
    """Random source that replays fixed values, for exact trial assertions."""

    def __init__(self, randoms=(), indices=()):
        self.randoms = list(randoms)
        self.indices = list(indices)

    def random(self):
        assert self.randoms, "scripted random() values exhausted"
        return self.randoms.pop(0)

    def randrange(self, n):
        assert self.indices, "scripted randrange() values exhausted"
        index = self.indices.pop(0)
        assert 0 <= index < n
        return index

    @property
    def exhausted(self):
        return not self.randoms and not self.indices


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def seeded_rng():
    """Seeded generator for statistical checks."""
    return random.Random(20240601)


@pytest.fixture
def wanted_cards():
    """Three wanted cards, the first one cannot be crafted."""
    return [
        WantedCard(id="a", name="ミリアム", count=1, disable_craft=True),
        WantedCard(id="b", name="アーク", count=2),
        WantedCard(id="c", name="ベルナデッタ", count=1),
    ]
