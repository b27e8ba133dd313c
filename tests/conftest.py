import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from constants import FIREWORKS_DEFAULTS
from utils import RandomSource, merge_options


class RecordingCanvas:
    """Drawing sink that records every call instead of rendering."""

    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.calls = []

    def clear(self):
        self.calls.append(("clear",))

    def set_blend_mode(self, additive):
        self.calls.append(("set_blend_mode", additive))

    def stroke_polyline(self, points, color, width):
        self.calls.append(("stroke_polyline", list(points), color, width))

    def fill_circle(self, center, radius, color, alpha=1.0):
        self.calls.append(("fill_circle", center, radius, color, alpha))

    def draw_calls(self):
        return [c for c in self.calls if c[0] in ("stroke_polyline", "fill_circle")]

    def reset(self):
        self.calls = []


class ScriptedRandom(RandomSource):
    """Replays a fixed sequence of values in [0, 1), cycling when exhausted."""

    def __init__(self, values):
        super().__init__(seed=0)
        self.values = list(values)
        self.index = 0

    def random(self):
        value = self.values[self.index % len(self.values)]
        self.index += 1
        return value

    def random_array(self, size):
        return np.array([self.random() for _ in range(size)], dtype=np.float64)


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def fireworks_options():
    def build(**overrides):
        return merge_options(FIREWORKS_DEFAULTS, overrides)
    return build
