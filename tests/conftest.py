from __future__ import annotations

import os
from typing import Any

import numpy as np
import pytest

from config import ConfigLoader, FieldConfiguration

# Windowed tests run on the headless SDL driver.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class RecordingSurface:
    """Drawing surface double that records every call."""

    def __init__(self, width: int = 800, height: int = 600):
        self.width = width
        self.height = height
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        self.width, self.height = width, height
        self.calls.append(('resize', (width, height)))

    def clear(self, region=None) -> None:
        self.calls.append(('clear', (region,)))

    def draw_circle(self, x, y, radius, fill) -> None:
        self.calls.append(('circle', (x, y, radius, fill)))

    def draw_line(self, x1, y1, x2, y2, stroke, line_width=1) -> None:
        self.calls.append(('line', (x1, y1, x2, y2, stroke, line_width)))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def of(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def loader(tmp_path) -> ConfigLoader:
    # Point at a missing file so only the built-in defaults apply.
    return ConfigLoader(tmp_path / 'missing.json')


@pytest.fixture
def field_config() -> FieldConfiguration:
    return FieldConfiguration()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
