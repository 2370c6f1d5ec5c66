from __future__ import annotations

import pygame
import pytest

from surface import PygameSurface, blend, rgba

BACKGROUND = (15, 23, 42)


@pytest.fixture
def target() -> pygame.Surface:
    return pygame.Surface((40, 30))


def pixel(surface: PygameSurface, x: int, y: int) -> tuple[int, int, int]:
    return tuple(surface.target.get_at((x, y)))[:3]


def test_rgba_attaches_alpha() -> None:
    style = rgba((56, 189, 248), 0.5)
    assert style == (56, 189, 248, 0.5)


def test_blend_extremes() -> None:
    assert blend((200, 100, 50, 1.0), BACKGROUND) == (200, 100, 50)
    assert blend((200, 100, 50, 0.0), BACKGROUND) == BACKGROUND
    assert blend((200, 100, 50, 2.0), BACKGROUND) == (200, 100, 50)


def test_clear_fills_background(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    target.fill((255, 255, 255))
    surface.clear()
    assert pixel(surface, 0, 0) == BACKGROUND
    assert pixel(surface, 39, 29) == BACKGROUND


def test_clear_region_only(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    target.fill((255, 255, 255))
    surface.clear((0, 0, 10, 10))
    assert pixel(surface, 5, 5) == BACKGROUND
    assert pixel(surface, 20, 20) == (255, 255, 255)


def test_draw_circle_blends_against_background(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    surface.clear()
    fill = rgba((56, 189, 248), 0.5)
    surface.draw_circle(20, 15, 3, fill)
    assert pixel(surface, 20, 15) == blend(fill, BACKGROUND)


def test_transparent_draws_are_skipped(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    surface.clear()
    surface.draw_circle(20, 15, 3, rgba((255, 255, 255), 0.0))
    surface.draw_line(0, 15, 39, 15, rgba((255, 255, 255), 0.0), 3)
    assert pixel(surface, 20, 15) == BACKGROUND


def test_thick_line_is_drawn(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    surface.clear()
    stroke = rgba((255, 255, 255), 1.0)
    surface.draw_line(0, 15, 39, 15, stroke, 3)
    assert pixel(surface, 20, 15) == (255, 255, 255)


def test_resize_without_factory(target) -> None:
    surface = PygameSurface(target, BACKGROUND)
    surface.resize(64, 48)
    assert surface.size == (64, 48)


def test_resize_uses_factory(target) -> None:
    made: list[tuple[int, int]] = []

    def factory(width: int, height: int) -> pygame.Surface:
        made.append((width, height))
        return pygame.Surface((width, height))

    surface = PygameSurface(target, BACKGROUND, factory=factory)
    surface.resize(0, 50)
    assert made == [(1, 50)]
    assert surface.size == (1, 50)
