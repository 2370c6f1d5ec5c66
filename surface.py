"""
Drawing surface used by the network renderer.

The renderer only needs to clear the surface, fill circles and stroke line
segments.  ``PygameSurface`` maps those calls onto a ``pygame.Surface``.
Styles are ``(r, g, b, alpha)`` tuples with ``alpha`` in ``[0, 1]``.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Tuple

import pygame

Color = Tuple[int, int, int]
Style = Tuple[int, int, int, float]


def rgba(color: Color, alpha: float) -> Style:
    """Attach an opacity to an RGB colour."""
    return (int(color[0]), int(color[1]), int(color[2]), float(alpha))


def blend(style: Style, background: Color) -> Color:
    """Composite a translucent style over an opaque background colour."""
    r, g, b, a = style
    a = max(0.0, min(1.0, a))
    return (
        int(round(background[0] + (r - background[0]) * a)),
        int(round(background[1] + (g - background[1]) * a)),
        int(round(background[2] + (b - background[2]) * a)),
    )


class DrawingSurface(Protocol):
    @property
    def size(self) -> Tuple[int, int]: ...

    def resize(self, width: int, height: int) -> None: ...

    def clear(self, region: Optional[Tuple[int, int, int, int]] = None) -> None: ...

    def draw_circle(self, x: float, y: float, radius: float, fill: Style) -> None: ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, stroke: Style, line_width: int = 1) -> None: ...


class PygameSurface:
    """Immediate-mode drawing onto a pygame surface.

    pygame does not blend the alpha channel of primitive draws onto an
    opaque display, so translucent styles are composited against the
    background colour before drawing.  Overlapping translucent shapes
    therefore do not accumulate.

    Parameters
    ----------
    target : pygame.Surface
        Surface to draw on, typically the display surface.
    background : tuple
        RGB colour used by ``clear``.
    factory : callable, optional
        Called with ``(width, height)`` on ``resize``; must return the new
        target surface (for the display this is ``pygame.display.set_mode``).
    """

    def __init__(
        self,
        target: pygame.Surface,
        background: Color = (0, 0, 0),
        factory: Optional[Callable[[int, int], pygame.Surface]] = None,
    ):
        self.target = target
        self.background = tuple(background)
        self._factory = factory

    @property
    def size(self) -> Tuple[int, int]:
        return self.target.get_size()

    def resize(self, width: int, height: int) -> None:
        width, height = max(1, int(width)), max(1, int(height))
        if self._factory is not None:
            self.target = self._factory(width, height)
        elif self.target.get_size() != (width, height):
            self.target = pygame.Surface((width, height))

    def clear(self, region: Optional[Tuple[int, int, int, int]] = None) -> None:
        if region is None:
            self.target.fill(self.background)
        else:
            self.target.fill(self.background, pygame.Rect(region))

    def draw_circle(self, x: float, y: float, radius: float, fill: Style) -> None:
        if fill[3] <= 0.0:
            return
        pygame.draw.circle(self.target, blend(fill, self.background), (x, y), max(1.0, radius))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, stroke: Style, line_width: int = 1) -> None:
        if stroke[3] <= 0.0:
            return
        color = blend(stroke, self.background)
        if line_width <= 1:
            pygame.draw.aaline(self.target, color, (x1, y1), (x2, y2))
        else:
            pygame.draw.line(self.target, color, (x1, y1), (x2, y2), int(line_width))
