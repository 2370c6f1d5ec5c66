"""
Window events feeding the shared view state.

The adapter is the only writer of the surface dimensions and the pointer
state; the frame scheduler and the particle field only read them.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import pygame

from config import ConfigLoader, FieldConfiguration
from simulation import ParticleField, PointerState, SurfaceDimensions
from surface import DrawingSurface

_LOGGER = logging.getLogger(__name__)


class ViewportAdapter:
    """Reacts to resize and pointer input.

    Parameters
    ----------
    field : ParticleField
        Reseeded on every resize.
    surface : DrawingSurface
        Resized to the new viewport before reseeding.
    loader : ConfigLoader, optional
        Source of the density tier when ``retier_on_resize`` is enabled.
    size_provider : callable, optional
        Returns the current viewport ``(width, height)`` when a resize
        carries no size.  Defaults to the surface size.
    retier_on_resize : bool
        Re-evaluate the particle count for the new width on resize.  Off by
        default: the count chosen at startup is kept and only the bounds
        change.
    """

    def __init__(
        self,
        field: ParticleField,
        surface: DrawingSurface,
        loader: Optional[ConfigLoader] = None,
        size_provider: Optional[Callable[[], Tuple[int, int]]] = None,
        retier_on_resize: bool = False,
    ):
        self.field = field
        self.surface = surface
        self.loader = loader or ConfigLoader()
        self._size_provider = size_provider or (lambda: self.surface.size)
        self.retier_on_resize = retier_on_resize
        self.pointer = PointerState()
        self.dimensions = SurfaceDimensions(0.0, 0.0)

    def on_resize(self, size: Optional[Tuple[int, int]] = None) -> None:
        """Resnap the surface to the viewport and reseed the field."""
        width, height = size if size is not None else self._size_provider()
        width, height = max(1, int(width)), max(1, int(height))
        self.surface.resize(width, height)
        self.dimensions = SurfaceDimensions(float(width), float(height))
        config = None
        if self.retier_on_resize:
            config = FieldConfiguration.for_viewport(width, self.loader)
        self.field.reseed(self.dimensions, config)
        _LOGGER.debug("Viewport resized to %dx%d, %d particles", width, height, len(self.field))

    def on_pointer_move(self, x: float, y: float) -> None:
        self.pointer.move(x, y)

    def on_pointer_leave(self) -> None:
        self.pointer.clear()
        _LOGGER.debug("Pointer left the viewport")

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Dispatch a pygame event; returns True when it was consumed."""
        if event.type == pygame.VIDEORESIZE:
            self.on_resize(event.size)
        elif event.type == pygame.MOUSEMOTION:
            self.on_pointer_move(*event.pos)
        elif event.type == pygame.WINDOWLEAVE:
            self.on_pointer_leave()
        else:
            return False
        return True
