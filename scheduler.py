"""
Frame loop for the particle network.

One tick clears the surface, advances the field, paints every particle and
then the proximity links.  ``run`` repeats ticks on the display cadence:
input is dispatched before each tick, the frame is presented after it and
the clock then waits for the next slot, so ticks never overlap.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional, Protocol

from config import VisualStyle
from linker import ProximityLinker
from simulation import ParticleField, PointerState, SurfaceDimensions
from surface import DrawingSurface, rgba

_LOGGER = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    RUNNING = 'running'
    PAUSED = 'paused'
    STOPPED = 'stopped'


class SharedViewState(Protocol):
    dimensions: SurfaceDimensions
    pointer: PointerState


class FrameClock(Protocol):
    def tick(self, framerate: int = 0) -> int: ...


class FrameScheduler:
    """Drives the clear / update / draw / link cycle.

    Parameters
    ----------
    field : ParticleField
        Particles to advance and paint.
    linker : ProximityLinker
        Draws the links once per tick over the advanced positions.
    surface : DrawingSurface
        Target of every draw call.
    view : object
        Exposes ``dimensions`` and ``pointer``; read at the start of each
        tick so input handled before the tick is visible to it.
    style : VisualStyle, optional
        Particle fill colour and opacity.
    clock : object, optional
        Anything with ``tick(fps)``, e.g. ``pygame.time.Clock``.  Without a
        clock ``run`` does not wait between frames.
    present : callable, optional
        Called after each tick to show the frame (``pygame.display.flip``).
    fps : int
        Target frame rate handed to the clock.
    """

    def __init__(
        self,
        field: ParticleField,
        linker: ProximityLinker,
        surface: DrawingSurface,
        view: SharedViewState,
        style: Optional[VisualStyle] = None,
        clock: Optional[FrameClock] = None,
        present: Optional[Callable[[], None]] = None,
        fps: int = 60,
    ):
        self.field = field
        self.linker = linker
        self.surface = surface
        self.view = view
        self.style = style or VisualStyle()
        self.clock = clock
        self.present = present
        self.fps = fps
        self.state: SchedulerState = SchedulerState.RUNNING
        self.frames: int = 0

    # -------------------------------------------------------------------------
    def pause(self) -> None:
        if self.state is SchedulerState.RUNNING:
            self.state = SchedulerState.PAUSED
            _LOGGER.info("Animation paused at frame %d", self.frames)

    def resume(self) -> None:
        if self.state is SchedulerState.PAUSED:
            self.state = SchedulerState.RUNNING
            _LOGGER.info("Animation resumed at frame %d", self.frames)

    def toggle_pause(self) -> None:
        if self.state is SchedulerState.PAUSED:
            self.resume()
        else:
            self.pause()

    def stop(self) -> None:
        if self.state is not SchedulerState.STOPPED:
            self.state = SchedulerState.STOPPED
            _LOGGER.info("Animation stopped after %d frames", self.frames)

    # -------------------------------------------------------------------------
    def tick(self) -> None:
        """Render one frame.  A paused scheduler redraws without advancing."""
        if self.state is SchedulerState.STOPPED:
            return
        bounds = self.view.dimensions
        pointer = self.view.pointer
        self.surface.clear((0, 0, int(bounds.width), int(bounds.height)))

        if self.state is SchedulerState.RUNNING:
            self.field.advance(bounds, pointer)

        fill = rgba(self.style.particle_color, self.style.particle_alpha)
        r = self.field.r
        sizes = self.field.sizes
        for idx in range(len(self.field)):
            self.surface.draw_circle(r[0, idx], r[1, idx], sizes[idx], fill)

        self.linker.compute_and_draw(r, pointer, self.surface)
        self.frames += 1

    def run(self, pump: Optional[Callable[[], None]] = None, max_frames: Optional[int] = None) -> int:
        """Tick until stopped; returns the number of frames rendered.

        ``pump`` is called before every tick to dispatch pending input and
        may call ``stop``.  ``max_frames`` stops the loop after that many
        frames in total.
        """
        _LOGGER.info("Animation started with %d particles", len(self.field))
        while self.state is not SchedulerState.STOPPED:
            if pump is not None:
                pump()
                if self.state is SchedulerState.STOPPED:
                    break
            self.tick()
            if self.present is not None:
                self.present()
            if max_frames is not None and self.frames >= max_frames:
                self.stop()
                break
            if self.clock is not None:
                self.clock.tick(self.fps)
        return self.frames
