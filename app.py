"""
Desktop host for the particle network background.

Opens a resizable pygame window, wires the viewport adapter to the event
queue and runs the frame scheduler until the window is closed.  If no
display can be opened the background is simply not shown.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from config import ConfigLoader, FieldConfiguration, VisualStyle
from linker import ProximityLinker
from scheduler import FrameScheduler
from simulation import ParticleField
from surface import PygameSurface
from viewport import ViewportAdapter

_LOGGER = logging.getLogger(__name__)

WINDOW_TITLE = "Particle Network"


class App:
    def __init__(
        self,
        loader: ConfigLoader,
        window_size: Optional[Tuple[int, int]] = None,
        seed: Optional[int] = None,
    ):
        """
        Create the window and every component of the animation.

        Parameters
        ----------
        loader : ConfigLoader
            Merged configuration.
        window_size : tuple, optional
            Initial window size; defaults to ``loader['window_size']``.
        seed : int, optional
            Seed for particle placement, for reproducible runs.

        Raises
        ------
        pygame.error
            When no display surface can be created.
        """
        pygame.init()
        self.loader = loader
        self.window_size: Tuple[int, int] = tuple(window_size or loader['window_size'])
        self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # The density tier is fixed from the startup width.
        self.field_config = FieldConfiguration.for_viewport(self.window_size[0], loader)
        self.style = VisualStyle.from_loader(loader)
        self.surface = PygameSurface(self.screen, self.style.background, factory=self._set_mode)
        self.field = ParticleField(self.field_config, rng=np.random.default_rng(seed))
        self.linker = ProximityLinker(self.field_config, self.style, use_grid=loader['use_spatial_grid'])
        self.viewport = ViewportAdapter(
            self.field,
            self.surface,
            loader,
            size_provider=pygame.display.get_window_size,
            retier_on_resize=loader['retier_on_resize'],
        )
        self.scheduler = FrameScheduler(
            self.field,
            self.linker,
            self.surface,
            self.viewport,
            self.style,
            clock=self.clock,
            present=pygame.display.flip,
            fps=loader['fps'],
        )
        # Initial sizing counts as the first resize.
        self.viewport.on_resize(self.window_size)
        _LOGGER.info(
            "Window %dx%d, %d particles, spatial grid %s",
            self.window_size[0], self.window_size[1], self.field_config.particle_count,
            'on' if self.linker.use_grid else 'off',
        )

    def _set_mode(self, width: int, height: int) -> pygame.Surface:
        self.window_size = (width, height)
        self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        return self.screen

    def _check_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.scheduler.stop()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.scheduler.stop()
                elif event.key == pygame.K_SPACE:
                    self.scheduler.toggle_pause()
            else:
                self.viewport.handle_event(event)

    def run(self, max_frames: Optional[int] = None) -> int:
        try:
            return self.scheduler.run(self._check_events, max_frames=max_frames)
        finally:
            pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Animated particle network background')
    parser.add_argument('--width', type=int, default=None,
                        help='Initial window width in pixels')
    parser.add_argument('--height', type=int, default=None,
                        help='Initial window height in pixels')
    parser.add_argument('--fps', type=int, default=None,
                        help='Target frame rate')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to a config.json overriding the defaults')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for particle placement')
    parser.add_argument('--frames', type=int, default=None,
                        help='Stop after this many frames')
    parser.add_argument('--grid', action='store_true',
                        help='Use a spatial grid for the proximity scan')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    overrides: dict = {}
    if args.fps is not None:
        overrides['fps'] = args.fps
    if args.grid:
        overrides['use_spatial_grid'] = True
    loader = ConfigLoader(args.config, overrides)
    width, height = loader['window_size']
    window_size = (args.width or width, args.height or height)

    try:
        app = App(loader, window_size=window_size, seed=args.seed)
    except pygame.error as exc:
        _LOGGER.warning("Drawing surface unavailable, background disabled: %s", exc)
        pygame.quit()
        return 0
    app.run(max_frames=args.frames)
    return 0


if __name__ == '__main__':
    sys.exit(main())
