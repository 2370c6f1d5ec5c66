"""
Particle state for the network background.

Particles drift linearly across a rectangular surface, bounce off its edges
and are nudged away from the pointer when it comes close.  Positions and
velocities for the whole field are stored in continuous ``2 x N`` arrays;
``Particle`` applies the same rule to a single point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy import ndarray

from config import FieldConfiguration

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceDimensions:
    """Width and height of the drawing surface in pixels."""

    width: float
    height: float


@dataclass
class PointerState:
    """Pointer position in surface pixels, or absent when ``x``/``y`` are ``None``.

    A single instance is written by the viewport adapter and read by the
    field update and the linker during the next frame.
    """

    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def present(self) -> bool:
        return self.x is not None and self.y is not None

    def move(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def clear(self) -> None:
        self.x = None
        self.y = None


def update_particles(
    r: ndarray,
    v: ndarray,
    bounds: SurfaceDimensions,
    pointer: PointerState,
    interaction_radius: float,
    speed: float,
) -> None:
    """Advance every column of ``r``/``v`` by one tick, in place.

    Parameters
    ----------
    r, v: ndarray
        ``2 x N`` arrays of positions and velocities (pixels, pixels/tick).
    bounds: SurfaceDimensions
        Edges used for reflection.
    pointer: PointerState
        Current pointer; ignored when absent.
    interaction_radius: float
        Distance below which the pointer repels a particle.
    speed: float
        Base particle speed, scales the repulsion nudge.

    Notes
    -----
    Reflection flips a velocity component only while the particle is beyond
    an edge and still moving outward, so the sign flips once per crossing.
    Positions are never clamped; a particle may sit up to one step outside
    the surface for a tick.  Repulsion displaces the position directly
    (velocity is untouched) by ``(R - d) / R * speed`` along the pointer to
    particle direction.  A particle exactly on the pointer is left alone.
    """
    r += v

    outward_x = ((r[0] < 0.0) & (v[0] < 0.0)) | ((r[0] > bounds.width) & (v[0] > 0.0))
    outward_y = ((r[1] < 0.0) & (v[1] < 0.0)) | ((r[1] > bounds.height) & (v[1] > 0.0))
    v[0, outward_x] *= -1.0
    v[1, outward_y] *= -1.0

    if not pointer.present or r.shape[1] == 0:
        return
    dx = pointer.x - r[0]
    dy = pointer.y - r[1]
    dist = np.sqrt(dx * dx + dy * dy)
    mask = (dist < interaction_radius) & (dist > 0.0)
    if not np.any(mask):
        return
    d = dist[mask]
    force = (interaction_radius - d) / interaction_radius
    r[0, mask] -= dx[mask] / d * force * speed
    r[1, mask] -= dy[mask] / d * force * speed


@dataclass
class Particle:
    """Position, velocity and radius of a single point."""

    x: float
    y: float
    vx: float
    vy: float
    size: float

    def update(self, bounds: SurfaceDimensions, pointer: PointerState, config: FieldConfiguration) -> None:
        """Advance this particle by one tick using the field update rule."""
        r = np.array([[self.x], [self.y]], dtype=float)
        v = np.array([[self.vx], [self.vy]], dtype=float)
        update_particles(r, v, bounds, pointer, config.interaction_radius, config.particle_speed)
        self.x, self.y = float(r[0, 0]), float(r[1, 0])
        self.vx, self.vy = float(v[0, 0]), float(v[1, 0])


class ParticleField:
    """Owns every particle on the surface.

    The field is created empty; ``reseed`` fills it for a given surface size
    and is called again on every resize, discarding all previous particles.
    """

    def __init__(self, config: FieldConfiguration, rng: Optional[np.random.Generator] = None):
        self.config = config
        self._rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self._r: ndarray = np.zeros((2, 0), dtype=float)
        self._v: ndarray = np.zeros((2, 0), dtype=float)
        self._size: ndarray = np.zeros((0,), dtype=float)
        # Bumped on every reseed so callers can tell a fresh population apart.
        self.generation: int = 0

    # -------------------------------------------------------------------------
    @property
    def r(self) -> ndarray:
        """Return particle positions as a 2×N array."""
        return self._r

    @property
    def v(self) -> ndarray:
        """Return particle velocities as a 2×N array."""
        return self._v

    @property
    def sizes(self) -> ndarray:
        return self._size

    def __len__(self) -> int:
        return self._r.shape[1]

    # -------------------------------------------------------------------------
    def reseed(self, bounds: SurfaceDimensions, config: Optional[FieldConfiguration] = None) -> None:
        """Replace all particles with ``config.particle_count`` fresh ones.

        Positions are uniform over the surface, velocity components uniform
        in ``[-speed/2, speed/2]`` and radii uniform in ``size_range``.
        """
        if config is not None:
            self.config = config
        count = self.config.particle_count
        half_speed = self.config.particle_speed / 2.0
        low, high = self.config.size_range
        x = self._rng.uniform(0.0, bounds.width, size=count)
        y = self._rng.uniform(0.0, bounds.height, size=count)
        self._r = np.vstack((x, y))
        self._v = self._rng.uniform(-half_speed, half_speed, size=(2, count))
        self._size = self._rng.uniform(low, high, size=count)
        self.generation += 1
        _LOGGER.debug(
            "Reseeded %d particles on %gx%g (generation %d)",
            count, bounds.width, bounds.height, self.generation,
        )

    def advance(self, bounds: SurfaceDimensions, pointer: PointerState) -> None:
        """Move every particle one tick."""
        update_particles(
            self._r,
            self._v,
            bounds,
            pointer,
            self.config.interaction_radius,
            self.config.particle_speed,
        )
