"""
Proximity links between particles and towards the pointer.

Every unordered pair closer than the connection distance ``D`` is joined
by a line whose opacity fades linearly from ``base`` at distance zero to
nothing at ``D``.  Particles within the interaction radius ``R`` of the
pointer are also joined to it, using a brighter base opacity.  Pairs at or
beyond the threshold produce no draw call at all.
"""

from __future__ import annotations

import itertools
import math
from collections import defaultdict
from typing import NamedTuple, Optional

import numpy as np
from numpy import ndarray

from config import FieldConfiguration, VisualStyle
from simulation import PointerState
from surface import DrawingSurface, rgba


class Link(NamedTuple):
    i: int
    j: int
    distance: float
    opacity: float


class PointerLink(NamedTuple):
    index: int
    distance: float
    opacity: float


def fade(distance: float, threshold: float, base: float) -> float:
    """Opacity of a link of the given length: ``base * (1 - distance / threshold)``."""
    return base * (1.0 - distance / threshold)


class ProximityLinker:
    """Computes and draws distance-faded links for the current positions.

    The default pair enumeration is the naive all-pairs scan.  With
    ``use_grid`` the particles are bucketed into square cells one
    connection distance wide and only same or adjacent cells are compared;
    the resulting links are identical, in the same ``i < j`` order.
    """

    def __init__(self, config: FieldConfiguration, style: Optional[VisualStyle] = None, use_grid: bool = False):
        self.config = config
        self.style = style or VisualStyle()
        self.use_grid = use_grid
        self._pairs_count: int = -1
        self._ids_pairs: ndarray = np.zeros((0, 2), dtype=int)

    # -------------------------------------------------------------------------
    def _all_pairs(self, count: int) -> ndarray:
        """Index pairs ``(i, j)`` with ``i < j``, cached per particle count."""
        if count != self._pairs_count:
            pairs = list(itertools.combinations(range(count), 2))
            self._ids_pairs = np.asarray(pairs, dtype=int).reshape(-1, 2)
            self._pairs_count = count
        return self._ids_pairs

    def _grid_pairs(self, r: ndarray) -> ndarray:
        """Candidate pairs from same or neighbouring cells, sorted by ``(i, j)``."""
        cell = self.config.connection_distance
        buckets: dict[tuple[int, int], list[int]] = defaultdict(list)
        for idx in range(r.shape[1]):
            key = (math.floor(r[0, idx] / cell), math.floor(r[1, idx] / cell))
            buckets[key].append(idx)
        pairs: list[tuple[int, int]] = []
        for (cx, cy), members in buckets.items():
            for ox in (-1, 0, 1):
                for oy in (-1, 0, 1):
                    others = buckets.get((cx + ox, cy + oy))
                    if not others:
                        continue
                    for i in members:
                        for j in others:
                            if i < j:
                                pairs.append((i, j))
        if not pairs:
            return np.zeros((0, 2), dtype=int)
        arr = np.asarray(pairs, dtype=int)
        order = np.lexsort((arr[:, 1], arr[:, 0]))
        return arr[order]

    # -------------------------------------------------------------------------
    def links(self, r: ndarray) -> list[Link]:
        """Return the links between particles for positions ``r`` (2×N)."""
        count = r.shape[1]
        if count < 2:
            return []
        ids_pairs = self._grid_pairs(r) if self.use_grid else self._all_pairs(count)
        if ids_pairs.size == 0:
            return []
        dx = r[0, ids_pairs[:, 0]] - r[0, ids_pairs[:, 1]]
        dy = r[1, ids_pairs[:, 0]] - r[1, ids_pairs[:, 1]]
        dist = np.sqrt(dx * dx + dy * dy)
        threshold = self.config.connection_distance
        close = dist < threshold
        base = self.style.link_opacity
        return [
            Link(int(i), int(j), float(d), fade(float(d), threshold, base))
            for (i, j), d in zip(ids_pairs[close], dist[close])
        ]

    def pointer_links(self, r: ndarray, pointer: PointerState) -> list[PointerLink]:
        """Return the links from particles to the pointer, empty when it is absent."""
        if not pointer.present or r.shape[1] == 0:
            return []
        dx = pointer.x - r[0]
        dy = pointer.y - r[1]
        dist = np.sqrt(dx * dx + dy * dy)
        radius = self.config.interaction_radius
        base = self.style.pointer_link_opacity
        return [
            PointerLink(int(idx), float(dist[idx]), fade(float(dist[idx]), radius, base))
            for idx in np.flatnonzero(dist < radius)
        ]

    def compute_and_draw(self, r: ndarray, pointer: PointerState, surface: DrawingSurface) -> int:
        """Draw all links for this frame; returns the number of lines drawn."""
        color = self.style.link_color
        width = self.style.line_width
        drawn = 0
        for link in self.links(r):
            surface.draw_line(
                r[0, link.i], r[1, link.i], r[0, link.j], r[1, link.j],
                rgba(color, link.opacity), width,
            )
            drawn += 1
        for link in self.pointer_links(r, pointer):
            surface.draw_line(
                r[0, link.index], r[1, link.index], pointer.x, pointer.y,
                rgba(color, link.opacity), width,
            )
            drawn += 1
        return drawn
