"""
Configuration for the particle network background.

Defaults mirror the fixed visual constants of the animated background.  An
optional ``config.json`` may override any of them; it is looked up next to
this module first and then in the current working directory.  A missing or
malformed file is ignored and the defaults are used instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple, Union

_LOGGER = logging.getLogger(__name__)

################################################################################
# Defaults
################################################################################

# Viewports narrower than this (pixels) get the reduced particle count.
DENSITY_BREAKPOINT: int = 768

DEFAULTS: dict[str, Any] = {
    'particle_count_narrow': 40,
    'particle_count_wide': 80,
    'density_breakpoint': DENSITY_BREAKPOINT,
    'connection_distance': 150.0,
    'interaction_radius': 150.0,
    'particle_speed': 0.5,
    'particle_size_min': 1.0,
    'particle_size_max': 3.0,
    'background_color': [15, 23, 42],
    'particle_color': [56, 189, 248],
    'particle_alpha': 0.5,
    'link_color': [56, 189, 248],
    'link_opacity': 0.15,
    'pointer_link_opacity': 0.2,
    'line_width': 1,
    'fps': 60,
    'window_size': [1280, 720],
    'retier_on_resize': False,
    'use_spatial_grid': False,
}

_APP_CONFIG_CACHE: dict[Path, dict] = {}


def _find_config_file(path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    if path is not None:
        candidate = Path(path).expanduser()
        return candidate if candidate.exists() else None
    for candidate in (Path(__file__).resolve().parent / 'config.json', Path.cwd() / 'config.json'):
        if candidate.exists():
            return candidate
    return None


def _load_app_config_dict(path: Optional[Union[str, Path]] = None) -> Optional[dict]:
    """Return the parsed application config or ``None`` if unavailable."""
    cfg_path = _find_config_file(path)
    if cfg_path is None:
        return None
    if cfg_path in _APP_CONFIG_CACHE:
        return _APP_CONFIG_CACHE[cfg_path]
    try:
        with cfg_path.open('r', encoding='utf-8') as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Ignoring unreadable config %s: %s", cfg_path, exc)
        return None
    if not isinstance(data, dict):
        _LOGGER.warning("Ignoring config %s: top level is not an object", cfg_path)
        return None
    _APP_CONFIG_CACHE[cfg_path] = data
    _LOGGER.debug("Loaded config from %s", cfg_path)
    return data


def _parse_color(color: Any, fallback: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """Convert a ``#RRGGBB`` string or an ``[r, g, b]`` list into a clamped RGB tuple."""
    if isinstance(color, str):
        value = color.strip().lstrip('#')
        if len(value) != 6:
            return fallback
        try:
            channels = [int(value[i:i + 2], 16) for i in (0, 2, 4)]
        except ValueError:
            return fallback
    elif isinstance(color, (list, tuple)) and len(color) == 3:
        try:
            channels = [int(c) for c in color]
        except (TypeError, ValueError):
            return fallback
    else:
        return fallback
    return tuple(max(0, min(255, c)) for c in channels)


class ConfigLoader:
    """Mapping-style access to the defaults merged with ``config.json``.

    Values from the file are coerced to the type of the matching default;
    a value that cannot be coerced keeps the default.  Unknown keys are
    kept as-is.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, overrides: Optional[dict] = None):
        self._loader: dict[str, Any] = dict(DEFAULTS)
        data = _load_app_config_dict(path) or {}
        for source in (data, overrides or {}):
            for key, value in source.items():
                self._loader[key] = self._coerce(key, value)

    @staticmethod
    def _coerce(key: str, value: Any) -> Any:
        default = DEFAULTS.get(key)
        if default is None:
            return value
        try:
            if isinstance(default, bool):
                if isinstance(value, bool):
                    return value
                if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
                    return value.strip().lower() == 'true'
                raise ValueError("expected true or false")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            if isinstance(default, list):
                if key.endswith('_color'):
                    return list(_parse_color(value, tuple(default)))
                if isinstance(value, (list, tuple)) and len(value) == len(default):
                    return [int(v) for v in value]
                return default
        except (TypeError, ValueError):
            _LOGGER.warning("Invalid value for %s: %r, using default %r", key, value, default)
            return default
        return value

    def __getitem__(self, key: str) -> Any:
        return self._loader[key]

    def __contains__(self, key: object) -> bool:
        return key in self._loader

    def get(self, key: str, default: Any = None) -> Any:
        return self._loader.get(key, default)


################################################################################
# Derived settings
################################################################################

@dataclass(frozen=True)
class FieldConfiguration:
    """Simulation parameters fixed for the lifetime of a session.

    Attributes
    ----------
    particle_count: int
        Number of particles created by every reseed.
    connection_distance: float
        Pair distance (pixels) below which two particles are linked.
    interaction_radius: float
        Pointer distance (pixels) below which particles are repelled from
        and linked to the pointer.
    particle_speed: float
        Base speed in pixels per tick; initial velocity components are drawn
        from ``[-speed/2, speed/2]`` and the repulsion nudge is scaled by it.
    size_range: tuple of float
        Bounds of the uniformly drawn particle radius.
    """

    particle_count: int = DEFAULTS['particle_count_wide']
    connection_distance: float = DEFAULTS['connection_distance']
    interaction_radius: float = DEFAULTS['interaction_radius']
    particle_speed: float = DEFAULTS['particle_speed']
    size_range: Tuple[float, float] = (DEFAULTS['particle_size_min'], DEFAULTS['particle_size_max'])

    def __post_init__(self) -> None:
        if self.particle_count < 0:
            raise ValueError("particle_count must be >= 0")
        if self.connection_distance <= 0:
            raise ValueError("connection_distance must be > 0")
        if self.interaction_radius <= 0:
            raise ValueError("interaction_radius must be > 0")
        if self.particle_speed < 0:
            raise ValueError("particle_speed must be >= 0")
        low, high = self.size_range
        if low <= 0 or high < low:
            raise ValueError("size_range must satisfy 0 < min <= max")

    @staticmethod
    def density_tier(viewport_width: float, loader: Optional[ConfigLoader] = None) -> int:
        """Return the particle count for a viewport of the given width."""
        loader = loader or ConfigLoader()
        if viewport_width < loader['density_breakpoint']:
            return loader['particle_count_narrow']
        return loader['particle_count_wide']

    @classmethod
    def for_viewport(cls, viewport_width: float, loader: Optional[ConfigLoader] = None) -> 'FieldConfiguration':
        loader = loader or ConfigLoader()
        return cls(
            particle_count=cls.density_tier(viewport_width, loader),
            connection_distance=loader['connection_distance'],
            interaction_radius=loader['interaction_radius'],
            particle_speed=loader['particle_speed'],
            size_range=(loader['particle_size_min'], loader['particle_size_max']),
        )


@dataclass(frozen=True)
class VisualStyle:
    """Colours and base opacities used when painting the network."""

    background: Tuple[int, int, int] = tuple(DEFAULTS['background_color'])
    particle_color: Tuple[int, int, int] = tuple(DEFAULTS['particle_color'])
    particle_alpha: float = DEFAULTS['particle_alpha']
    link_color: Tuple[int, int, int] = tuple(DEFAULTS['link_color'])
    link_opacity: float = DEFAULTS['link_opacity']
    pointer_link_opacity: float = DEFAULTS['pointer_link_opacity']
    line_width: int = DEFAULTS['line_width']

    @classmethod
    def from_loader(cls, loader: Optional[ConfigLoader] = None) -> 'VisualStyle':
        loader = loader or ConfigLoader()
        return cls(
            background=tuple(loader['background_color']),
            particle_color=tuple(loader['particle_color']),
            particle_alpha=loader['particle_alpha'],
            link_color=tuple(loader['link_color']),
            link_opacity=loader['link_opacity'],
            pointer_link_opacity=loader['pointer_link_opacity'],
            line_width=loader['line_width'],
        )
