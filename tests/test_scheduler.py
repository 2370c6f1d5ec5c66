from __future__ import annotations

from dataclasses import dataclass, field as dc_field

import numpy as np
import pytest

from config import FieldConfiguration, VisualStyle
from linker import ProximityLinker
from scheduler import FrameScheduler, SchedulerState
from simulation import ParticleField, PointerState, SurfaceDimensions


@dataclass
class View:
    dimensions: SurfaceDimensions = SurfaceDimensions(400.0, 300.0)
    pointer: PointerState = dc_field(default_factory=PointerState)


class FakeClock:
    def __init__(self) -> None:
        self.calls: list[int] = []

    def tick(self, framerate: int = 0) -> int:
        self.calls.append(framerate)
        return 16


@pytest.fixture
def view() -> View:
    return View()


@pytest.fixture
def scheduler(surface, view, rng) -> FrameScheduler:
    config = FieldConfiguration(particle_count=12)
    particles = ParticleField(config, rng=rng)
    particles.reseed(view.dimensions)
    return FrameScheduler(particles, ProximityLinker(config), surface, view, fps=30)


def test_tick_clears_then_draws_particles_then_links(scheduler, surface) -> None:
    scheduler.tick()
    names = surface.names()
    assert names[0] == 'clear'
    assert surface.of('clear')[0] == ((0, 0, 400, 300),)
    circles = [i for i, name in enumerate(names) if name == 'circle']
    lines = [i for i, name in enumerate(names) if name == 'line']
    assert len(circles) == 12
    if lines:
        assert max(circles) < min(lines)
    assert scheduler.frames == 1


def test_tick_advances_and_paints_current_positions(scheduler, surface) -> None:
    before = scheduler.field.r.copy()
    scheduler.tick()
    after = scheduler.field.r
    assert not np.array_equal(before, after)
    style = VisualStyle()
    for idx, (x, y, radius, fill) in enumerate(surface.of('circle')):
        assert (x, y) == (after[0, idx], after[1, idx])
        assert radius == scheduler.field.sizes[idx]
        assert fill == (56, 189, 248, style.particle_alpha)


def test_paused_tick_redraws_without_advancing(scheduler, surface) -> None:
    scheduler.pause()
    assert scheduler.state is SchedulerState.PAUSED
    before = scheduler.field.r.copy()
    scheduler.tick()
    assert np.array_equal(before, scheduler.field.r)
    assert len(surface.of('circle')) == 12

    scheduler.toggle_pause()
    assert scheduler.state is SchedulerState.RUNNING
    scheduler.tick()
    assert not np.array_equal(before, scheduler.field.r)


def test_pointer_change_is_visible_to_next_tick(scheduler, surface, view) -> None:
    scheduler.tick()
    pointer_lines = lambda: [a for a in surface.of('line') if (a[2], a[3]) == (200.0, 150.0)]
    assert pointer_lines() == []

    view.pointer.move(200.0, 150.0)
    scheduler.field.r[:, 0] = (210.0, 150.0)
    scheduler.field.v[:, 0] = 0.0
    scheduler.tick()
    assert pointer_lines()


def test_run_stops_after_max_frames(scheduler) -> None:
    clock = FakeClock()
    pumps: list[int] = []
    presents: list[int] = []
    scheduler.clock = clock
    scheduler.present = lambda: presents.append(scheduler.frames)

    frames = scheduler.run(pump=lambda: pumps.append(scheduler.frames), max_frames=5)

    assert frames == 5
    assert scheduler.state is SchedulerState.STOPPED
    assert pumps == [0, 1, 2, 3, 4]
    assert presents == [1, 2, 3, 4, 5]
    assert clock.calls == [30] * 4


def test_pump_can_stop_the_loop(scheduler, surface) -> None:
    assert scheduler.run(pump=scheduler.stop) == 0
    assert surface.calls == []


def test_stopped_scheduler_ignores_ticks(scheduler, surface) -> None:
    scheduler.stop()
    scheduler.tick()
    scheduler.resume()
    assert scheduler.state is SchedulerState.STOPPED
    assert surface.calls == []
    assert scheduler.frames == 0
