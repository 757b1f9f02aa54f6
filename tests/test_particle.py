# test_particle.py
import math

import pytest

from particle import ContainerBounds, Particle, RunState
from rng import RandomSource


def test_scenario_moves_then_reflects_off_right_wall():
    bounds = ContainerBounds(100, 100)
    p = Particle(50, 50, 10, velocity=(10, 0))

    p.advance(bounds)
    assert p.center == (60, 50)

    p.advance(bounds)
    p.advance(bounds)
    assert p.center == (80, 50)
    assert p.velocity == (10, 0)

    # 80 + 10 + 10 >= 100, so this tick reflects instead of moving right.
    p.advance(bounds)
    assert p.velocity == (-10, 0)
    assert p.center == (70, 50)


def test_reflection_happens_on_the_same_tick():
    bounds = ContainerBounds(200, 120)
    radius = 10
    p = Particle(200 - radius - 3, 60, radius, velocity=(10, 0))

    p.advance(bounds)

    assert p.dx == -10
    assert p.x <= bounds.width - radius
    assert p.x == 200 - radius - 3 - 10


def test_reflects_off_left_and_top_walls():
    bounds = ContainerBounds(100, 100)
    p = Particle(15, 12, 10, velocity=(-10, -6))

    p.advance(bounds)

    assert p.velocity == (10, 6)
    assert p.center == (25, 18)


def test_reflection_test_is_inclusive_at_far_wall():
    bounds = ContainerBounds(100, 100)
    # 82 + 8 + 10 == 100 exactly: still counts as crossing.
    p = Particle(82, 50, 10, velocity=(8, 0))

    p.advance(bounds)

    assert p.dx == -8
    assert p.x == 74


def test_clamp_pulls_particle_back_inside():
    bounds = ContainerBounds(100, 100)
    # Radius grew while the particle sat next to the wall.
    p = Particle(95, 3, 10, velocity=(0, 0))

    p.advance(bounds)

    assert p.center == (90, 10)


def test_paused_particle_does_not_move():
    bounds = ContainerBounds(100, 100)
    p = Particle(50, 50, 10, velocity=(10, 0))
    p.toggle_run_state()

    p.advance(bounds)

    assert p.center == (50, 50)
    assert p.velocity == (10, 0)


def test_toggle_run_state_flips_every_call():
    p = Particle(50, 50, 10)
    assert p.run_state is RunState.RUNNING
    p.toggle_run_state()
    assert p.run_state is RunState.PAUSED
    assert not p.is_running
    p.toggle_run_state()
    assert p.run_state is RunState.RUNNING


def test_set_radius_does_not_enforce_a_range():
    p = Particle(50, 50, 10)
    p.set_radius(1)
    assert p.radius == 1
    p.set_radius(500)
    assert p.radius == 500


@pytest.mark.parametrize("seed", [0, 7, 99])
def test_containment_after_many_advances(seed):
    rng = RandomSource(seed)
    bounds = ContainerBounds(120, 90)
    particles = []
    for radius in (5, 8, 13, 21, 40):
        p = Particle(60, 45, radius)
        p.randomize_direction(rng)
        particles.append(p)

    for step in range(500):
        for p in particles:
            p.advance(bounds)
            if step % 37 == 0:
                p.randomize_direction(rng)
            assert p.radius <= p.x <= bounds.width - p.radius
            assert p.radius <= p.y <= bounds.height - p.radius


def test_randomize_direction_speed_bound(rng):
    p = Particle(50, 50, 10)
    seen_dx = set()
    for _ in range(2000):
        p.randomize_direction(rng)
        dx, dy = p.velocity
        assert dx != 0
        assert dx * dx + dy * dy <= 100
        assert 1 <= abs(dx) <= 10
        if dy == 0:
            assert abs(dx) == 10
        seen_dx.add(dx)
    # Both signs and the whole magnitude range show up.
    assert seen_dx == set(range(-10, 0)) | set(range(1, 11))


def test_randomize_direction_truncates_dy(scripted_rng):
    p = Particle(50, 50, 10)
    # sqrt(100 - 9) = 9.54..., truncated to 9.
    p.randomize_direction(scripted_rng(integers=[3], booleans=[False, False]))
    assert p.velocity == (3, 9)
    assert 3 * 3 + 9 * 9 < 100


def test_randomize_direction_sign_flips(scripted_rng):
    p = Particle(50, 50, 10)
    fake = scripted_rng(integers=[6], booleans=[True, False])

    p.randomize_direction(fake)

    assert p.velocity == (-6, 8)
    assert fake.calls == [('integer', 1, 11, 6), ('boolean', True), ('boolean', False)]


def test_randomize_direction_full_speed_along_x(scripted_rng):
    p = Particle(50, 50, 10)
    p.randomize_direction(scripted_rng(integers=[10], booleans=[False, True]))
    assert p.velocity == (10, 0)


def test_randomize_direction_uses_particle_speed(rng):
    p = Particle(50, 50, 10, speed=5)
    for _ in range(200):
        p.randomize_direction(rng)
        assert math.hypot(p.dx, p.dy) <= 5
