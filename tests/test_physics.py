import os
import random

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from flappy_dopamine.config import BASE_SPEED, FLOOR_PADDING, SPAWN_INTERVAL, SPEED_RAMP
from flappy_dopamine.entities import Avatar, Metrics, Obstacle
from flappy_dopamine.physics import ObstacleField, hits_bounds, obstacle_width_for, scroll_speed


def test_scroll_speed_ramps_linearly() -> None:
    assert scroll_speed(0, 1.0) == BASE_SPEED
    assert scroll_speed(10, 1.0) == BASE_SPEED + 10 * SPEED_RAMP
    assert scroll_speed(10, 0.5) == pytest.approx((BASE_SPEED + 10 * SPEED_RAMP) * 0.5)


def test_obstacle_width_has_a_floor() -> None:
    assert obstacle_width_for(Metrics(2000, 720, 1.0)) == pytest.approx(220)
    assert obstacle_width_for(Metrics(400, 720, 1.0)) == pytest.approx(110)


@pytest.mark.parametrize("height", [180, 480, 720, 1440])
def test_spawned_gaps_respect_bounds(height: int) -> None:
    metrics = Metrics(1280, height, height / 720)
    field = ObstacleField(metrics, random.Random(height))
    for _ in range(300):
        obs = field.spawn()
        assert obs.gap >= height * 0.26 - 1e-9
        assert obs.top >= height * 0.1 - 1e-9
        assert height - obs.bottom >= height * 0.1 - 1e-9
        assert obs.x == pytest.approx(metrics.width + field.width)


def test_field_spawns_on_interval_and_culls() -> None:
    metrics = Metrics(1280, 720)
    field = ObstacleField(metrics, random.Random(3))
    field.update(SPAWN_INTERVAL * 0.5, 200.0, SPAWN_INTERVAL)
    assert field.items == []
    field.update(SPAWN_INTERVAL * 0.5, 200.0, SPAWN_INTERVAL)
    assert len(field.items) == 1
    field.items[0].x = -field.width - 20
    field.update(0.0, 200.0, SPAWN_INTERVAL)
    assert field.items == []


def test_obstacles_scroll_left() -> None:
    field = ObstacleField(Metrics(1280, 720), random.Random(4))
    obs = field.spawn()
    x = obs.x
    field.update(0.5, 200.0, SPAWN_INTERVAL)
    assert obs.x == pytest.approx(x - 100.0)


def test_claim_scores_counts_each_obstacle_once() -> None:
    field = ObstacleField(Metrics(1280, 720), random.Random(5))
    field.items = [Obstacle(x=0, top=100, bottom=400), Obstacle(x=50, top=100, bottom=400)]
    avatar_x = 50 + field.width + 1
    assert field.claim_scores(avatar_x) == 2
    assert field.claim_scores(avatar_x) == 0


def test_collisions_use_forgiving_hitbox() -> None:
    metrics = Metrics(1280, 720)
    avatar = Avatar(metrics)
    field = ObstacleField(metrics, random.Random(6))
    r = avatar.radius
    # Gap edges just beyond the shrunken hitbox: no hit
    field.items = [Obstacle(x=avatar.x - 10, top=avatar.y - r * 0.85, bottom=avatar.y + r * 0.85)]
    assert not field.check_collisions(avatar)
    field.items = [Obstacle(x=avatar.x - 10, top=avatar.y - r * 0.5, bottom=avatar.y + 300)]
    assert field.check_collisions(avatar)
    field.items = [Obstacle(x=avatar.x - 10, top=avatar.y - 300, bottom=avatar.y + r * 0.5)]
    assert field.check_collisions(avatar)


def test_hits_bounds() -> None:
    metrics = Metrics(1280, 720)
    avatar = Avatar(metrics)
    assert not hits_bounds(avatar, metrics)
    avatar.y = 0
    assert hits_bounds(avatar, metrics)
    avatar.y = 720 - FLOOR_PADDING
    assert hits_bounds(avatar, metrics)


def test_reset_clears_field() -> None:
    field = ObstacleField(Metrics(1280, 720), random.Random(7))
    field.spawn()
    field.spawn_timer = 1.0
    field.reset(99.0)
    assert field.items == []
    assert field.spawn_timer == 0.0
    assert field.width == 99.0
