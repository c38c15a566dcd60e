"""Obstacle spawning, scrolling, scoring and collision tests."""

from __future__ import annotations

import random

from .config import (
    AVATAR_HITBOX_RATIO,
    BAR_MIN_RATIO,
    BASE_SPEED,
    FLOOR_PADDING,
    GAP_JITTER_RATIO,
    GAP_RATIO,
    MIN_GAP_RATIO,
    OBSTACLE_CULL_X,
    OBSTACLE_MIN_WIDTH,
    OBSTACLE_WIDTH_RATIO,
    SAFE_ZONE_BOTTOM,
    SAFE_ZONE_TOP,
    SPEED_RAMP,
)
from .entities import Avatar, Metrics, Obstacle
from .utils import circle_rect_collision, clamp


def scroll_speed(score: int, scale: float) -> float:
    """Obstacle speed in px/s; ramps up linearly with the score."""
    return (BASE_SPEED + score * SPEED_RAMP) * scale


def obstacle_width_for(metrics: Metrics) -> float:
    return max(OBSTACLE_MIN_WIDTH * metrics.scale, metrics.width * OBSTACLE_WIDTH_RATIO)


def hits_bounds(avatar: Avatar, metrics: Metrics) -> bool:
    """True once the avatar touches the ceiling or the floor line."""
    floor = metrics.height - FLOOR_PADDING * metrics.scale
    return avatar.top <= 0 or avatar.bottom >= floor


class ObstacleField:
    """Owns the live obstacles and the spawn timer."""

    def __init__(self, metrics: Metrics, rng: random.Random | None = None) -> None:
        self.metrics = metrics
        self.rng = rng or random.Random()
        self.items: list[Obstacle] = []
        self.spawn_timer = 0.0
        self.width = obstacle_width_for(metrics)

    def reset(self, width: float | None = None) -> None:
        self.items = []
        self.spawn_timer = 0.0
        self.width = obstacle_width_for(self.metrics) if width is None else width

    def update(self, dt: float, speed: float, interval: float) -> None:
        self.spawn_timer += dt
        if self.spawn_timer >= interval:
            self.spawn_timer = 0.0
            self.spawn()

        for obs in self.items:
            obs.x -= speed * dt

        # Garbage by filtering
        self.items = [o for o in self.items if o.x + self.width >= OBSTACLE_CULL_X]

    def spawn(self) -> Obstacle:
        h = self.metrics.height
        gap = max(h * (GAP_RATIO + self.rng.random() * GAP_JITTER_RATIO), h * MIN_GAP_RATIO)
        center = h * SAFE_ZONE_TOP + self.rng.random() * h * (SAFE_ZONE_BOTTOM - SAFE_ZONE_TOP)
        # Keep both bars at least BAR_MIN_RATIO tall by moving the centre, never the gap
        lo = h * BAR_MIN_RATIO + gap * 0.5
        hi = h * (1.0 - BAR_MIN_RATIO) - gap * 0.5
        center = clamp(center, lo, hi) if lo <= hi else h * 0.5
        obs = Obstacle(
            x=self.metrics.width + self.width,
            top=center - gap * 0.5,
            bottom=center + gap * 0.5,
            seed=self.rng.random(),
        )
        self.items.append(obs)
        return obs

    def check_collisions(self, avatar: Avatar) -> bool:
        r = avatar.radius * AVATAR_HITBOX_RATIO
        for obs in self.items:
            if circle_rect_collision(avatar.x, avatar.y, r, obs.x, 0, self.width, obs.top):
                return True
            bottom_height = self.metrics.height - obs.bottom
            if circle_rect_collision(avatar.x, avatar.y, r, obs.x, obs.bottom, self.width, bottom_height):
                return True
        return False

    def claim_scores(self, avatar_x: float) -> int:
        """Flag obstacles whose trailing edge passed ``avatar_x``; returns how many were new."""
        earned = 0
        for obs in self.items:
            if not obs.passed and obs.x + self.width < avatar_x:
                obs.passed = True
                earned += 1
        return earned
