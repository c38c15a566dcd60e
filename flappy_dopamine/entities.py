"""Game entities: the avatar, obstacles ("pipes") and particles.

The avatar owns its own integration step; obstacles and particles are plain
records mutated by :mod:`flappy_dopamine.physics` and
:mod:`flappy_dopamine.particles`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import (
    AVATAR_BOUNDS_RATIO,
    AVATAR_IDLE_Y_RATIO,
    AVATAR_MIN_RADIUS,
    AVATAR_RADIUS_RATIO,
    AVATAR_START_Y_RATIO,
    AVATAR_X_RATIO,
    TILT_MAX,
    TILT_MIN,
    TILT_RATE,
    TILT_VELOCITY_RATIO,
)
from .utils import clamp


@dataclass
class Metrics:
    """Viewport size in pixels and its scale relative to the reference height."""

    width: int
    height: int
    scale: float = 1.0


class Avatar:
    def __init__(self, metrics: Metrics) -> None:
        self.metrics = metrics
        self.x = 0.0
        self.y = 0.0
        self.velocity = 0.0
        self.rotation = 0.0
        self.radius = AVATAR_MIN_RADIUS
        self.reset()

    def reset(self) -> None:
        """Re-place the avatar for the current viewport and clear its motion."""
        self.x = self.metrics.width * AVATAR_X_RATIO
        self.y = self.metrics.height * AVATAR_START_Y_RATIO
        self.velocity = 0.0
        self.rotation = 0.0
        self.radius = max(AVATAR_MIN_RADIUS, self.metrics.height * AVATAR_RADIUS_RATIO)

    def start(self) -> None:
        self.x = self.metrics.width * AVATAR_X_RATIO
        self.y = self.metrics.height * AVATAR_START_Y_RATIO
        self.velocity = 0.0

    def flap(self, impulse: float) -> None:
        # Overrides any prior velocity; impulses never stack.
        self.velocity = impulse

    def update(self, dt: float, gravity: float, max_velocity: float) -> None:
        self.velocity = min(max_velocity, self.velocity + gravity * dt)
        self.y += self.velocity * dt
        # Low-pass the tilt toward a velocity-derived target so it never snaps
        target = clamp(self.velocity / (max_velocity * TILT_VELOCITY_RATIO), TILT_MIN, TILT_MAX)
        self.rotation += (target - self.rotation) * min(1.0, dt * TILT_RATE)

    def idle_bob(self, time: float) -> None:
        amplitude = self.metrics.height * 0.015
        self.y = self.metrics.height * AVATAR_IDLE_Y_RATIO + math.sin(time * 2.15) * amplitude
        self.rotation = math.sin(time * 1.3) * 0.22

    @property
    def top(self) -> float:
        return self.y - self.radius * AVATAR_BOUNDS_RATIO

    @property
    def bottom(self) -> float:
        return self.y + self.radius * AVATAR_BOUNDS_RATIO


@dataclass
class Obstacle:
    """A gap barrier: solid from 0..top and from bottom..viewport height."""

    x: float
    top: float
    bottom: float
    passed: bool = False
    seed: float = 0.0  # consumed by theme drawing only

    @property
    def gap(self) -> float:
        return self.bottom - self.top


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    size: float
    hue: float
    age: float = 0.0

    @property
    def alive(self) -> bool:
        return self.age < self.life

    @property
    def alpha(self) -> float:
        return clamp(1.0 - self.age / self.life, 0.0, 1.0) if self.life > 0 else 0.0
