"""Game configuration constants for Flappy Dopamine.

Distances and speeds are expressed at a 720 px reference height and scaled by
the viewport (``scale = height / REFERENCE_HEIGHT``) at runtime.
"""

from __future__ import annotations

# Window
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
REFERENCE_HEIGHT = 720
FPS = 60
MAX_FRAME_DT = 0.032  # s, clamps long frames (tab switch, debugger, resize)

# Physics
GRAVITY = 2000.0  # px/s^2
FLAP_IMPULSE = -720.0  # px/s
MAX_VELOCITY = 900.0  # px/s
TILT_VELOCITY_RATIO = 0.75
TILT_MIN = -1.2  # rad
TILT_MAX = 1.3  # rad
TILT_RATE = 8.0  # 1/s convergence of the rotation low-pass
GAMEOVER_TIME_SCALE = 0.9

# Avatar
AVATAR_X_RATIO = 0.3
AVATAR_START_Y_RATIO = 0.46
AVATAR_IDLE_Y_RATIO = 0.48
AVATAR_MIN_RADIUS = 18.0
AVATAR_RADIUS_RATIO = 0.035
AVATAR_BOUNDS_RATIO = 0.9  # top/bottom extents used for floor/ceiling tests
AVATAR_HITBOX_RATIO = 0.82  # forgiving circle used against obstacles

# Obstacles
BASE_SPEED = 230.0  # px/s
SPEED_RAMP = 8.0  # px/s gained per point
SPAWN_INTERVAL = 1.98  # s
OBSTACLE_MIN_WIDTH = 110.0
OBSTACLE_WIDTH_RATIO = 0.11
OBSTACLE_CULL_X = -10.0
GAP_RATIO = 0.34
GAP_JITTER_RATIO = 0.1
MIN_GAP_RATIO = 0.26
SAFE_ZONE_TOP = 0.18
SAFE_ZONE_BOTTOM = 0.82
BAR_MIN_RATIO = 0.1
FLOOR_PADDING = 36.0

# Particles
FLAP_BURST = 7
FLAP_LIFE = 0.38
SCORE_BURST = 16
SCORE_LIFE = 0.7
PARTICLE_DAMPING = 0.92  # per update step, not per second
PARTICLE_CULL_MARGIN = 100.0

# Themes
THEME_SWITCH_INTERVAL = 2  # points between theme switches
THEME_TRANSITION = 0.9  # s
GAMEOVER_TRANSITION = 0.85  # s

# Audio
SAMPLE_RATE = 44100
RENDER_QUANTUM = 512  # frames per graph step
OUTPUT_BLOCK = 1024  # frames per mixer buffer
MASTER_LEVEL = 0.3
FLOOR_GAIN = 0.0001

# Persistence and leaderboard
BEST_SCORE_KEY = "flappy-dopamine-best-score"
PLAYER_NAME_KEY = "flappy-dopamine-player-name"
DEFAULT_PLAYER_NAME = "Flappy Boys"
HISTORY_LIMIT = 12
SCORES_URL_ENV = "FLAPPY_SCORES_URL"
SCORES_KEY_ENV = "FLAPPY_SCORES_KEY"
REQUEST_TIMEOUT = 2.0  # s
TOAST_DURATION = 2.2  # s

# HUD palette
TEXT_COLOR = (240, 240, 250)
TEXT_DIM = (200, 200, 215)
OVERLAY_TINT = (10, 6, 18, 90)
