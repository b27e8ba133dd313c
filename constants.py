# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
window/rendering framework and the default option sets each effect merges
the `effect.options` section of config.json over.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a fixed-size window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)  # Black, so additive blending reads as light
WINDOW_CAPTION = "Fireworks"

# Methods and attributes every drawing sink must expose.
CANVAS_INTERFACE = ("clear", "set_blend_mode", "stroke_polyline", "fill_circle", "width", "height")

# --- Fireworks ---
# Distances are in pixels, speeds in pixels per frame, delays in frames.
FIREWORKS_DEFAULTS = {
    "seed": None,
    "autoresize": True,
    "acceleration": 1.05,  # Rocket speed multiplier per frame (> 1)
    "friction": 0.98,      # Spark velocity multiplier per frame (< 1)
    "gravity": 1.5,        # Scaled by GRAVITY_SCALE before it reaches sparks
    "particles": 80,       # Base spark count per detonation
    "particles_bonus": 20, # Detonations add floor(random * bonus) sparks
    "explosion": 5,        # Max spark speed above the 1 px/frame floor
    "trail_length": 10,
    "detonation_ratio": 0.8,
    "rocket_speed": {"min": 2.5, "max": 4.5},
    "wobble": 0.2,
    "wobble_speed": {"min": 0.04, "max": 0.1},
    "delay": {"min": 18, "max": 36},
    "launch_stagger": 6,
    "double_launch_chance": 0.3,
    "line_width": {
        "explosion": {"min": 1, "max": 3},
        "trace": {"min": 1, "max": 2},
    },
    "brightness": {"min": 50, "max": 80},
    "decay": {"min": 0.015, "max": 0.03},
}

GRAVITY_SCALE = 0.01
HUE_JITTER = 15
ROCKET_TIP_RADIUS = 2
ROCKET_TIP_LIGHTNESS = 90
SPARK_LIGHTNESS = 60

# Horizontal launch zones along the bottom edge, as fractions of the width.
LAUNCH_ZONES = ((0.0, 0.3), (0.35, 0.65), (0.7, 1.0))
# Target region, as fractions of the surface: (x_min, x_span), (y_min, y_span).
TARGET_REGION = ((0.2, 0.6), (0.15, 0.35))

# --- Snow ---
SNOW_COLOR = (255, 255, 255)

SNOW_PRESETS = {
    # Plain snow: flakes reappear at a random column after leaving the bottom.
    "snow": {
        "seed": None,
        "autoresize": True,
        "count": 250,
        "radius": {"min": 1, "max": 4},
        "speed": {"min": 0.5, "max": 2.5},
        "drift": {"min": -0.5, "max": 0.5},
        "opacity": {"min": 0.0, "max": 1.0},
        "wind": 0.0,
        "respawn_random_x": True,
    },
    # Windy snowfall: flakes keep their column and wrap sideways with the wind.
    "snowfall": {
        "seed": None,
        "autoresize": True,
        "count": 200,
        "radius": {"min": 1, "max": 4},
        "speed": {"min": 0.5, "max": 2.0},
        "drift": {"min": -0.3, "max": 0.3},
        "opacity": {"min": 0.3, "max": 1.0},
        "wind": 0.3,
        "respawn_random_x": False,
    },
}
