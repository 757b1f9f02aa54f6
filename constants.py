# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults used when config.json leaves a parameter out, plus
rendering properties that are not part of the experimental configuration.
"""

# Container size in pixels
DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 850

# Population
DEFAULT_PARTICLE_COUNT = 1500
DEFAULT_PARTICLE_RADIUS = 8

# Distance (in pixels) a particle travels per tick
SPEED = 10

# Milliseconds between simulation ticks
DEFAULT_TICK_INTERVAL_MS = 50

# User-adjustable radius range and step
MIN_RADIUS = 5
MAX_RADIUS = 50
RADIUS_STEP = 1

# Initial placement keeps particles this many radii away from every wall.
PLACEMENT_MARGIN_RADII = 4

# Each color channel is drawn from [0, DARK_COLOR_LIMIT), giving dark colors.
DARK_COLOR_LIMIT = 128

# --- Visualization settings ---
WINDOW_TITLE = "Collision Simulator"
BACKGROUND_COLOR = (240, 248, 255)  # Alice Blue
BORDER_COLOR = (47, 79, 79)         # Dark Slate Gray
BORDER_WIDTH = 4
