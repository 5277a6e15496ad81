"""Project-wide constants shared by the exporters and the viewer."""

SIGMA = 10.0  # Lorenz sigma
RHO = 28.0    # Lorenz rho
BETA = 8.0 / 3.0  # Lorenz beta

DEFAULT_DT = 0.01

VISUAL_SCALE = 0.1
TRAIL_LEN = 1000
HEAD_SIZE = 0.15
HEAD_SPIN = 0.014  # radians about the vertical axis, per tick

SVG_STEPS = 4000
SVG_START = (1.0, 1.0, 1.0)
SVG_VIEWBOX = "-20 -20 40 40"
SVG_STROKE_WIDTH = 0.1
SVG_PRECISION = 5

PRESET_START = (0.1, 0.1, 0.1)
CHAOS_OFFSET = 1e-7
DIVERGENCE_STEPS = 2000

RANDOM_POS_OFFSET = -10.0
RANDOM_POS_SCALE = 20.0

WHITE = (1.0, 1.0, 1.0)
ENCODING = "utf-8"
