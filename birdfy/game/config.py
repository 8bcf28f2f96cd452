# --- Display ---
WIDTH = 480
HEIGHT = 800
FPS = 60

# --- World ---
FLOOR_H = 90                # floor strip at the bottom of the world
PLAYFIELD_BOTTOM = HEIGHT - FLOOR_H

# --- Bird ---
BIRD_X = 85                 # bird's fixed x (world scrolls left)
BIRD_W = 44
BIRD_H = 32
BIRD_RADIUS = 16            # circle hitbox radius
BIRD_INSET_X = 7            # rect hitbox inset, each side
BIRD_INSET_Y = 5

# --- Physics (per tick) ---
VELOCITY_DAMPING = 0.985    # applied every integrate, all difficulties
FLAP_CARRY = 0.35           # share of current velocity kept on a flap
ROTATION_K = 0.04           # rad per px/tick of velocity
ROTATION_MIN = -1.0471975511965976   # -pi/3
ROTATION_MAX = 0.7853981633974483    # pi/4

# --- Obstacles ---
PIPE_W = 72
PIPE_INSET_X = 5            # column inset for the rect hitbox
SPAWN_OFFSET_X = 40         # spawn at WIDTH + offset
CULL_MARGIN_X = 40          # removed once x + PIPE_W <= -margin
GAP_MARGIN_TOP = 80
GAP_MARGIN_BOTTOM = 80

# --- Gravity multiplier ---
GRAV_MIN = 0.3
GRAV_MAX = 2.5
GRAV_STEP = 0.1

# --- Input ---
FLAP_COOLDOWN_MS = 120      # min time between released flaps
FLAP_BUFFER_MS = 140        # how long a flap request stays valid

# --- Scores / persistence ---
HISTORY_RECENT_CAP = 6
HISTORY_TOP_CAP = 10
KEY_BEST = "birdfy.best"
KEY_HISTORY = "birdfy.history"
KEY_GRAVITY = "birdfy.gravity"
KEY_CUSTOM_BG = "birdfy.custom_bg"
KEY_DIFFICULTY = "birdfy.difficulty"
KEY_THEME = "birdfy.theme"
STORE_PATH_DEFAULT = "birdfy_scores.json"

# --- Colors (RGB) ---
COLOR_FG = (235, 240, 255)
COLOR_DANGER = (255, 86, 110)
COLOR_BIRD = (255, 214, 64)
