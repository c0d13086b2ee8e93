"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_METERS = 6_371_000.0
DEFAULT_ALLOWED_RADIUS_METERS = 50.0

DEFAULT_SHIFT_START = time(10, 0)
DEFAULT_LATE_CUTOFF = time(10, 30)
DEFAULT_SHIFT_END = time(18, 0)

DEFAULT_CORRECTION_WINDOW_SECONDS = 300

LIVENESS_FRAME_WIDTH = 320
LIVENESS_FRAME_HEIGHT = 240
LIVENESS_PIXEL_DELTA_THRESHOLD = 100  # summed |dR|+|dG|+|dB|, 0..765
LIVENESS_MIN_MOTION_PERCENT = 2.0
LIVENESS_MAX_MOTION_PERCENT = 30.0
LIVENESS_WARMUP_SECONDS = 2.0
CAPTURE_JPEG_QUALITY = 80

DEFAULT_HISTORY_LIMIT = 30

CLOCK_TIME_FORMAT = "%I:%M %p"
DATE_FORMAT = "%Y-%m-%d"
