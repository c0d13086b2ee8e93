from .config import *  # noqa: F401,F403

DEBUG = False
TESTING = True

STORE_BACKEND = "memory"
AUTO_INIT_DB = False
LIVENESS_WARMUP_SECONDS = 0.0
