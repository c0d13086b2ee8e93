from .config import *  # noqa: F401,F403
from .config import env_bool

DEBUG = False

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", False)
