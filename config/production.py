import os

from .config import *  # noqa: F401,F403

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
