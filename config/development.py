import os

from .config import *  # noqa: F401,F403

# Local runs keep everything in memory unless told otherwise
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
