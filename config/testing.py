from .config import *  # noqa: F401,F403

TIMEZONE = "Asia/Bangkok"
STORE_BACKEND = "memory"
AUTO_INIT_DB = False
SUPERADMIN_ID = "U-super"
ADMIN_IDS = ""
STORE_RETRIES = 1
STORE_TIMEOUT_SECONDS = 2.0
LOG_LEVEL = "WARNING"
