# app/config.py
# Role: Runtime settings read from the environment (.env supported).
#       DATABASE_URL is read in db.py; everything else lives here.

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or str(v).strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


# Logging level for the whole app (DEBUG, INFO, WARNING, ...)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Horizon used by /projection when the request does not name one
DEFAULT_PROJECTION_MONTHS = _env_int("DEFAULT_PROJECTION_MONTHS", 6)
