import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Booking backend
BACKEND_URL = os.getenv("STUDIOBOOK_BACKEND_URL")
if not BACKEND_URL:
    import warnings

    warnings.warn(
        "STUDIOBOOK_BACKEND_URL not set! Falling back to local development backend",
        RuntimeWarning,
        stacklevel=2,
    )
    BACKEND_URL = "http://localhost:3000"

# Seconds before an outgoing request is abandoned
REQUEST_TIMEOUT = float(os.getenv("STUDIOBOOK_REQUEST_TIMEOUT", "30"))

# Status the backend uses to signal an expired session on any endpoint
SESSION_EXPIRED_STATUS = int(os.getenv("SESSION_EXPIRED_STATUS", "498"))

# Event drafts open on this hour with a one hour window
DEFAULT_EVENT_START_HOUR = int(os.getenv("DEFAULT_EVENT_START_HOUR", "9"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
