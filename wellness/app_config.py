"""
app_config.py
=============
Server-level settings. Loaded from .env.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Comma-separated list; "*" allows any origin (local dev, tunnels, etc.)
CORS_ORIGINS: list = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

# Load bundled questions / diet / schedule rows into empty tables on startup
SEED_REFERENCE_DATA: bool = os.getenv("SEED_REFERENCE_DATA", "true").lower() in ("1", "true", "yes")

# How many progress entries GET /progress returns
PROGRESS_HISTORY_LIMIT: int = int(os.getenv("PROGRESS_HISTORY_LIMIT", "30"))
