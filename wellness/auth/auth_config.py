"""
auth_config.py
==============
JWT and auth configuration.
Loaded from .env — never hardcoded.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# ─────────────────────────────
# JWT Settings
# ─────────────────────────────

# Used only when JWT_SECRET_KEY is not set. Anyone can forge tokens with it.
DEV_JWT_SECRET_KEY = "prakriti-dev-secret-change-in-prod"

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", DEV_JWT_SECRET_KEY)
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRY_DAYS: int = int(os.getenv("JWT_EXPIRY_DAYS", "7"))


def warn_if_dev_secret(secret_key: Optional[str] = None) -> bool:
    """Print a startup warning when tokens are signed with the dev default."""
    secret_key = JWT_SECRET_KEY if secret_key is None else secret_key
    if secret_key != DEV_JWT_SECRET_KEY:
        return False
    print("[AUTH] WARNING: JWT_SECRET_KEY is not set, signing tokens with the "
          "built-in dev secret. Set JWT_SECRET_KEY in .env before deploying.")
    return True
