"""
auth_db.py
==========
Account lookups and creation for the `users` table.

The same row also carries the profile fields (see profile_db.py) and the
is_admin flag read by the admin routes. hashed_password never leaves this
module's callers in a response.
"""

from typing import Optional

from wellness.db.record_store import Database

USERS_TABLE = "users"


def _normalise_email(email: str) -> str:
    return email.lower().strip()


# ─────────────────────────────
# Read
# ─────────────────────────────

def get_user_by_email(db: Database, email: str) -> Optional[dict]:
    """Fetch a user row by email, or None if not registered."""
    return db.table(USERS_TABLE).find_one({"email": _normalise_email(email)})


def get_user_by_id(db: Database, user_id: str) -> Optional[dict]:
    return db.table(USERS_TABLE).find_one({"id": user_id})


def email_exists(db: Database, email: str) -> bool:
    """Return True if the email is already registered."""
    return get_user_by_email(db, email) is not None


# ─────────────────────────────
# Write
# ─────────────────────────────

def create_user(db: Database, email: str, hashed_password: str, full_name: str = "") -> str:
    """
    Insert a new user.
    Returns the new user's UUID as a string.
    """
    row = db.table(USERS_TABLE).insert({
        "email": _normalise_email(email),
        "hashed_password": hashed_password,
        "full_name": full_name.strip(),
    })
    user_id = str(row["id"])
    print(f"[AUTH] Created user {user_id[:8]}...")
    return user_id


def list_members(db: Database) -> list:
    """Non-admin users, newest first."""
    return db.table(USERS_TABLE).find_all({"is_admin": False}, order_by="created_at", descending=True)
