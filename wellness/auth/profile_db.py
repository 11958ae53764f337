"""
profile_db.py
=============
Profile fields stored on the `users` row:

  full_name, age, gender, height, weight,
  medical_conditions (TEXT[]), allergies (TEXT[]), updated_at

user_id is extracted from the JWT token — never passed in request body.
"""

from datetime import datetime, timezone
from typing import Optional

from wellness.auth.auth_db import USERS_TABLE
from wellness.db.record_store import Database

PROFILE_FIELDS = (
    "id", "email", "full_name", "age", "gender", "height", "weight",
    "medical_conditions", "allergies", "is_admin", "created_at", "updated_at",
)


def public_profile(user: dict) -> dict:
    """Strip a users row down to the fields safe to return."""
    return {field: user.get(field) for field in PROFILE_FIELDS}


def clean_list(items: Optional[list]) -> list:
    """Trim entries, drop blanks and repeats, keep first-seen order."""
    cleaned = []
    for item in items or []:
        item = item.strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return cleaned


def get_profile(db: Database, user_id: str) -> Optional[dict]:
    user = db.table(USERS_TABLE).find_one({"id": user_id})
    return public_profile(user) if user else None


def update_profile(db: Database, user_id: str, fields: dict) -> bool:
    """
    Overwrite the given profile fields and refresh updated_at.
    List fields are cleaned before saving.
    """
    fields = dict(fields)
    for key in ("medical_conditions", "allergies"):
        if key in fields:
            fields[key] = clean_list(fields[key])
    fields["updated_at"] = datetime.now(timezone.utc).replace(tzinfo=None)
    return db.table(USERS_TABLE).update(user_id, fields)
