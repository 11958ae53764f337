"""
followup_db.py
==============
Follow-up reminders in the `follow_ups` table.

Each row belongs to one user. Users read their own follow-ups and mark them
complete; admins create and delete them for other users (created_by holds the
admin's id). Timestamps are stored as naive UTC.
"""

from datetime import datetime, timezone
from typing import Optional

from wellness.db.record_store import Database

FOLLOW_UPS_TABLE = "follow_ups"
FOLLOW_UP_TYPES = ("reminder", "check_in", "assessment")


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def is_overdue(follow_up: dict, now: Optional[datetime] = None) -> bool:
    """Scheduled in the past and still open."""
    if follow_up.get("completed"):
        return False
    return to_naive_utc(follow_up["scheduled_date"]) < (now or utc_now())


# ─────────────────────────────
# Read
# ─────────────────────────────

def list_followups(db: Database, user_id: str) -> list:
    """All follow-ups for a user, soonest first."""
    return db.table(FOLLOW_UPS_TABLE).find_all({"user_id": user_id}, order_by="scheduled_date")


def split_followups(follow_ups: list, now: Optional[datetime] = None) -> dict:
    """
    Returns:
      { "upcoming": [ {..., "overdue": bool}, ... ], "completed": [ ... ] }
    """
    now = now or utc_now()
    upcoming = [
        {**f, "overdue": is_overdue(f, now)} for f in follow_ups if not f.get("completed")
    ]
    completed = [f for f in follow_ups if f.get("completed")]
    return {"upcoming": upcoming, "completed": completed}


def count_pending(db: Database, user_id: str) -> int:
    return len(db.table(FOLLOW_UPS_TABLE).find_all({"user_id": user_id, "completed": False}))


# ─────────────────────────────
# Write
# ─────────────────────────────

def complete_followup(db: Database, followup_id: str, user_id: str) -> bool:
    """
    Mark the user's own follow-up as done.
    Returns False if no such follow-up belongs to this user.
    """
    store = db.table(FOLLOW_UPS_TABLE)
    if not store.find_one({"id": followup_id, "user_id": user_id}):
        return False
    return store.update(followup_id, {"completed": True, "completed_at": utc_now()})


def create_followup(db: Database, user_id: str, created_by: str, title: str,
                    scheduled_date: datetime, follow_up_type: str = "reminder",
                    description: Optional[str] = None) -> dict:
    if follow_up_type not in FOLLOW_UP_TYPES:
        raise ValueError(f"Unknown follow-up type: {follow_up_type!r}")
    row = db.table(FOLLOW_UPS_TABLE).insert({
        "user_id": user_id,
        "title": title,
        "description": description,
        "follow_up_type": follow_up_type,
        "scheduled_date": to_naive_utc(scheduled_date),
        "created_by": created_by,
    })
    print(f"[ADMIN] Follow-up '{title}' scheduled for user {str(user_id)[:8]}... "
          f"by {str(created_by)[:8]}...")
    return row


def delete_followup(db: Database, followup_id: str) -> bool:
    return db.table(FOLLOW_UPS_TABLE).delete(followup_id)
