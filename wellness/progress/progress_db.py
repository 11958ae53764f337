"""
progress_db.py
==============
Daily wellness metrics in the `progress_tracking` table.

energy_level, sleep_quality and stress_level are 1–10 self ratings; weight
and notes are optional. Entries are append-only.
"""

from datetime import date
from typing import Optional

from wellness.db.record_store import Database

PROGRESS_TABLE = "progress_tracking"


def list_progress(db: Database, user_id: str, limit: int = 30) -> list:
    """Latest entries first, by tracking date."""
    return db.table(PROGRESS_TABLE).find_all(
        {"user_id": user_id}, order_by="tracking_date", descending=True, limit=limit
    )


def record_progress(db: Database, user_id: str, tracking_date: date,
                    energy_level: int, sleep_quality: int, stress_level: int,
                    weight: Optional[float] = None, notes: Optional[str] = None) -> dict:
    row = db.table(PROGRESS_TABLE).insert({
        "user_id": user_id,
        "tracking_date": tracking_date,
        "weight": weight,
        "energy_level": energy_level,
        "sleep_quality": sleep_quality,
        "stress_level": stress_level,
        "notes": notes or None,
    })
    print(f"[PROGRESS] Logged {tracking_date} for user {str(user_id)[:8]}...")
    return row
