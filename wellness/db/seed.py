"""
seed.py
=======
Loads the shared reference data (questions, diet recommendations, schedule
templates) from wellness/data/*.json into empty tables.

A table that already holds rows is left alone, so curated edits made directly
in the database survive restarts. Each table is written all at once, never
partially.
"""

import json
import os

from wellness.db.record_store import Database

# table name → (json file, top-level key)
REFERENCE_FILES = {
    "prakriti_questions": ("prakriti_questions.json", "questions"),
    "diet_recommendations": ("diet_recommendations.json", "recommendations"),
    "daily_schedule_templates": ("daily_schedule_templates.json", "templates"),
}


def _data_path(filename: str) -> str:
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", filename)


def load_reference_file(table: str) -> list:
    """Read the bundled rows for a reference table."""
    filename, key = REFERENCE_FILES[table]
    with open(_data_path(filename), "r") as f:
        return json.load(f)[key]


def seed_reference_data(db: Database) -> dict:
    """
    Insert bundled rows into every empty reference table.

    Returns:
        { table_name: rows_inserted, ... }
    """
    inserted = {}
    for table in REFERENCE_FILES:
        store = db.table(table)
        if store.find_one():
            inserted[table] = 0
            continue
        rows = load_reference_file(table)
        # one transaction per table: a failed seed leaves the table empty
        # so the next startup retries it
        store.insert_many(rows)
        inserted[table] = len(rows)
        print(f"[SEED] {table}: inserted {len(rows)} rows")
    return inserted
