"""
schema.py
=========
Table creation for every table in the project.

Tables:
  users                     — accounts + profile fields + is_admin flag
  prakriti_questions        — assessment questions (reference data)
  prakriti_assessments      — one row per submitted assessment (append-only)
  diet_recommendations      — meal guidance per dosha (reference data)
  daily_schedule_templates  — routine activities per dosha (reference data)
  follow_ups                — reminders owned by a user, optionally created by an admin
  progress_tracking         — daily wellness metrics logged by a user

Called once at server startup — safe to call multiple times.
"""

import psycopg2

from wellness.db.connection import StoreError, get_conn

TABLES = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id                 UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            email              VARCHAR(320) UNIQUE NOT NULL,
            hashed_password    TEXT NOT NULL,
            full_name          VARCHAR(255) NOT NULL DEFAULT '',
            age                INTEGER,
            gender             VARCHAR(20),
            height             NUMERIC(5, 1),
            weight             NUMERIC(5, 1),
            medical_conditions TEXT[] NOT NULL DEFAULT '{}',
            allergies          TEXT[] NOT NULL DEFAULT '{}',
            is_admin           BOOLEAN NOT NULL DEFAULT FALSE,
            created_at         TIMESTAMP DEFAULT NOW(),
            updated_at         TIMESTAMP DEFAULT NOW()
        );
    """,
    "prakriti_questions": """
        CREATE TABLE IF NOT EXISTS prakriti_questions (
            id             UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            category       VARCHAR(100) NOT NULL,
            question       TEXT NOT NULL,
            vata_option    TEXT NOT NULL,
            pitta_option   TEXT NOT NULL,
            kapha_option   TEXT NOT NULL,
            display_order  INTEGER NOT NULL
        );
    """,
    "prakriti_assessments": """
        CREATE TABLE IF NOT EXISTS prakriti_assessments (
            id               UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id          UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            vata_score       INTEGER NOT NULL,
            pitta_score      INTEGER NOT NULL,
            kapha_score      INTEGER NOT NULL,
            dominant_dosha   VARCHAR(20) NOT NULL,
            assessment_data  JSONB NOT NULL,
            assessed_at      TIMESTAMP DEFAULT NOW()
        );
        CREATE INDEX IF NOT EXISTS idx_prakriti_assessments_user
            ON prakriti_assessments(user_id, assessed_at DESC);
    """,
    "diet_recommendations": """
        CREATE TABLE IF NOT EXISTS diet_recommendations (
            id                  UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            dosha_type          VARCHAR(20) NOT NULL,
            meal_type           VARCHAR(20) NOT NULL,
            food_items          TEXT[] NOT NULL DEFAULT '{}',
            foods_to_avoid      TEXT[] NOT NULL DEFAULT '{}',
            portion_guidelines  TEXT,
            timing              VARCHAR(100)
        );
    """,
    "daily_schedule_templates": """
        CREATE TABLE IF NOT EXISTS daily_schedule_templates (
            id                UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            dosha_type        VARCHAR(20) NOT NULL,
            time_of_day       VARCHAR(20) NOT NULL,
            activity          VARCHAR(255) NOT NULL,
            duration_minutes  INTEGER,
            description       TEXT,
            benefits          TEXT,
            display_order     INTEGER NOT NULL
        );
    """,
    "follow_ups": """
        CREATE TABLE IF NOT EXISTS follow_ups (
            id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id         UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            follow_up_type  VARCHAR(20) NOT NULL DEFAULT 'reminder',
            title           VARCHAR(255) NOT NULL,
            description     TEXT,
            scheduled_date  TIMESTAMP NOT NULL,
            completed       BOOLEAN NOT NULL DEFAULT FALSE,
            completed_at    TIMESTAMP,
            notes           TEXT,
            created_by      UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at      TIMESTAMP DEFAULT NOW()
        );
        CREATE INDEX IF NOT EXISTS idx_follow_ups_user
            ON follow_ups(user_id, scheduled_date);
    """,
    "progress_tracking": """
        CREATE TABLE IF NOT EXISTS progress_tracking (
            id             UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id        UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            tracking_date  DATE NOT NULL,
            weight         NUMERIC(5, 1),
            energy_level   INTEGER CHECK (energy_level BETWEEN 1 AND 10),
            sleep_quality  INTEGER CHECK (sleep_quality BETWEEN 1 AND 10),
            stress_level   INTEGER CHECK (stress_level BETWEEN 1 AND 10),
            notes          TEXT,
            created_at     TIMESTAMP DEFAULT NOW()
        );
        CREATE INDEX IF NOT EXISTS idx_progress_tracking_user
            ON progress_tracking(user_id, tracking_date DESC);
    """,
}


def init_db() -> None:
    """Create every table (users first, since the others reference it)."""
    conn = get_conn()
    try:
        for name, ddl in TABLES.items():
            with conn.cursor() as cur:
                cur.execute(ddl)
            conn.commit()
            print(f"[DB] {name} table ready")
    except psycopg2.Error as e:
        conn.rollback()
        raise StoreError(f"Failed to initialise DB: {str(e)}") from e
    finally:
        conn.close()
