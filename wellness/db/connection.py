"""
connection.py
=============
PostgreSQL connection handling shared by every table in the project.

Reads DATABASE_URL from .env, or builds it from the POSTGRES_* variables.
All psycopg2 failures leave this package as StoreError so routes can report
them without knowing anything about the driver.
"""

import os
import psycopg2
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{os.getenv('POSTGRES_USER', 'postgres')}:"
    f"{os.getenv('POSTGRES_PASSWORD', '')}@"
    f"{os.getenv('POSTGRES_HOST', 'localhost')}:"
    f"{os.getenv('POSTGRES_PORT', '5432')}/"
    f"{os.getenv('POSTGRES_DB', 'Prakriti')}"
)


class StoreError(Exception):
    """A read or write against the record store failed."""


def get_conn():
    """Open and return a raw psycopg2 connection."""
    try:
        return psycopg2.connect(DATABASE_URL)
    except psycopg2.Error as e:
        raise StoreError(f"DB connection failed: {str(e)}") from e
