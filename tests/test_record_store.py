"""
RecordStore against a mocked psycopg2 connection: parameter binding,
commit/rollback and error translation.
"""

from unittest.mock import MagicMock

import psycopg2
import pytest
from psycopg2.extras import Json

from wellness.db.connection import StoreError
from wellness.db.record_store import Database, RecordStore


@pytest.fixture
def conn():
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchall.return_value = [{"id": "a"}, {"id": "b"}]
    cursor.fetchone.return_value = {"id": "new"}
    cursor.rowcount = 1
    return conn


@pytest.fixture
def cursor(conn):
    return conn.cursor.return_value.__enter__.return_value


def _store(conn, table="follow_ups"):
    return RecordStore(table, conn_factory=lambda: conn)


class TestRead:

    def test_find_all_binds_filters_and_limit(self, conn, cursor):
        rows = _store(conn).find_all({"user_id": "u1", "completed": False},
                                     order_by="scheduled_date", limit=5)

        _, params = cursor.execute.call_args.args
        assert params == ["u1", False, 5]
        assert rows == [{"id": "a"}, {"id": "b"}]
        conn.close.assert_called_once()

    def test_none_filter_is_not_bound(self, conn, cursor):
        _store(conn).find_all({"completed_at": None})
        _, params = cursor.execute.call_args.args
        assert params == []

    def test_find_one_empty(self, conn, cursor):
        cursor.fetchall.return_value = []
        assert _store(conn).find_one({"id": "x"}) is None

    def test_driver_error_becomes_store_error(self, conn, cursor):
        cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")
        with pytest.raises(StoreError):
            _store(conn).find_all()
        conn.close.assert_called_once()


class TestWrite:

    def test_insert_wraps_dicts_as_json(self, conn, cursor):
        row = _store(conn, "prakriti_assessments").insert(
            {"user_id": "u1", "assessment_data": {"q1": "vata"}}
        )

        _, params = cursor.execute.call_args.args
        assert params[0] == "u1"
        assert isinstance(params[1], Json)
        assert row == {"id": "new"}
        conn.commit.assert_called_once()

    def test_insert_failure_rolls_back(self, conn, cursor):
        cursor.execute.side_effect = psycopg2.IntegrityError("duplicate key")
        with pytest.raises(StoreError):
            _store(conn, "users").insert({"email": "a@b.c"})
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_insert_many_commits_once(self, conn, monkeypatch):
        calls = []

        def fake_execute_values(cur, query, values, fetch=False):
            calls.append((values, fetch))
            return [{"id": "1"}, {"id": "2"}]

        monkeypatch.setattr("wellness.db.record_store.execute_values", fake_execute_values)
        rows = _store(conn, "prakriti_questions").insert_many([
            {"question_text": "a", "display_order": 1},
            {"question_text": "b"},
        ])

        assert rows == [{"id": "1"}, {"id": "2"}]
        assert calls == [([["a", 1], ["b", None]], True)]
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_insert_many_failure_rolls_back_whole_batch(self, conn, monkeypatch):
        def failing_execute_values(cur, query, values, fetch=False):
            raise psycopg2.OperationalError("server closed the connection")

        monkeypatch.setattr("wellness.db.record_store.execute_values", failing_execute_values)
        with pytest.raises(StoreError):
            _store(conn, "prakriti_questions").insert_many([{"question_text": "a"}] * 12)

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        conn.close.assert_called_once()

    def test_insert_many_empty_skips_connection(self):
        factory = MagicMock()
        assert RecordStore("prakriti_questions", conn_factory=factory).insert_many([]) == []
        factory.assert_not_called()

    def test_update_returns_whether_row_changed(self, conn, cursor):
        assert _store(conn).update("f1", {"completed": True}) is True
        _, params = cursor.execute.call_args.args
        assert params == [True, "f1"]

        cursor.rowcount = 0
        assert _store(conn).update("missing", {"completed": True}) is False

    def test_empty_update_skips_query(self, conn, cursor):
        assert _store(conn).update("f1", {}) is False
        cursor.execute.assert_not_called()

    def test_delete(self, conn, cursor):
        assert _store(conn).delete("f1") is True
        cursor.rowcount = 0
        assert _store(conn).delete("f1") is False


def test_database_hands_out_table_stores(conn):
    store = Database(conn_factory=lambda: conn).table("progress_tracking")
    assert store.table == "progress_tracking"
