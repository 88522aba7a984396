"""Tests for WellnessDatabase lifecycle and schema versioning."""

from __future__ import annotations

import pytest

from wellsense.core.storage.database import SCHEMA_VERSION, DatabaseError, WellnessDatabase


def _names(db: WellnessDatabase, kind: str) -> set[str]:
    rows = db.connection.execute(
        "SELECT name FROM sqlite_master WHERE type = ? AND name NOT LIKE 'sqlite_%'", (kind,)
    ).fetchall()
    return {r[0] for r in rows}


class TestLifecycle:
    def test_unopened_database_refuses_access(self):
        with pytest.raises(DatabaseError, match="not initialized"):
            WellnessDatabase(":memory:").connection

    def test_initialize_twice_keeps_connection(self):
        db = WellnessDatabase(":memory:")
        db.initialize()
        first = db.connection
        db.initialize()
        assert db.connection is first
        db.close()

    def test_context_manager_closes(self):
        with WellnessDatabase(":memory:") as db:
            db.connection.execute("SELECT 1")
        with pytest.raises(DatabaseError):
            db.connection

    def test_close_twice_is_safe(self):
        db = WellnessDatabase(":memory:")
        db.initialize()
        db.close()
        db.close()


class TestSchema:
    def test_fresh_database_at_current_version(self):
        with WellnessDatabase(":memory:") as db:
            assert db.get_schema_version() == SCHEMA_VERSION

    def test_data_bank_tables(self):
        with WellnessDatabase(":memory:") as db:
            assert {
                "wearable_samples",
                "wellness_scores",
                "insights",
                "practices",
                "schema_version",
            } <= _names(db, "table")

    def test_lookup_indexes(self):
        with WellnessDatabase(":memory:") as db:
            assert {
                "idx_samples_user_ts",
                "idx_scores_user_type",
                "idx_insights_user",
                "idx_practices_category",
            } <= _names(db, "index")


class TestFileDatabase:
    def test_parent_directories_created(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "wellness.db"
        with WellnessDatabase(str(path)):
            pass
        assert path.exists()

    def test_reopen_does_not_reapply_migrations(self, tmp_path):
        path = str(tmp_path / "wellness.db")
        with WellnessDatabase(path):
            pass
        with WellnessDatabase(path) as db:
            (rows,) = db.connection.execute("SELECT COUNT(*) FROM schema_version").fetchone()
            assert rows == 1
            assert db.get_schema_version() == SCHEMA_VERSION

    def test_rows_survive_reopen(self, tmp_path):
        path = str(tmp_path / "wellness.db")
        with WellnessDatabase(path) as db:
            db.connection.execute(
                "INSERT INTO practices (id, title, category) VALUES ('p1', 'Walk', 'movement')"
            )
            db.connection.commit()
        with WellnessDatabase(path) as db:
            (count,) = db.connection.execute("SELECT COUNT(*) FROM practices").fetchone()
            assert count == 1
