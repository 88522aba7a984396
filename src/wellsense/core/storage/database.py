"""SQLite storage for the WellSense data bank: one connection, versioned DDL."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

_SCHEMA_V1 = """
-- One row per ingested wearable reading
CREATE TABLE IF NOT EXISTS wearable_samples (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    provider    TEXT NOT NULL,
    data_type   TEXT NOT NULL,
    value       REAL,
    unit        TEXT,
    quality     TEXT,
    source      TEXT,
    notes       TEXT,
    raw_enc     TEXT,
    timestamp   TEXT NOT NULL,
    created_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Score history: one row per score type per pipeline run
CREATE TABLE IF NOT EXISTS wellness_scores (
    id            TEXT PRIMARY KEY,
    user_id       TEXT NOT NULL,
    score_type    TEXT NOT NULL,
    score         REAL NOT NULL,
    confidence    REAL NOT NULL,
    period_start  TEXT NOT NULL,
    period_end    TEXT NOT NULL,
    factors_json  TEXT,
    explanation   TEXT,
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS insights (
    id                   TEXT PRIMARY KEY,
    user_id              TEXT NOT NULL,
    title                TEXT NOT NULL,
    description          TEXT,
    category             TEXT,
    severity             TEXT NOT NULL,
    priority             INTEGER NOT NULL,
    recommendations_json TEXT,
    practice_ids_json    TEXT,
    evidence_json        TEXT,
    reasoning            TEXT,
    status               TEXT NOT NULL DEFAULT 'active',
    expires_at           TEXT,
    acted_at             TEXT,
    dismissed_at         TEXT,
    created_at           TEXT NOT NULL,
    updated_at           TEXT
);

-- Practice catalog (read-only to the analysis pipeline)
CREATE TABLE IF NOT EXISTS practices (
    id               TEXT PRIMARY KEY,
    title            TEXT NOT NULL,
    description      TEXT,
    category         TEXT NOT NULL,
    duration_minutes INTEGER,
    difficulty       TEXT,
    tags_json        TEXT NOT NULL DEFAULT '[]',
    benefits_json    TEXT NOT NULL DEFAULT '[]',
    popularity       INTEGER NOT NULL DEFAULT 0,
    created_at       TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Lookup indexes
CREATE INDEX IF NOT EXISTS idx_samples_user_ts     ON wearable_samples(user_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_samples_type        ON wearable_samples(data_type);
CREATE INDEX IF NOT EXISTS idx_scores_user_type    ON wellness_scores(user_id, score_type, period_end);
CREATE INDEX IF NOT EXISTS idx_insights_user       ON insights(user_id, status);
CREATE INDEX IF NOT EXISTS idx_practices_category  ON practices(category);
CREATE INDEX IF NOT EXISTS idx_practices_pop       ON practices(popularity);
"""


# DDL applied to bring a database up to each version, in order.
_MIGRATIONS: dict[int, str] = {1: _SCHEMA_V1}

IN_MEMORY = ":memory:"


class DatabaseError(Exception):
    """Raised when the data bank is used before it is opened."""


def _connect(db_path: str) -> sqlite3.Connection:
    if db_path == IN_MEMORY:
        target = IN_MEMORY
    else:
        db_file = Path(db_path).expanduser()
        db_file.parent.mkdir(parents=True, exist_ok=True)
        target = str(db_file)
    conn = sqlite3.connect(target, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


class WellnessDatabase:
    """Owns the SQLite connection of the wellness data bank.

    ``db_path`` is a file path (``~`` expanded, parent directories created)
    or ``":memory:"``.

    Usage::

        with WellnessDatabase("~/.wellsense/wellness.db") as db:
            db.connection.execute(...)
    """

    def __init__(self, db_path: str = IN_MEMORY) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """The open connection.

        Raises:
            DatabaseError: If ``initialize()`` has not been called.
        """
        if self._conn is None:
            raise DatabaseError("Database not initialized. Call initialize() first.")
        return self._conn

    def initialize(self) -> None:
        """Open the connection and apply pending migrations. No-op if already open."""
        if self._conn is not None:
            return
        self._conn = _connect(self._db_path)
        self._migrate()
        logger.info("Wellness database ready: %s (schema v%d)", self._db_path, SCHEMA_VERSION)

    def _migrate(self) -> None:
        conn = self.connection
        # schema_version itself is created by the v1 script.
        start = self.get_schema_version() if self._has_version_table() else 0
        for version in sorted(v for v in _MIGRATIONS if v > start):
            conn.executescript(_MIGRATIONS[version])
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
            conn.commit()
            logger.info("Applied schema migration v%d", version)

    def _has_version_table(self) -> bool:
        row = self.connection.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
        ).fetchone()
        return row is not None

    def get_schema_version(self) -> int:
        """Highest applied schema version, 0 for an empty database."""
        (version,) = self.connection.execute(
            "SELECT COALESCE(MAX(version), 0) FROM schema_version"
        ).fetchone()
        return version

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Wellness database closed: %s", self._db_path)

    def __enter__(self) -> WellnessDatabase:
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
