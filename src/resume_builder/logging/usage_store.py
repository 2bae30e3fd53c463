"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resume_builder.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "usage.db"

_COLUMNS = (
    "id", "run_id", "timestamp", "kind", "company_name", "role", "model",
    "attempts", "elapsed_seconds", "input_tokens", "output_tokens",
    "success", "error_message",
)


class UsageStore:
    """SQLite-backed store for generation usage logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    run_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    company_name TEXT,
                    role TEXT,
                    model TEXT,
                    attempts INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                (
                    log.id,
                    log.run_id,
                    log.timestamp.isoformat(),
                    log.kind,
                    log.company_name,
                    log.role,
                    log.model,
                    log.attempts,
                    log.elapsed_seconds,
                    log.input_tokens,
                    log.output_tokens,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(self, run_id: str | None = None, limit: int = 50) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally for one run."""
        query = f"SELECT {', '.join(_COLUMNS)} FROM usage_logs"
        params: tuple = ()
        if run_id is not None:
            query += " WHERE run_id = ?"
            params = (run_id,)
        query += " ORDER BY timestamp DESC LIMIT ?"
        with self._connect() as conn:
            rows = conn.execute(query, params + (limit,)).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_stats(self) -> dict:
        """Aggregate attempts, tokens and success rate across all logs."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(attempts),
                       SUM(input_tokens),
                       SUM(output_tokens),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM usage_logs"""
            ).fetchone()
        total = row[0] or 0
        return {
            "total_documents": total,
            "total_attempts": row[1] or 0,
            "total_input_tokens": row[2] or 0,
            "total_output_tokens": row[3] or 0,
            "success_rate": (row[4] / total * 100) if total else 0.0,
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        values = dict(zip(_COLUMNS, row))
        values["timestamp"] = datetime.fromisoformat(values["timestamp"])
        values["success"] = bool(values["success"])
        return UsageLog(**values)
