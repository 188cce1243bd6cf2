"""SQLite-backed activity log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from cv_builder.logging.models import ActivityLog

DEFAULT_DB_PATH = Path.home() / ".cv-builder" / "activity.db"


class ActivityStore:
    """SQLite-backed store for activity logs with WAL mode."""

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
                CREATE TABLE IF NOT EXISTS activity_logs (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    action TEXT NOT NULL,
                    document_id TEXT,
                    template_id TEXT,
                    export_format TEXT,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    bytes_written INTEGER NOT NULL DEFAULT 0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: ActivityLog) -> None:
        """Persist an activity log entry."""
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO activity_logs
                   (id, session_id, timestamp, action, document_id, template_id,
                    export_format, elapsed_seconds, bytes_written, success,
                    error_message)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    log.id,
                    log.session_id,
                    log.timestamp.isoformat(),
                    log.action,
                    log.document_id,
                    log.template_id,
                    log.export_format,
                    log.elapsed_seconds,
                    log.bytes_written,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        document_id: str | None = None,
        limit: int = 50,
    ) -> list[ActivityLog]:
        """Retrieve activity logs, newest first, optionally for one document."""
        with self._connect() as conn:
            if document_id is not None:
                rows = conn.execute(
                    "SELECT * FROM activity_logs WHERE document_id = ? ORDER BY timestamp DESC LIMIT ?",
                    (document_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM activity_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_stats(self) -> dict:
        """Counts per action and overall success rate."""
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT action, COUNT(*),
                          SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM activity_logs GROUP BY action"""
            ).fetchall()
        total = sum(row[1] for row in rows)
        succeeded = sum(row[2] or 0 for row in rows)
        return {
            "total": total,
            "by_action": {row[0]: row[1] for row in rows},
            "failures": total - succeeded,
            "success_rate": (succeeded / total * 100) if total else 0.0,
        }

    @staticmethod
    def _row_to_log(row: tuple) -> ActivityLog:
        return ActivityLog(
            id=row[0],
            session_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            action=row[3],
            document_id=row[4],
            template_id=row[5],
            export_format=row[6],
            elapsed_seconds=row[7],
            bytes_written=row[8],
            success=bool(row[9]),
            error_message=row[10],
        )
