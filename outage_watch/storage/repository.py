from __future__ import annotations

import json
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Protocol

from outage_watch.core.models import NotificationState


class NotificationStateStore(Protocol):
    def load(self) -> NotificationState | None:
        """Return the live notification record, if any."""

    def save(self, state: NotificationState) -> None:
        """Replace the live notification record."""

    def delete(self) -> None:
        """Forget the live notification record."""


@dataclass(frozen=True)
class CheckRunResult:
    status: str
    error_message: str | None = None


class StateRepository:
    def __init__(self, database_path: str) -> None:
        self.database_path = database_path
        self._lock = threading.Lock()
        self._ensure_parent_dir()

    def _ensure_parent_dir(self) -> None:
        path = Path(self.database_path)
        path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.database_path)
        connection.row_factory = sqlite3.Row
        return connection

    def init_db(self) -> None:
        with self._lock, self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS notification_state (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    message_id TEXT NOT NULL,
                    issued_date TEXT NOT NULL,
                    outage_end_date TEXT NOT NULL,
                    updated_at_utc TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS check_runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    started_at_utc TEXT NOT NULL,
                    finished_at_utc TEXT NOT NULL,
                    status TEXT NOT NULL,
                    error_message TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_check_runs_started
                    ON check_runs(started_at_utc DESC);
                """
            )
            conn.commit()

    def ping(self) -> bool:
        with self._lock, self._connect() as conn:
            conn.execute("SELECT 1")
        return True

    def load(self) -> NotificationState | None:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                SELECT message_id, issued_date, outage_end_date
                FROM notification_state
                WHERE id = 1
                """
            ).fetchone()
        if row is None:
            return None
        return NotificationState(
            message_id=json.loads(str(row["message_id"])),
            issued_date=str(row["issued_date"]),
            outage_end_date=str(row["outage_end_date"]),
        )

    def save(self, state: NotificationState) -> None:
        updated_at = datetime.now(tz=timezone.utc).isoformat()

        with self._lock, self._connect() as conn:
            conn.execute(
                """
                INSERT INTO notification_state(
                    id,
                    message_id,
                    issued_date,
                    outage_end_date,
                    updated_at_utc
                ) VALUES (1, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    message_id = excluded.message_id,
                    issued_date = excluded.issued_date,
                    outage_end_date = excluded.outage_end_date,
                    updated_at_utc = excluded.updated_at_utc
                """,
                (
                    json.dumps(state.message_id),
                    state.issued_date,
                    state.outage_end_date,
                    updated_at,
                ),
            )
            conn.commit()

    def delete(self) -> None:
        with self._lock, self._connect() as conn:
            conn.execute("DELETE FROM notification_state")
            conn.commit()

    def record_check_run(
        self,
        *,
        started_at_utc: datetime,
        finished_at_utc: datetime,
        result: CheckRunResult,
    ) -> int:
        with self._lock, self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO check_runs(
                    started_at_utc,
                    finished_at_utc,
                    status,
                    error_message
                ) VALUES (?, ?, ?, ?)
                """,
                (
                    started_at_utc.astimezone(timezone.utc).isoformat(),
                    finished_at_utc.astimezone(timezone.utc).isoformat(),
                    result.status,
                    result.error_message,
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def recent_check_runs(self, limit: int) -> list[dict[str, Any]]:
        with self._lock, self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, started_at_utc, finished_at_utc, status, error_message
                FROM check_runs
                ORDER BY started_at_utc DESC, id DESC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()

        return [
            {
                "id": int(row["id"]),
                "startedAt": str(row["started_at_utc"]),
                "finishedAt": str(row["finished_at_utc"]),
                "status": str(row["status"]),
                "error": row["error_message"],
            }
            for row in rows
        ]

    def purge_old_check_runs(self, retention_days: int) -> int:
        cutoff = datetime.now(tz=timezone.utc) - timedelta(days=retention_days)
        with self._lock, self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM check_runs WHERE started_at_utc < ?",
                (cutoff.astimezone(timezone.utc).isoformat(),),
            )
            conn.commit()
            return int(cursor.rowcount)
