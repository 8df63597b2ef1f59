from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from resumeos.core.config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                kind TEXT NOT NULL,
                model TEXT NOT NULL,
                status TEXT NOT NULL,
                error_code TEXT,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS skill_gap_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                hard_score INTEGER NOT NULL,
                soft_score INTEGER NOT NULL,
                other_score INTEGER NOT NULL,
                required_count INTEGER NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_ai_runs_created_at
            ON ai_runs (created_at)
            """
        )
        conn.commit()
    purge_old_records()


def log_ai_run(
    *,
    run_id: str,
    kind: str,
    model: str,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    with sqlite3.connect(_get_db_path()) as conn:
        conn.execute(
            """
            INSERT INTO ai_runs (
                created_at, run_id, kind, model, status, error_code, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (_utc_now(), run_id, kind, model, status, error_code, latency_ms),
        )
        conn.commit()


def log_skill_gap_run(
    *,
    hard_score: int,
    soft_score: int,
    other_score: int,
    required_count: int,
) -> None:
    if not settings.analytics_enabled:
        return
    with sqlite3.connect(_get_db_path()) as conn:
        conn.execute(
            """
            INSERT INTO skill_gap_runs (
                created_at, hard_score, soft_score, other_score, required_count
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (_utc_now(), hard_score, soft_score, other_score, required_count),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"ai_runs": 0, "skill_gap_runs": 0}

    retention = max(1, int(settings.analytics_retention_days))
    deleted = {"ai_runs": 0, "skill_gap_runs": 0}
    with sqlite3.connect(_get_db_path()) as conn:
        for table in deleted:
            cur = conn.execute(
                f"DELETE FROM {table} WHERE created_at < datetime('now', ?)",
                (f"-{retention} days",),
            )
            deleted[table] = int(cur.rowcount or 0)
        conn.commit()
    return deleted


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    with sqlite3.connect(_get_db_path()) as conn:
        total_runs = conn.execute("SELECT COUNT(*) FROM ai_runs").fetchone()[0]
        by_status = dict(
            conn.execute("SELECT status, COUNT(*) FROM ai_runs GROUP BY status").fetchall()
        )
        by_error = dict(
            conn.execute(
                """
                SELECT error_code, COUNT(*) FROM ai_runs
                WHERE error_code IS NOT NULL
                GROUP BY error_code
                """
            ).fetchall()
        )
        avg_latency = conn.execute(
            "SELECT AVG(latency_ms) FROM ai_runs WHERE status = 'success'"
        ).fetchone()[0]
        gap_row = conn.execute(
            """
            SELECT COUNT(*), AVG(hard_score), AVG(soft_score), AVG(other_score)
            FROM skill_gap_runs
            """
        ).fetchone()
    return {
        "enabled": True,
        "ai_runs": total_runs,
        "ai_runs_by_status": by_status,
        "ai_errors_by_code": by_error,
        "avg_success_latency_ms": int(avg_latency) if avg_latency is not None else None,
        "skill_gap_runs": gap_row[0],
        "avg_scores": {
            "hard": round(gap_row[1] or 0.0, 1),
            "soft": round(gap_row[2] or 0.0, 1),
            "other": round(gap_row[3] or 0.0, 1),
        },
    }
