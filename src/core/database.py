"""
SQLite database operations for match confirmations.
"""

import sqlite3
from pathlib import Path

from core.config import DB_PATH

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS match_confirmations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        event_title_normalized TEXT NOT NULL,
        employee_id TEXT NOT NULL,
        matched_client_name TEXT NOT NULL,
        created_at TEXT NOT NULL,
        UNIQUE (event_title_normalized, employee_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        employee_id TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        sessions_counted INTEGER,
        uncertain_matches INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'uncertain_match', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_match_confirmations_employee ON match_confirmations(employee_id)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
]


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(db_path, check_same_thread=False)


def create_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def select_confirmation(
    conn: sqlite3.Connection, title_normalized: str, employee_id: str
) -> str | None:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT matched_client_name FROM match_confirmations
        WHERE event_title_normalized = ? AND employee_id = ?
        """,
        (title_normalized, employee_id),
    )
    row = cursor.fetchone()
    return row[0] if row else None


def select_confirmations_by_employee(
    conn: sqlite3.Connection, employee_id: str
) -> list[tuple[str, str, str]]:
    """Return (title_normalized, client_name, created_at) rows, oldest first."""
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT event_title_normalized, matched_client_name, created_at
        FROM match_confirmations WHERE employee_id = ? ORDER BY id
        """,
        (employee_id,),
    )
    return cursor.fetchall()


def upsert_confirmation(
    conn: sqlite3.Connection,
    title_normalized: str,
    employee_id: str,
    client_name: str,
    created_at: str,
) -> None:
    """Insert or replace the decision for (title, employee)."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO match_confirmations (
            event_title_normalized, employee_id, matched_client_name, created_at
        ) VALUES (?, ?, ?, ?)
        ON CONFLICT (event_title_normalized, employee_id) DO UPDATE SET
            matched_client_name = excluded.matched_client_name,
            created_at = excluded.created_at
        """,
        (title_normalized, employee_id, client_name, created_at),
    )
    conn.commit()


def delete_confirmations_by_employee(conn: sqlite3.Connection, employee_id: str) -> int:
    cursor = conn.cursor()
    cursor.execute("DELETE FROM match_confirmations WHERE employee_id = ?", (employee_id,))
    conn.commit()
    return cursor.rowcount


REQUEST_LOG_COLUMNS = (
    "request_id",
    "timestamp",
    "endpoint",
    "method",
    "client_ip",
    "employee_id",
    "status_code",
    "error_code",
    "error_message",
    "processing_time_ms",
    "sessions_counted",
    "uncertain_matches",
)


def insert_request_log(
    conn: sqlite3.Connection, row: dict, details: list[tuple[str, str]]
) -> None:
    """Insert one api_requests row (keyed by REQUEST_LOG_COLUMNS) and its detail rows."""
    cursor = conn.cursor()
    columns = ", ".join(REQUEST_LOG_COLUMNS)
    placeholders = ", ".join(f":{c}" for c in REQUEST_LOG_COLUMNS)
    cursor.execute(
        f"INSERT INTO api_requests ({columns}) VALUES ({placeholders})",
        {c: row.get(c) for c in REQUEST_LOG_COLUMNS},
    )
    cursor.executemany(
        "INSERT INTO api_request_details (request_id, detail_type, message) VALUES (?, ?, ?)",
        [(row["request_id"], detail_type, message) for detail_type, message in details],
    )
    conn.commit()
