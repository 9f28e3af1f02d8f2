"""Per-request audit rows for the HTTP service."""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from core.config import DB_PATH
from core.database import create_schema, get_connection, insert_request_log


@dataclass
class RequestLog:
    """What one API call did: who asked, how it ended, how much it billed."""

    endpoint: str
    method: str
    client_ip: str | None = None
    employee_id: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    sessions_counted: int | None = None
    uncertain_matches: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (detail_type, message)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def fail(self, status_code: int, detail) -> None:
        """Record an HTTPException detail (standard error body or plain string)."""
        self.status_code = status_code
        if isinstance(detail, dict):
            self.error_code = detail.get("code")
            self.error_message = detail.get("error")
        else:
            self.error_message = str(detail)


def log_request(log: RequestLog) -> None:
    """Write request log to SQLite database."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(DB_PATH)
    try:
        create_schema(conn)
        row = asdict(log)
        details = row.pop("details")
        insert_request_log(conn, row, details)
    finally:
        conn.close()
