"""FastAPI dependencies for authentication and shared resources."""

import secrets

from fastapi import Header, HTTPException, status

from core.config import DB_PATH, PAYROLL_API_KEY
from services.confirmations import MatchConfirmationStore, SqliteMatchConfirmationStore

_confirmation_store: SqliteMatchConfirmationStore | None = None


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not PAYROLL_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, PAYROLL_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


def get_confirmation_store() -> MatchConfirmationStore:
    """Get or create the shared SQLite confirmation store (lazy initialization)."""
    global _confirmation_store
    if _confirmation_store is None:
        _confirmation_store = SqliteMatchConfirmationStore(DB_PATH)
    return _confirmation_store
