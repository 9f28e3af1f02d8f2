"""API route modules."""

from .health import router as health_router
from .matches import router as matches_router
from .payroll import router as payroll_router

__all__ = ["health_router", "matches_router", "payroll_router"]
