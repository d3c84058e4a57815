"""API route modules."""

from .calendar import router as calendar_router
from .health import router as health_router
from .leads import router as leads_router
from .payroll import router as payroll_router
from .pipeline import router as pipeline_router

__all__ = [
    "health_router",
    "calendar_router",
    "leads_router",
    "pipeline_router",
    "payroll_router",
]
