"""API Pydantic models."""

from .responses import (
    CalendarResponse,
    DaySummaryResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    LeadListResponse,
    PayrollResponse,
    PipelineResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CalendarResponse",
    "DaySummaryResponse",
    "LeadListResponse",
    "PipelineResponse",
    "PayrollResponse",
]
