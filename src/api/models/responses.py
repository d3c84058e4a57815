"""Pydantic response models for API endpoints."""

from datetime import date

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    backend_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BACKEND_ERROR = "BACKEND_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class WorkItemOut(BaseModel):
    id: int | str
    title: str
    due_date: str | None = None
    status: str | None = None
    priority: str | None = None


class LeaveSpanOut(BaseModel):
    id: int | str
    employee_id: int | str
    employee_name: str | None = None
    start_date: date
    end_date: date
    leave_type: str | None = None
    status: str | None = None


class CalendarCellOut(BaseModel):
    """Grid cell; day is null for padding cells."""

    day: int | None = None
    date_iso: str | None = None
    work_items: list[WorkItemOut] = []
    leave_spans: list[LeaveSpanOut] = []
    overflow: int = 0


class MonthRangeOut(BaseModel):
    year: int
    month: int
    first_day: date
    last_day: date
    offset: int
    days_in_month: int


class CalendarResponse(BaseModel):
    """Month grid, weeks of 7 cells."""

    range: MonthRangeOut
    weekdays: list[str]
    weeks: list[list[CalendarCellOut]]
    work_item_count: int
    leave_span_count: int
    warnings: list[str] = []


class DaySummaryResponse(BaseModel):
    day: date
    work_items: list[WorkItemOut]
    leave_spans: list[LeaveSpanOut]
    warnings: list[str] = []


class LeadOut(BaseModel):
    id: int | str
    title: str
    description: str | None = None
    value: float
    status: str
    source: str | None = None
    created_at: str | None = None


class LeadListResponse(BaseModel):
    leads: list[LeadOut]
    count: int
    warnings: list[str] = []


class DealOut(BaseModel):
    id: int | str
    title: str
    value: float
    stage: str


class PipelineStageOut(BaseModel):
    stage: str
    count: int
    total_value: float
    deals: list[DealOut]


class PipelineResponse(BaseModel):
    stages: list[PipelineStageOut]
    deal_count: int
    total_value: float
    open_value: float
    warnings: list[str] = []


class PayrollRecordOut(BaseModel):
    id: int | str
    employee_id: int | str
    employee_name: str | None = None
    basic_salary: float
    allowances: float
    deductions: float
    net_salary: float
    status: str | None = None


class PayrollResponse(BaseModel):
    year: int
    month: int
    records: list[PayrollRecordOut]
    employee_count: int
    total_basic: float
    total_allowances: float
    total_deductions: float
    total_net: float
    warnings: list[str] = []
