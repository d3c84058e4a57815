"""Calendar month and day endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from api.dependencies import get_backend, verify_api_key
from api.logging import logged_request
from api.models.responses import (
    CalendarCellOut,
    CalendarResponse,
    DaySummaryResponse,
    ErrorCodes,
    LeaveSpanOut,
    MonthRangeOut,
    WorkItemOut,
)
from core.backend_client import BackendClient
from core.config import WEEKDAY_HEADERS
from models.calendar import CalendarCell, LeaveSpan, MonthGrid, MonthRange, WorkItem
from services.calendar import (
    build_month_grid,
    bucketize_day,
    fetch_month_events,
    resolve_month_range,
    state_for_month,
)
from services.reports import calendar_report_filename, calendar_report_to_bytes

router = APIRouter(prefix="/v1/calendar", dependencies=[Depends(verify_api_key)])


def resolve_or_400(year: int, month: int) -> MonthRange:
    try:
        return resolve_month_range(year, month)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid month",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"Expected year 1-9999 and month 1-12, got {year}-{month}"],
            },
        )


def work_item_out(item: WorkItem) -> WorkItemOut:
    return WorkItemOut.model_validate(item.model_dump())


def leave_span_out(span: LeaveSpan) -> LeaveSpanOut:
    return LeaveSpanOut.model_validate(span.model_dump())


def cell_out(cell: CalendarCell) -> CalendarCellOut:
    if cell.is_padding:
        return CalendarCellOut()
    return CalendarCellOut(
        day=cell.day,
        date_iso=cell.summary.day.isoformat(),
        work_items=[work_item_out(i) for i in cell.visible_work_items],
        leave_spans=[leave_span_out(s) for s in cell.visible_leave_spans],
        overflow=cell.overflow,
    )


def grid_to_response(grid: MonthGrid, work_item_count: int, leave_span_count: int) -> CalendarResponse:
    month_range = grid.month_range
    return CalendarResponse(
        range=MonthRangeOut(
            year=month_range.year,
            month=month_range.month,
            first_day=month_range.first_day,
            last_day=month_range.last_day,
            offset=month_range.offset,
            days_in_month=month_range.days_in_month,
        ),
        weekdays=WEEKDAY_HEADERS,
        weeks=[[cell_out(cell) for cell in week] for week in grid.weeks],
        work_item_count=work_item_count,
        leave_span_count=leave_span_count,
        warnings=list(grid.warnings),
    )


async def _load_month(
    request: Request,
    backend: BackendClient,
    year: int,
    month: int,
    endpoint: str,
    day: int | None = None,
):
    """Validate the month (and day), fetch its events, logging the request."""
    with logged_request(request, endpoint, query_month=f"{year:04d}-{month:02d}") as request_log:
        month_range = resolve_or_400(year, month)
        if day is not None and not 1 <= day <= month_range.days_in_month:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Invalid day",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [f"{year}-{month:02d} has {month_range.days_in_month} days, got {day}"],
                },
            )

        events = await fetch_month_events(backend, month_range)

        request_log.work_items_count = len(events.work_items)
        request_log.leave_spans_count = len(events.leave_spans)
        for warning in events.warnings:
            request_log.details.append(("warning", warning))
        return events


@router.get("/{year}/{month}", response_model=CalendarResponse)
async def get_month(
    request: Request,
    year: int,
    month: int,
    backend: BackendClient = Depends(get_backend),
):
    """
    Month grid with per-day work items and leave.

    Fetch failures do not fail the request: the affected collection is empty
    and the failure is listed in `warnings`.
    """
    events = await _load_month(request, backend, year, month, "/v1/calendar/{year}/{month}")
    grid = build_month_grid(state_for_month(year, month, events))
    return grid_to_response(grid, len(events.work_items), len(events.leave_spans))


@router.get("/{year}/{month}/days/{day}", response_model=DaySummaryResponse)
async def get_day(
    request: Request,
    year: int,
    month: int,
    day: int,
    backend: BackendClient = Depends(get_backend),
):
    """Every work item and leave span on one day, without truncation."""
    events = await _load_month(
        request, backend, year, month, "/v1/calendar/{year}/{month}/days/{day}", day=day
    )
    summary = bucketize_day(year, month, day, events.work_items, events.leave_spans)
    return DaySummaryResponse(
        day=summary.day,
        work_items=[work_item_out(i) for i in summary.work_items],
        leave_spans=[leave_span_out(s) for s in summary.leave_spans],
        warnings=list(events.warnings),
    )


@router.get("/{year}/{month}/export")
async def export_month(
    request: Request,
    year: int,
    month: int,
    backend: BackendClient = Depends(get_backend),
):
    """Download the month as an Excel workbook."""
    events = await _load_month(
        request, backend, year, month, "/v1/calendar/{year}/{month}/export"
    )
    grid = build_month_grid(state_for_month(year, month, events))
    return Response(
        content=calendar_report_to_bytes(grid),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{calendar_report_filename(grid)}"'},
    )
