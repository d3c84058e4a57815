"""
Calendar aggregation: month range, event fetching, day bucketing, grid layout.
"""

import asyncio
import calendar
from datetime import MAXYEAR, MINYEAR, date, timedelta

from core.backend_client import BackendClient
from core.config import (
    LEAVE_SPANS_SELECT,
    LEAVE_SPANS_TABLE,
    MAX_ITEMS_PER_DAY,
    WORK_ITEMS_TABLE,
)
from core.validation import validate_rows
from models.calendar import (
    CalendarCell,
    CalendarState,
    DaySummary,
    LeaveSpan,
    MonthEvents,
    MonthGrid,
    MonthRange,
    WorkItem,
)

# =============================================================================
# RANGE RESOLVER
# =============================================================================


def resolve_month_range(year: int, month: int) -> MonthRange:
    """
    First and last day of a month plus the weekday offset of the first day.

    Offset counts from Sunday (0) so the grid can be left-padded.
    """
    first_day = date(year, month, 1)
    _, last = calendar.monthrange(year, month)
    offset = (first_day.weekday() + 1) % 7
    return MonthRange(
        year=year,
        month=month,
        first_day=first_day,
        last_day=first_day.replace(day=last),
        offset=offset,
    )


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """
    Move `delta` months forward (or back) from year/month.

    Raises:
        ValueError: If the result falls outside the supported years
    """
    index = year * 12 + (month - 1) + delta
    new_year, new_month = index // 12, index % 12 + 1
    if not MINYEAR <= new_year <= MAXYEAR:
        raise ValueError(f"No month {delta:+d} from {year}-{month:02d}")
    return new_year, new_month


def parse_month(month_str: str | None, today: date | None = None) -> tuple[int, int]:
    """
    Parse YYYY-MM into (year, month).

    Args:
        month_str: Optional month string (YYYY-MM). Uses the current month if None.
    """
    if not month_str:
        today = today or date.today()
        return today.year, today.month

    try:
        year, month = map(int, month_str.split("-"))
    except ValueError:
        raise ValueError(f"Expected YYYY-MM, got '{month_str}'")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"Year must be {MINYEAR}-{MAXYEAR}, got {year}")
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return year, month


# =============================================================================
# EVENT FETCHER
# =============================================================================


async def fetch_work_items(client: BackendClient, month_range: MonthRange) -> list[WorkItem]:
    """Fetch work items due within the month, in backend order."""
    # Upper bound is the first of next month so timestamped due dates on the
    # last day are still included. December of the last year has no next month.
    filters = [("due_date", "gte", month_range.first_day.isoformat())]
    if month_range.last_day < date.max:
        next_month_start = month_range.last_day + timedelta(days=1)
        filters.append(("due_date", "lt", next_month_start.isoformat()))
    rows = await client.select(WORK_ITEMS_TABLE, filters=filters)
    items, errors = validate_rows(rows, WorkItem, "work item")
    for error in errors:
        print(f"  Warning: {error}")
    return items


async def fetch_leave_spans(client: BackendClient, month_range: MonthRange) -> list[LeaveSpan]:
    """Fetch leave spans intersecting the month, in backend order."""
    rows = await client.select(
        LEAVE_SPANS_TABLE,
        filters=[
            ("start_date", "lte", month_range.last_day.isoformat()),
            ("end_date", "gte", month_range.first_day.isoformat()),
        ],
        columns=LEAVE_SPANS_SELECT,
    )
    spans, errors = validate_rows(rows, LeaveSpan, "leave span")
    for error in errors:
        print(f"  Warning: {error}")
    return spans


async def fetch_month_events(client: BackendClient, month_range: MonthRange) -> MonthEvents:
    """
    Fetch work items and leave spans for a month concurrently.

    A failed read leaves its collection empty and adds a warning; the other
    collection is still returned. Nothing is retried.
    """
    work_result, leave_result = await asyncio.gather(
        fetch_work_items(client, month_range),
        fetch_leave_spans(client, month_range),
        return_exceptions=True,
    )

    for result in (work_result, leave_result):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result

    warnings = []
    if isinstance(work_result, Exception):
        warnings.append(f"Failed to fetch work items: {work_result}")
        work_result = []
    if isinstance(leave_result, Exception):
        warnings.append(f"Failed to fetch leave spans: {leave_result}")
        leave_result = []

    for warning in warnings:
        print(f"  Warning: {warning}")

    return MonthEvents(
        work_items=tuple(work_result),
        leave_spans=tuple(leave_result),
        warnings=tuple(warnings),
    )


# =============================================================================
# DAY BUCKETIZER
# =============================================================================


def bucketize_day(
    year: int,
    month: int,
    day: int,
    work_items: tuple[WorkItem, ...] | list[WorkItem],
    leave_spans: tuple[LeaveSpan, ...] | list[LeaveSpan],
) -> DaySummary:
    """
    Collect the items overlapping one day.

    Work items match on due-date prefix; leave spans match when the day falls
    inside their inclusive range. Input order is preserved.
    """
    current = date(year, month, day)
    day_iso = current.isoformat()
    return DaySummary(
        day=current,
        work_items=tuple(item for item in work_items if item.is_due_on(day_iso)),
        leave_spans=tuple(span for span in leave_spans if span.covers(current)),
    )


# =============================================================================
# GRID RENDERER
# =============================================================================


def build_day_cell(summary: DaySummary, max_items: int) -> CalendarCell:
    """Truncate a day's items for display; leave spans fill remaining slots."""
    visible_work = summary.work_items[:max_items]
    remaining = max(max_items - len(visible_work), 0)
    visible_leave = summary.leave_spans[:remaining]
    total = len(summary.work_items) + len(summary.leave_spans)
    return CalendarCell(
        day=summary.day.day,
        summary=summary,
        visible_work_items=visible_work,
        visible_leave_spans=visible_leave,
        overflow=total - len(visible_work) - len(visible_leave),
    )


def build_month_grid(state: CalendarState, max_items: int = MAX_ITEMS_PER_DAY) -> MonthGrid:
    """
    Render a calendar state into a 7-column grid.

    Pure: depends only on `state`. Leading cells pad the first weekday,
    trailing cells complete the last week.
    """
    month_range = resolve_month_range(state.year, state.month)
    cells = [CalendarCell() for _ in range(month_range.offset)]

    for day in range(1, month_range.days_in_month + 1):
        summary = bucketize_day(state.year, state.month, day, state.work_items, state.leave_spans)
        cells.append(build_day_cell(summary, max_items))

    while len(cells) % 7:
        cells.append(CalendarCell())

    return MonthGrid(month_range=month_range, cells=tuple(cells), warnings=state.warnings)


# =============================================================================
# INTERACTIVE VIEW
# =============================================================================


class CalendarView:
    """
    Month-navigable calendar backed by the data backend.

    Every load takes a new request sequence number. A response only replaces
    the state if no newer load has started since, so an out-of-order reply
    for a month the user already left is dropped.
    """

    def __init__(self, client: BackendClient, year: int, month: int):
        self._client = client
        self._latest_seq = 0
        self.state = CalendarState(year=year, month=month)

    @property
    def latest_seq(self) -> int:
        return self._latest_seq

    async def load(self, year: int, month: int) -> bool:
        """
        Fetch a month and apply it if still current.

        Returns:
            True if the response was applied, False if it was stale

        Raises:
            ValueError: If year/month is not a valid month; state is unchanged
        """
        month_range = resolve_month_range(year, month)
        self._latest_seq += 1
        seq = self._latest_seq
        pending = CalendarState(year=year, month=month, request_seq=seq, loading=True)
        self.state = pending

        events = await fetch_month_events(self._client, month_range)

        if seq != self._latest_seq:
            print(f"  Discarded stale response for {year}-{month:02d} (request {seq})")
            return False

        self.state = pending.with_events(events)
        return True

    async def refresh(self) -> bool:
        return await self.load(self.state.year, self.state.month)

    async def next_month(self) -> bool:
        return await self.load(*shift_month(self.state.year, self.state.month, 1))

    async def previous_month(self) -> bool:
        return await self.load(*shift_month(self.state.year, self.state.month, -1))

    async def go_to_today(self, today: date | None = None) -> bool:
        today = today or date.today()
        return await self.load(today.year, today.month)

    def render(self, max_items: int = MAX_ITEMS_PER_DAY) -> MonthGrid:
        return build_month_grid(self.state, max_items)


def state_for_month(year: int, month: int, events: MonthEvents) -> CalendarState:
    """Build a loaded state directly, for one-shot (non-interactive) rendering."""
    return CalendarState(year=year, month=month).with_events(events)
