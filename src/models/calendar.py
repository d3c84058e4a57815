"""
Data models for the calendar view.

Backend rows are validated into pydantic records at the collaborator
boundary. View state and derived aggregates are frozen dataclasses so that
navigation and rendering always produce new values.
"""

from dataclasses import dataclass, field, replace
from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class WorkItem(BaseModel):
    """A schedulable unit of work (a row of the tasks table)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    title: str
    due_date: str | None = None  # ISO date or timestamp, kept as stored
    status: str | None = None
    priority: str | None = None

    def is_due_on(self, day_iso: str) -> bool:
        return bool(self.due_date) and self.due_date.startswith(day_iso)


class LeaveSpan(BaseModel):
    """An inclusive date interval during which an employee is unavailable."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    employee_id: int | str
    start_date: date
    end_date: date
    leave_type: str | None = None
    status: str | None = None
    employee_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_employee(cls, data):
        # Relationship expansion returns {"employee": {"full_name": ...}}
        if isinstance(data, dict) and isinstance(data.get("employee"), dict):
            data = {**data, "employee_name": data["employee"].get("full_name")}
        return data

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def date_part(cls, value):
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    @model_validator(mode="after")
    def check_order(self):
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class MonthRange:
    """First/last day of a displayed month and the grid's leading padding."""

    year: int
    month: int
    first_day: date
    last_day: date
    offset: int  # weekday of first_day, Sunday = 0

    @property
    def days_in_month(self) -> int:
        return self.last_day.day


@dataclass(frozen=True)
class DaySummary:
    """Items overlapping a single calendar day. Derived, never persisted."""

    day: date
    work_items: tuple[WorkItem, ...] = ()
    leave_spans: tuple[LeaveSpan, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.work_items and not self.leave_spans


@dataclass(frozen=True)
class MonthEvents:
    """Result of one month fetch: both collections plus fetch warnings."""

    work_items: tuple[WorkItem, ...] = ()
    leave_spans: tuple[LeaveSpan, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class CalendarState:
    """Immutable calendar view state for one displayed month."""

    year: int
    month: int
    request_seq: int = 0
    loading: bool = False
    work_items: tuple[WorkItem, ...] = ()
    leave_spans: tuple[LeaveSpan, ...] = ()
    warnings: tuple[str, ...] = ()

    def with_events(self, events: MonthEvents) -> "CalendarState":
        """Replace (never merge) the fetched collections."""
        return replace(
            self,
            loading=False,
            work_items=events.work_items,
            leave_spans=events.leave_spans,
            warnings=events.warnings,
        )


@dataclass(frozen=True)
class CalendarCell:
    """One grid cell; day is None for padding cells."""

    day: int | None = None
    summary: DaySummary | None = None
    visible_work_items: tuple[WorkItem, ...] = ()
    visible_leave_spans: tuple[LeaveSpan, ...] = ()
    overflow: int = 0

    @property
    def is_padding(self) -> bool:
        return self.day is None


@dataclass(frozen=True)
class MonthGrid:
    """Rendered month: cells in reading order, 7 per week."""

    month_range: MonthRange
    cells: tuple[CalendarCell, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = ()

    @property
    def weeks(self) -> list[tuple[CalendarCell, ...]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]

    @property
    def day_cells(self) -> list[CalendarCell]:
        return [cell for cell in self.cells if not cell.is_padding]
