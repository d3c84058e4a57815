"""
Calendar report generation for Excel and plain text.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from core.config import LEAVE_SPAN_HEADERS, WEEKDAY_HEADERS, WORK_ITEM_HEADERS
from models.calendar import CalendarCell, LeaveSpan, MonthGrid, WorkItem


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_month_title(d: date) -> str:
    """Format month as 'March 2024'."""
    return d.strftime("%B %Y")


def leave_label(span: LeaveSpan) -> str:
    who = span.employee_name or f"Employee {span.employee_id}"
    return f"{who} ({span.leave_type})" if span.leave_type else who


def cell_lines(cell: CalendarCell) -> list[str]:
    """Display lines for one grid cell: day number, visible items, overflow."""
    if cell.is_padding:
        return []
    lines = [str(cell.day)]
    lines.extend(f"• {item.title}" for item in cell.visible_work_items)
    lines.extend(f"◦ {leave_label(span)}" for span in cell.visible_leave_spans)
    if cell.overflow:
        lines.append(f"+{cell.overflow} more")
    return lines


def unique_work_items(grid: MonthGrid) -> list[WorkItem]:
    """Work items shown anywhere in the month, in day order."""
    items = []
    for cell in grid.day_cells:
        items.extend(cell.summary.work_items)
    return items


def unique_leave_spans(grid: MonthGrid) -> list[LeaveSpan]:
    """Leave spans touching the month, once each, in first-day order."""
    seen = set()
    spans = []
    for cell in grid.day_cells:
        for span in cell.summary.leave_spans:
            if span.id not in seen:
                seen.add(span.id)
                spans.append(span)
    return spans


# =============================================================================
# PLAIN TEXT
# =============================================================================


def format_month_text(grid: MonthGrid, width: int = 16) -> str:
    """Render the grid as fixed-width text, one block of lines per week."""
    title = format_month_title(grid.month_range.first_day)
    separator = "+" + "+".join("-" * width for _ in WEEKDAY_HEADERS) + "+"
    lines = [title.center(len(separator)), separator]
    lines.append("|" + "|".join(h.center(width) for h in WEEKDAY_HEADERS) + "|")
    lines.append(separator)

    for week in grid.weeks:
        week_lines = [cell_lines(cell) for cell in week]
        height = max(1, max(len(cl) for cl in week_lines))
        for row in range(height):
            parts = []
            for cl in week_lines:
                text = cl[row] if row < len(cl) else ""
                parts.append(text[:width].ljust(width))
            lines.append("|" + "|".join(parts) + "|")
        lines.append(separator)

    for warning in grid.warnings:
        lines.append(f"Warning: {warning}")

    return "\n".join(lines)


# =============================================================================
# EXCEL REPORT GENERATION
# =============================================================================


def write_excel_grid_sheet(ws, grid: MonthGrid):
    """
    Write Sheet 1 - month grid.

    Row 1: month title, Row 2: weekday headers, then one row per week.
    """
    ws.cell(row=1, column=1, value=format_month_title(grid.month_range.first_day)).font = Font(
        bold=True, size=14
    )

    for col_idx, header in enumerate(WEEKDAY_HEADERS, start=1):
        cell = ws.cell(row=2, column=col_idx, value=header)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        ws.column_dimensions[get_column_letter(col_idx)].width = 24

    for week_idx, week in enumerate(grid.weeks):
        row_idx = week_idx + 3
        for col_idx, cal_cell in enumerate(week, start=1):
            lines = cell_lines(cal_cell)
            if not lines:
                continue
            cell = ws.cell(row=row_idx, column=col_idx, value="\n".join(lines))
            cell.alignment = Alignment(wrap_text=True, vertical="top")
        ws.row_dimensions[row_idx].height = 90


def write_excel_work_items_sheet(ws, items: list[WorkItem]):
    """Write Sheet 2 - work item detail."""
    for col_idx, header in enumerate(WORK_ITEM_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, item in enumerate(items, start=2):
        row_data = [
            (item.due_date or "")[:10],
            item.title,
            item.status or "",
            item.priority or "",
            str(item.id),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_excel_leave_sheet(ws, spans: list[LeaveSpan]):
    """
    Write Sheet 3 - leave detail.

    Days column is the full span length, which can extend past the month.
    """
    for col_idx, header in enumerate(LEAVE_SPAN_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, span in enumerate(spans, start=2):
        row_data = [
            span.employee_name or str(span.employee_id),
            format_date_display(span.start_date),
            format_date_display(span.end_date),
            span.days,
            span.leave_type or "",
            span.status or "",
            str(span.id),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def build_calendar_workbook(grid: MonthGrid) -> Workbook:
    """Workbook with Calendar, Work Items and Leave sheets."""
    wb = Workbook()

    ws_grid = wb.active
    ws_grid.title = "Calendar"
    write_excel_grid_sheet(ws_grid, grid)

    ws_items = wb.create_sheet(title="Work Items")
    write_excel_work_items_sheet(ws_items, unique_work_items(grid))

    ws_leave = wb.create_sheet(title="Leave")
    write_excel_leave_sheet(ws_leave, unique_leave_spans(grid))

    return wb


def calendar_report_filename(grid: MonthGrid) -> str:
    month_range = grid.month_range
    return f"calendar_{month_range.year}_{month_range.month:02d}.xlsx"


def calendar_report_to_bytes(grid: MonthGrid) -> bytes:
    """Workbook as bytes, for HTTP downloads."""
    buffer = BytesIO()
    build_calendar_workbook(grid).save(buffer)
    return buffer.getvalue()


def create_calendar_excel_report(grid: MonthGrid, output_path: Path):
    """Save the calendar workbook to output_path."""
    wb = build_calendar_workbook(grid)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
