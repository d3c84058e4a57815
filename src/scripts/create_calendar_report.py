#!/usr/bin/env python3
"""
Create a monthly calendar report from the CRM data backend.

Fetches the month's tasks and leave requests, lays them out on a calendar
grid and writes an Excel workbook with three sheets:
- Calendar: 7-column month grid
- Work Items: tasks due in the month
- Leave: leave spans touching the month

Usage:
    uv run python src/scripts/create_calendar_report.py --month 2024-03
"""

import argparse
import asyncio
import sys
import traceback
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.backend_client import close_backend_client, get_backend_client
from core.config import OUTPUT_DIR
from services.calendar import (
    build_month_grid,
    fetch_month_events,
    parse_month,
    resolve_month_range,
    state_for_month,
)
from services.reports import calendar_report_filename, create_calendar_excel_report


# =============================================================================
# MAIN
# =============================================================================


async def main(month_str: str | None = None) -> Path:
    """Main entry point."""
    try:
        # 1. Resolve month range
        year, month = parse_month(month_str)
        month_range = resolve_month_range(year, month)
        print(f"Generating calendar report for {month_range.first_day} to {month_range.last_day}")

        # 2. Fetch tasks and leave for the month
        events = await fetch_month_events(get_backend_client(), month_range)
        print(f"  Work items: {len(events.work_items)}")
        print(f"  Leave spans: {len(events.leave_spans)}")

        # 3. Lay out the grid
        grid = build_month_grid(state_for_month(year, month, events))

        # 4. Generate Excel file
        output_path = OUTPUT_DIR / "reports" / "calendar" / calendar_report_filename(grid)
        create_calendar_excel_report(grid, output_path)

        print("\nDone!")
        return output_path

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise

    finally:
        await close_backend_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate monthly calendar report")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to the current month.",
    )
    args = parser.parse_args()

    asyncio.run(main(args.month))
