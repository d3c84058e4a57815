#!/usr/bin/env python3
"""
Browse the team calendar month by month in the terminal.

Commands: n (next month), p (previous month), t (today), r (refresh), q (quit)

Usage:
    uv run python src/scripts/browse_calendar.py --month 2024-03
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.backend_client import close_backend_client, get_backend_client
from services.calendar import CalendarView, parse_month
from services.reports import format_month_text

PROMPT = "[n]ext  [p]revious  [t]oday  [r]efresh  [q]uit > "


async def run_command(view: CalendarView, command: str) -> bool:
    """
    Apply one navigation command.

    Returns:
        False when the user asked to quit
    """
    command = command.strip().lower()
    if command in ("q", "quit"):
        return False
    try:
        if command in ("n", "next"):
            await view.next_month()
        elif command in ("p", "prev", "previous"):
            await view.previous_month()
        elif command in ("t", "today"):
            await view.go_to_today()
        elif command in ("r", "refresh", ""):
            await view.refresh()
        else:
            print(f"Unknown command '{command}'")
    except ValueError as e:
        print(f"Error: {e}")
    return True


async def main(month_str: str | None = None):
    """Interactive loop: render, prompt, navigate."""
    year, month = parse_month(month_str)
    view = CalendarView(get_backend_client(), year, month)
    try:
        await view.refresh()
        while True:
            print(format_month_text(view.render()))
            command = await asyncio.to_thread(input, PROMPT)
            if not await run_command(view, command):
                break
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        await close_backend_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Browse the team calendar")
    parser.add_argument(
        "--month",
        help="Month to open (YYYY-MM). Defaults to the current month.",
    )
    args = parser.parse_args()

    asyncio.run(main(args.month))
