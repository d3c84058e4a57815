#!/usr/bin/env python3
"""
Generate demo tasks and leave requests for one month and push them to the
data backend.

Usage:
    uv run python tests/fixtures/seed_backend.py --month 2024-03 --employees 1,2,3
"""

import argparse
import asyncio
import random
import sys
from datetime import date, timedelta
from pathlib import Path

from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.backend_client import close_backend_client, get_backend_client
from core.config import LEAVE_SPANS_TABLE, WORK_ITEMS_TABLE
from services.calendar import parse_month, resolve_month_range

fake = Faker()

TASK_STATUSES = ["todo", "in_progress", "done"]
TASK_PRIORITIES = ["low", "medium", "high"]
LEAVE_TYPES = ["vacation", "sick", "personal"]

TASK_TITLES = [
    "Follow up with {company}",
    "Prepare proposal for {company}",
    "Quarterly review with {company}",
    "Send contract to {company}",
    "Onboarding call: {company}",
]


def generate_tasks(first_day: date, last_day: date, count: int) -> list[dict]:
    """Tasks with due dates spread over the month; some carry a time of day."""
    tasks = []
    span = (last_day - first_day).days
    for _ in range(count):
        due = first_day + timedelta(days=random.randint(0, span))
        due_value = due.isoformat()
        if random.random() < 0.4:
            due_value = f"{due_value}T{random.randint(8, 17):02d}:00:00+00:00"
        tasks.append(
            {
                "title": random.choice(TASK_TITLES).format(company=fake.company()),
                "description": fake.sentence(nb_words=8),
                "due_date": due_value,
                "status": random.choice(TASK_STATUSES),
                "priority": random.choice(TASK_PRIORITIES),
            }
        )
    return tasks


def generate_leave(first_day: date, last_day: date, employee_ids: list[str]) -> list[dict]:
    """One leave span per employee, occasionally crossing the month boundary."""
    spans = []
    for employee_id in employee_ids:
        start = first_day + timedelta(days=random.randint(-3, (last_day - first_day).days))
        end = start + timedelta(days=random.choice([0, 1, 2, 4, 6]))
        spans.append(
            {
                "employee_id": employee_id,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "leave_type": random.choice(LEAVE_TYPES),
                "status": "approved",
                "reason": fake.sentence(nb_words=5),
            }
        )
    return spans


async def main(month_str: str | None, employee_ids: list[str], task_count: int):
    year, month = parse_month(month_str)
    month_range = resolve_month_range(year, month)
    client = get_backend_client()

    try:
        tasks = generate_tasks(month_range.first_day, month_range.last_day, task_count)
        leave = generate_leave(month_range.first_day, month_range.last_day, employee_ids)

        print(f"Seeding {len(tasks)} tasks and {len(leave)} leave requests for {year}-{month:02d}")
        for task in tasks:
            await client.insert(WORK_ITEMS_TABLE, task)
        for span in leave:
            await client.insert(LEAVE_SPANS_TABLE, span)
        print("Done!")
    finally:
        await close_backend_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo calendar data")
    parser.add_argument("--month", help="Target month (YYYY-MM). Defaults to the current month.")
    parser.add_argument("--employees", required=True, help="Comma-separated employee ids")
    parser.add_argument("--tasks", type=int, default=25, help="Number of tasks to create")
    args = parser.parse_args()

    asyncio.run(main(args.month, [e.strip() for e in args.employees.split(",") if e.strip()], args.tasks))
