"""
Payroll records and net salary arithmetic.
"""

from core.backend_client import BackendClient
from core.config import PAYROLL_TABLE
from core.validation import validate_rows
from models.crm import PayrollRecord


def calculate_net_salary(basic_salary: float, allowances: float = 0.0, deductions: float = 0.0) -> float:
    """
    Net salary = basic + allowances - deductions, rounded to cents.

    Raises:
        ValueError: If any component is negative
    """
    for name, amount in (
        ("basic_salary", basic_salary),
        ("allowances", allowances),
        ("deductions", deductions),
    ):
        if amount < 0:
            raise ValueError(f"{name} cannot be negative, got {amount}")
    return round(basic_salary + allowances - deductions, 2)


def net_salary(record: PayrollRecord) -> float:
    return calculate_net_salary(record.basic_salary, record.allowances, record.deductions)


async def fetch_payroll(
    client: BackendClient, year: int, month: int
) -> tuple[list[PayrollRecord], list[str]]:
    """
    Fetch payroll records for one pay period.

    Returns:
        Tuple of (records, messages for rows skipped as invalid)
    """
    rows = await client.select(
        PAYROLL_TABLE,
        filters=[("year", "eq", year), ("month", "eq", month)],
        columns="*, employee:employees(full_name)",
        order="employee_id",
    )
    records, errors = validate_rows(rows, PayrollRecord, "payroll record")
    for error in errors:
        print(f"  Warning: {error}")
    return records, errors


def summarize_payroll(records: list[PayrollRecord]) -> dict:
    """Column totals for a pay period."""
    return {
        "employee_count": len({r.employee_id for r in records}),
        "total_basic": round(sum(r.basic_salary for r in records), 2),
        "total_allowances": round(sum(r.allowances for r in records), 2),
        "total_deductions": round(sum(r.deductions for r in records), 2),
        "total_net": round(sum(net_salary(r) for r in records), 2),
    }
