"""
Deal pipeline grouping and totals.
"""

from core.backend_client import BackendClient
from core.config import CLOSED_DEAL_STAGES, DEAL_STAGES, DEALS_TABLE
from core.validation import validate_rows
from models.crm import Deal


async def list_deals(client: BackendClient) -> tuple[list[Deal], list[str]]:
    """Fetch all deals, newest first, skipping invalid rows."""
    rows = await client.select(DEALS_TABLE, order="created_at", ascending=False)
    deals, errors = validate_rows(rows, Deal, "deal")
    for error in errors:
        print(f"  Warning: {error}")
    return deals, errors


def group_deals_by_stage(deals: list[Deal]) -> dict[str, list[Deal]]:
    """
    Group deals into pipeline columns.

    Every configured stage is present (possibly empty) in pipeline order.
    Stages not in the configuration are appended after, in first-seen order.
    Deals keep their input order within each stage.
    """
    groups: dict[str, list[Deal]] = {stage: [] for stage in DEAL_STAGES}
    for deal in deals:
        groups.setdefault(deal.stage, []).append(deal)
    return groups


def summarize_pipeline(deals: list[Deal]) -> dict:
    """Per-stage counts and values plus total and open pipeline value."""
    groups = group_deals_by_stage(deals)
    stages = [
        {
            "stage": stage,
            "count": len(stage_deals),
            "total_value": round(sum(d.value for d in stage_deals), 2),
            "deals": stage_deals,
        }
        for stage, stage_deals in groups.items()
    ]
    total_value = round(sum(d.value for d in deals), 2)
    open_value = round(sum(d.value for d in deals if d.stage not in CLOSED_DEAL_STAGES), 2)
    return {
        "stages": stages,
        "deal_count": len(deals),
        "total_value": total_value,
        "open_value": open_value,
    }
