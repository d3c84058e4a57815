"""
Lead listing, search and creation.
"""

from pydantic import ValidationError

from core.backend_client import BackendClient, BackendError
from core.config import LEADS_TABLE
from core.validation import describe_validation_error, validate_rows
from models.crm import Lead, LeadCreate


async def list_leads(client: BackendClient) -> tuple[list[Lead], list[str]]:
    """
    Fetch all leads, newest first.

    Returns:
        Tuple of (leads, messages for rows skipped as invalid)
    """
    rows = await client.select(LEADS_TABLE, order="created_at", ascending=False)
    leads, errors = validate_rows(rows, Lead, "lead")
    for error in errors:
        print(f"  Warning: {error}")
    return leads, errors


def filter_leads(leads: list[Lead], search: str | None) -> list[Lead]:
    """Case-insensitive substring match on title. Empty search keeps everything."""
    if not search:
        return list(leads)
    needle = search.lower()
    return [lead for lead in leads if needle in lead.title.lower()]


async def create_lead(client: BackendClient, data: LeadCreate, created_by: str | None = None) -> Lead:
    """
    Insert a new lead and return it as stored.

    Raises:
        BackendError: If the insert fails or the stored row is not a valid lead
    """
    row = data.model_dump()
    row["created_by"] = created_by
    stored = await client.insert(LEADS_TABLE, row)
    try:
        lead = Lead.model_validate(stored)
    except ValidationError as e:
        raise BackendError(LEADS_TABLE, f"Invalid row returned: {describe_validation_error(e)}")
    print(f"Created lead: {lead.title}")
    return lead
