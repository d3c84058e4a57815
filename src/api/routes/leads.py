"""Lead endpoints."""

from fastapi import APIRouter, Depends, Header, Request, status

from api.dependencies import get_backend, verify_api_key
from api.logging import logged_request
from api.models.responses import LeadListResponse, LeadOut
from core.backend_client import BackendClient
from models.crm import Lead, LeadCreate
from services.leads import create_lead, filter_leads, list_leads

router = APIRouter(prefix="/v1/leads", dependencies=[Depends(verify_api_key)])


def lead_out(lead: Lead) -> LeadOut:
    return LeadOut(
        id=lead.id,
        title=lead.title,
        description=lead.description,
        value=lead.value,
        status=lead.status,
        source=lead.source,
        created_at=lead.created_at.isoformat() if lead.created_at else None,
    )


@router.get("", response_model=LeadListResponse)
async def get_leads(
    request: Request,
    search: str | None = None,
    backend: BackendClient = Depends(get_backend),
):
    """
    Leads, newest first, optionally filtered by title.

    Invalid rows are skipped and listed in `warnings`.
    """
    with logged_request(request, "/v1/leads") as request_log:
        leads, skipped = await list_leads(backend)
        for message in skipped:
            request_log.details.append(("validation_error", message))

    leads = filter_leads(leads, search)
    return LeadListResponse(
        leads=[lead_out(lead) for lead in leads], count=len(leads), warnings=skipped
    )


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
async def post_lead(
    request: Request,
    data: LeadCreate,
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    backend: BackendClient = Depends(get_backend),
):
    """Create a lead. X-User-Id, when sent, is stored as created_by."""
    with logged_request(request, "/v1/leads") as request_log:
        lead = await create_lead(backend, data, created_by=x_user_id)
        request_log.status_code = status.HTTP_201_CREATED
    return lead_out(lead)
