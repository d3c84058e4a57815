"""Deal pipeline endpoint."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_backend, verify_api_key
from api.logging import logged_request
from api.models.responses import DealOut, PipelineResponse, PipelineStageOut
from core.backend_client import BackendClient
from services.pipeline import list_deals, summarize_pipeline

router = APIRouter(prefix="/v1/deals", dependencies=[Depends(verify_api_key)])


@router.get("/pipeline", response_model=PipelineResponse)
async def get_pipeline(request: Request, backend: BackendClient = Depends(get_backend)):
    """Deals grouped by stage, in pipeline order."""
    with logged_request(request, "/v1/deals/pipeline") as request_log:
        deals, skipped = await list_deals(backend)
        for message in skipped:
            request_log.details.append(("validation_error", message))

    summary = summarize_pipeline(deals)
    return PipelineResponse(
        stages=[
            PipelineStageOut(
                stage=stage["stage"],
                count=stage["count"],
                total_value=stage["total_value"],
                deals=[DealOut.model_validate(d.model_dump()) for d in stage["deals"]],
            )
            for stage in summary["stages"]
        ],
        deal_count=summary["deal_count"],
        total_value=summary["total_value"],
        open_value=summary["open_value"],
        warnings=skipped,
    )
