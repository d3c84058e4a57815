"""Payroll endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_backend, verify_api_key
from api.logging import logged_request
from api.models.responses import ErrorCodes, PayrollRecordOut, PayrollResponse
from core.backend_client import BackendClient
from services.payroll import fetch_payroll, net_salary, summarize_payroll

router = APIRouter(prefix="/v1/payroll", dependencies=[Depends(verify_api_key)])


@router.get("/{year}/{month}", response_model=PayrollResponse)
async def get_payroll(
    request: Request,
    year: int,
    month: int,
    backend: BackendClient = Depends(get_backend),
):
    """Payroll records for one pay period with net salaries and totals."""
    with logged_request(
        request, "/v1/payroll/{year}/{month}", query_month=f"{year:04d}-{month:02d}"
    ) as request_log:
        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Invalid month",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [f"Expected month 1-12, got {month}"],
                },
            )

        records, skipped = await fetch_payroll(backend, year, month)
        for message in skipped:
            request_log.details.append(("validation_error", message))

    return PayrollResponse(
        year=year,
        month=month,
        records=[
            PayrollRecordOut(**record.model_dump(), net_salary=net_salary(record))
            for record in records
        ],
        warnings=skipped,
        **summarize_payroll(records),
    )
