"""Payroll calculation endpoint."""

import asyncio
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger

from api.dependencies import get_confirmation_store, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import PayrollRequest
from api.models.responses import ErrorCodes, PayrollResponse
from core.validation import validate_client, validate_supervision_config
from services.confirmations import MatchConfirmationStore
from services.orchestrator import (
    MatchResolutionOrchestrator,
    StaticClientRoster,
    StaticEventSource,
)

router = APIRouter(prefix="/v1")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def write_request_log(request_log: RequestLog, start_time: float) -> None:
    """Persist the request log; a logging failure never fails the request."""
    request_log.processing_time_ms = int((time.time() - start_time) * 1000)
    try:
        log_request(request_log)
    except Exception as e:
        logger.warning(f"Could not write request log {request_log.request_id}: {e}")


@router.post("/payroll/calculate", response_model=PayrollResponse)
async def calculate_payroll_endpoint(
    request: Request,
    body: PayrollRequest,
    store: MatchConfirmationStore = Depends(get_confirmation_store),
    _api_key: str = Depends(verify_api_key),
):
    """
    Calculate payroll for one employee and period.

    Events with a single confident match or a stored decision are billed;
    the rest come back as uncertain matches for confirmation.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/payroll/calculate",
        method="POST",
        client_ip=get_client_ip(request),
        employee_id=body.employee.id,
    )

    try:
        clients = [c.to_domain() for c in body.clients]
        # Bad price splits are reported, not rejected: the calculator uses prices as given
        for client in clients:
            for error in validate_client(client):
                request_log.details.append(("warning", f"{client.name}: {error}"))

        supervision = body.supervision.to_domain() if body.supervision else None
        if supervision is not None:
            for error in validate_supervision_config(supervision):
                request_log.details.append(("warning", f"Supervision: {error}"))

        orchestrator = MatchResolutionOrchestrator(
            store=store,
            roster=StaticClientRoster(clients),
            events=StaticEventSource([e.to_domain() for e in body.events]),
            supervision_config=supervision,
        )
        result = await asyncio.to_thread(
            orchestrator.calculate_payroll,
            body.employee.to_domain(),
            body.period_start,
            body.period_end,
        )

        if not result.ok:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "error": "Payroll calculation failed",
                    "code": ErrorCodes.STORE_UNAVAILABLE,
                    "details": [result.error],
                },
            )

        request_log.status_code = 200
        request_log.sessions_counted = result.report.summary.total_sessions
        request_log.uncertain_matches = len(result.uncertain_matches)
        for match in result.uncertain_matches:
            request_log.details.append(("uncertain_match", match.event_title))

        return PayrollResponse.from_domain(result.report, result.uncertain_matches)

    except HTTPException as e:
        request_log.fail(e.status_code, e.detail)
        raise

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        logger.exception("Unexpected error during payroll calculation")

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        write_request_log(request_log, start_time)
