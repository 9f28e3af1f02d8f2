"""Match confirmation endpoints."""

import asyncio
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_confirmation_store, verify_api_key
from api.logging import RequestLog
from api.models.requests import ConfirmMatchRequest, RejectMatchRequest
from api.models.responses import ConfirmationOut, ConfirmationResponse, ErrorCodes
from api.routes.payroll import get_client_ip, write_request_log
from core.normalize import normalize
from models.matching import ConfirmationFailed, UncertainMatch
from models.payroll import SupervisionConfig
from services.confirmations import ConfirmationStoreError, MatchConfirmationStore, is_rejection
from services.orchestrator import (
    MatchResolutionOrchestrator,
    StaticClientRoster,
    StaticEventSource,
)

router = APIRouter(prefix="/v1/matches")


def store_unavailable(reason: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "error": "Decision was not saved, please retry",
            "code": ErrorCodes.STORE_UNAVAILABLE,
            "details": [reason],
        },
    )


def build_match(employee_id: str, event_title: str) -> UncertainMatch:
    return UncertainMatch(
        event_id="",
        event_title=event_title,
        normalized_title=normalize(event_title),
        employee_id=employee_id,
    )


@router.post("/confirm", response_model=ConfirmationResponse)
async def confirm_match_endpoint(
    request: Request,
    body: ConfirmMatchRequest,
    store: MatchConfirmationStore = Depends(get_confirmation_store),
    _api_key: str = Depends(verify_api_key),
):
    """Bind an event title to a client for this employee; recalculate afterwards."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/matches/confirm",
        method="POST",
        client_ip=get_client_ip(request),
        employee_id=body.employee_id,
    )

    try:
        clients = [c.to_domain() for c in body.clients]
        known = {c.name for c in clients if c.employee_id == body.employee_id}
        if body.client_name not in known | set(body.supervision_keywords):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "Unknown client",
                    "code": ErrorCodes.UNKNOWN_CLIENT,
                    "details": [f"'{body.client_name}' is not a client of {body.employee_id}"],
                },
            )

        orchestrator = MatchResolutionOrchestrator(
            store=store,
            roster=StaticClientRoster(clients),
            events=StaticEventSource([]),
            supervision_config=SupervisionConfig(keywords=tuple(body.supervision_keywords)),
        )
        result = await asyncio.to_thread(
            orchestrator.confirm_match,
            build_match(body.employee_id, body.event_title),
            body.client_name,
        )
        if isinstance(result, ConfirmationFailed):
            raise store_unavailable(result.reason)

        request_log.status_code = 200
        return ConfirmationResponse(
            status="confirmed",
            employee_id=body.employee_id,
            event_title=body.event_title,
            client_name=body.client_name,
        )

    except HTTPException as e:
        request_log.fail(e.status_code, e.detail)
        raise

    finally:
        write_request_log(request_log, start_time)


@router.post("/reject", response_model=ConfirmationResponse)
async def reject_match_endpoint(
    request: Request,
    body: RejectMatchRequest,
    store: MatchConfirmationStore = Depends(get_confirmation_store),
    _api_key: str = Depends(verify_api_key),
):
    """Exclude an event title from this employee's payroll from now on."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/matches/reject",
        method="POST",
        client_ip=get_client_ip(request),
        employee_id=body.employee_id,
    )

    try:
        orchestrator = MatchResolutionOrchestrator(
            store=store,
            roster=StaticClientRoster([]),
            events=StaticEventSource([]),
        )
        result = await asyncio.to_thread(
            orchestrator.reject_match, build_match(body.employee_id, body.event_title)
        )
        if isinstance(result, ConfirmationFailed):
            raise store_unavailable(result.reason)

        request_log.status_code = 200
        return ConfirmationResponse(
            status="rejected", employee_id=body.employee_id, event_title=body.event_title
        )

    except HTTPException as e:
        request_log.fail(e.status_code, e.detail)
        raise

    finally:
        write_request_log(request_log, start_time)


@router.get("/{employee_id}", response_model=list[ConfirmationOut])
async def list_confirmations_endpoint(
    request: Request,
    employee_id: str,
    store: MatchConfirmationStore = Depends(get_confirmation_store),
    _api_key: str = Depends(verify_api_key),
):
    """List stored decisions for an employee."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/matches/{employee_id}",
        method="GET",
        client_ip=get_client_ip(request),
        employee_id=employee_id,
    )

    try:
        try:
            confirmations = await asyncio.to_thread(store.list_confirmations, employee_id)
        except ConfirmationStoreError as e:
            raise store_unavailable(str(e)) from e

        request_log.status_code = 200
        return [
            ConfirmationOut(
                normalized_title=c.normalized_title,
                client_name=c.client_name,
                rejected=is_rejection(c.client_name),
                created_at=c.created_at,
            )
            for c in confirmations
        ]

    except HTTPException as e:
        request_log.fail(e.status_code, e.detail)
        raise

    finally:
        write_request_log(request_log, start_time)


@router.delete("/{employee_id}", response_model=ConfirmationResponse)
async def clear_confirmations_endpoint(
    request: Request,
    employee_id: str,
    store: MatchConfirmationStore = Depends(get_confirmation_store),
    _api_key: str = Depends(verify_api_key),
):
    """Forget every stored decision for an employee."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/matches/{employee_id}",
        method="DELETE",
        client_ip=get_client_ip(request),
        employee_id=employee_id,
    )

    try:
        result = await asyncio.to_thread(store.delete_all, employee_id)
        if not result.ok:
            raise store_unavailable(result.reason or "")

        request_log.status_code = 200
        return ConfirmationResponse(status="cleared", employee_id=employee_id)

    except HTTPException as e:
        request_log.fail(e.status_code, e.detail)
        raise

    finally:
        write_request_log(request_log, start_time)
