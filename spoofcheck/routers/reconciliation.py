"""API routes for running commit identity reconciliations."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from spoofcheck.core.config import settings
from spoofcheck.dependencies import get_reconciliation_service
from spoofcheck.models.domain import ReconciliationResult
from spoofcheck.schemas.reconciliation import PullRequestReconciliationRequest, PushReconciliationRequest
from spoofcheck.services.reconciliation import ReconciliationService
from spoofcheck.services.sarif import build_sarif


router = APIRouter(prefix=f"{settings.api_v1_prefix}/reconciliation", tags=["reconciliation"])


@router.post("/push", response_model=ReconciliationResult)
def reconcile_push(
    payload: PushReconciliationRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> ReconciliationResult:
    return service.reconcile_push(payload.commit, payload.actor, mode=payload.mode)


@router.post("/pull-request", response_model=ReconciliationResult)
def reconcile_pull_request(
    payload: PullRequestReconciliationRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> ReconciliationResult:
    return service.reconcile_pull_request(
        payload.commits,
        payload.activities,
        expected_commit_count=payload.expected_commit_count,
    )


@router.post("/pull-request/sarif")
def reconcile_pull_request_sarif(
    payload: PullRequestReconciliationRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> JSONResponse:
    result = service.reconcile_pull_request(
        payload.commits,
        payload.activities,
        expected_commit_count=payload.expected_commit_count,
    )
    return JSONResponse(build_sarif(result, payload.repo))
