"""
Death registry sync endpoints for administrators.

Caller authorization is enforced upstream of this router.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from app.connectors.base import RemoteAPIError
from app.domain.registry_sync import SyncResult
from app.schemas.registry_sync import (
    RegistrySyncJobResponse,
    StopSyncResponse,
    SyncMonthRequest,
    SyncResultResponse,
    SyncStatusResponse,
    SyncYearRequest,
)
from app.services.registry_sync_service import (
    RegistrySyncService,
    SyncAlreadyRunningError,
    get_registry_sync_service,
)

router = APIRouter(prefix="/admin/integrations/insee", tags=["registry-sync"])


@router.get("/status", response_model=SyncStatusResponse)
def get_registry_sync_status(
    sync_service: RegistrySyncService = Depends(get_registry_sync_service),
) -> SyncStatusResponse:
    sync_status = sync_service.get_sync_status()
    return SyncStatusResponse(
        is_syncing=sync_status.is_syncing,
        current_job_id=sync_status.current_job_id,
        total_imported=sync_status.total_imported,
        recent_jobs=[RegistrySyncJobResponse.model_validate(job) for job in sync_status.recent_jobs],
    )


@router.post(
    "/sync/month",
    response_model=SyncResultResponse,
    responses={409: {"description": "Sync already in progress"}},
)
def sync_registry_month(
    payload: SyncMonthRequest,
    sync_service: RegistrySyncService = Depends(get_registry_sync_service),
) -> SyncResultResponse:
    """
    Sync one month from the death registry. Blocks until the run finishes.
    """

    return _run(lambda: sync_service.sync_month(payload.year_month))


@router.post(
    "/sync/year",
    response_model=SyncResultResponse,
    responses={409: {"description": "Sync already in progress"}},
)
def sync_registry_year(
    payload: SyncYearRequest,
    sync_service: RegistrySyncService = Depends(get_registry_sync_service),
) -> SyncResultResponse:
    """
    Sync a full year from the death registry (initial load).
    """

    return _run(lambda: sync_service.sync_year(payload.year))


@router.post("/sync/stop", response_model=StopSyncResponse)
def stop_registry_sync(
    sync_service: RegistrySyncService = Depends(get_registry_sync_service),
) -> StopSyncResponse:
    result = sync_service.stop_sync()
    return StopSyncResponse(
        message="Stop signal sent" if result.stopped else "No sync in progress",
        stopped=result.stopped,
        job_id=result.job_id,
    )


def _run(sync: Callable[[], SyncResult]) -> SyncResultResponse:
    try:
        result = sync()
    except SyncAlreadyRunningError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RemoteAPIError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return SyncResultResponse(
        message="Sync completed",
        job_id=result.job_id,
        records_processed=result.records_processed,
        new_profiles=result.new_profiles,
        skipped_duplicates=result.skipped_duplicates,
        errors=result.errors,
        duration_ms=result.duration_ms,
    )
