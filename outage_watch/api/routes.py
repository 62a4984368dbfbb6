from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    worker = request.app.state.worker
    return {
        "status": "ok",
        "scheduler": {
            "enabled": request.app.state.settings.enable_scheduler,
            "running": worker.is_running() if worker else False,
            "lastRunStatus": worker.last_run_status if worker else "disabled",
            "lastRunStartedAt": worker.last_run_started_at.isoformat() if worker and worker.last_run_started_at else None,
            "lastRunFinishedAt": worker.last_run_finished_at.isoformat() if worker and worker.last_run_finished_at else None,
            "lastError": worker.last_error if worker else None,
        },
    }


@router.get("/readyz")
async def readyz(request: Request) -> dict:
    repository = request.app.state.repository
    try:
        repository.ping()
    except Exception as exc:  # pragma: no cover
        raise HTTPException(status_code=503, detail=f"database not ready: {exc}") from exc

    return {"status": "ready"}


@router.get("/v1/notification")
async def current_notification(request: Request) -> dict:
    state = request.app.state.repository.load()
    if state is None:
        raise HTTPException(status_code=404, detail="No live notification")
    return state.to_dict()


@router.get("/v1/checks")
async def recent_checks(
    request: Request,
    limit: int = Query(default=20, ge=1, le=500),
) -> dict:
    items = request.app.state.repository.recent_check_runs(limit)
    return {
        "count": len(items),
        "items": items,
    }


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    payload, content_type = request.app.state.metrics.render()
    return Response(content=payload, media_type=content_type)
