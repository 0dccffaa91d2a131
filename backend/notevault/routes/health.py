"""
NoteVault Backend — Health Check Route
========================================

What:  GET /health for container health checks and load balancer probes.
How:   Runs `SELECT 1` against the database. The service is only healthy if
       it can reach its store; otherwise it answers 503 with the same body.
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from notevault import __version__
from notevault.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    database_ok = await request.app.state.database.ping()
    body = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        version=__version__,
        database="connected" if database_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not database_ok:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
