"""Liveness and readiness endpoints."""

import time

from fastapi import APIRouter, Response, status

from gigslk.core.http_client import check_upstream_connection
from gigslk.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    return HealthResponse(status=HealthStatus.HEALTHY)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Marketplace backend unreachable"}},
    summary="Readiness check",
    description="Ready only while the marketplace backend answers; every profile operation goes through it.",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    started = time.perf_counter()
    result = await check_upstream_connection()
    upstream = CheckResult(
        name="upstream",
        healthy=result["healthy"],
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=result.get("error"),
    )

    if not upstream.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status=HealthStatus.UNHEALTHY, checks=[upstream])
    return ReadinessResponse(status=HealthStatus.HEALTHY, checks=[upstream])
