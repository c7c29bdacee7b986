"""Background-removal service endpoint.

Wire format::

    POST /remove-bg  {"image": "data:image/...;base64,..."}
    200              {"image": "data:image/png;base64,..."}
    4xx/5xx          {"error": "..."}

Clients (``ServiceBackgroundTransport``) treat any body without an
``image`` field as a failure.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.deps import get_rate_limiter, get_remove_bg_transport
from api.schemas.diary import RemoveBackgroundRequest
from core.diary.background import BackgroundRemovalError
from infrastructure.metrics import LatencyTimer, record_background_removal, record_rate_limited
from infrastructure.rate_limiter import RateLimiter
from ingestion.background_remover import RemoveBgApiTransport

logger = logging.getLogger(__name__)
router = APIRouter(tags=["background"])

Transport = Annotated[RemoveBgApiTransport, Depends(get_remove_bg_transport)]
Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]

_STATUS_BY_REASON: dict[str, int] = {
    "invalid_image": 400,
    "not_configured": 500,
    "circuit_open": 503,
    "transport_error": 502,
    "bad_status": 502,
    "missing_image": 502,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/remove-bg")
async def remove_background(
    body: RemoveBackgroundRequest,
    request: Request,
    transport: Transport,
    rate_limiter: Limiter,
) -> JSONResponse:
    """Strip the background from a data URI image via remove.bg."""
    if not body.image:
        return _error(400, "No image provided")

    client_id = request.client.host if request.client else "unknown"
    quota = rate_limiter.check(client_id)
    if not quota.allowed:
        record_rate_limited()
        response = _error(429, "Too many background removals. Try again shortly.")
        response.headers["Retry-After"] = str(quota.retry_after_seconds)
        return response

    try:
        with LatencyTimer() as timer:
            image = await transport.remove(body.image)
    except BackgroundRemovalError as exc:
        record_background_removal(outcome=exc.reason, trigger="service")
        logger.error("remove-bg failed (%s): %s", exc.reason, exc)
        return _error(_STATUS_BY_REASON.get(exc.reason, 500), str(exc))

    record_background_removal(outcome="success", trigger="service", latency_seconds=timer.elapsed)
    return JSONResponse(
        status_code=200,
        content={"image": image},
        headers={"X-RateLimit-Remaining": str(quota.remaining)},
    )
