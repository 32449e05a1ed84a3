"""
FastAPI endpoints for the AI features.

Trip plans, replacement places, itinerary adjustments and chat all run the
same pipeline; only the request kind differs. Every response uses the
`{success, data?, error?}` envelope.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from tripgenie.api.rate_limit import ai_rate_limit, chat_rate_limit, limiter
from tripgenie.api.schemas import ApiResponse, success_payload
from tripgenie.graph.build import run_pipeline
from tripgenie.graph.state import RequestKind
from tripgenie.services.geocoding import GeocodingService, get_cached_geocoder
from tripgenie.shared.config import get_settings
from tripgenie.shared.contracts.requests import (
    ChatRequest,
    ItineraryAdjustmentRequest,
    ShuffleRequest,
    TripRequest,
)
from tripgenie.shared.errors import PipelineError
from tripgenie.shared.llm.client import TextBackend, get_cached_backend
from tripgenie.shared.logging.debug_logger import get_or_create_logger, remove_logger


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


# ============================================================================
# Dependencies
# ============================================================================


def get_backend() -> TextBackend:
    """Process-wide backend; BackendUnavailable surfaces here on first use."""
    return get_cached_backend()


def get_geocoder() -> Optional[GeocodingService]:
    return get_cached_geocoder()


# ============================================================================
# Helpers
# ============================================================================


async def _execute(
    kind: RequestKind,
    payload: Any,
    endpoint: str,
    backend: TextBackend,
    geocoder: Optional[GeocodingService] = None,
) -> Dict[str, Any]:
    """Run the pipeline off the event loop and wrap the result."""
    request_id = str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=pipeline] [api={endpoint}] "
    settings = get_settings()

    debug_logger = None
    if settings.debug_log_dir:
        debug_logger = get_or_create_logger(request_id, settings.debug_log_dir)

    logger.info(f"{_log}Request received | kind={kind}")
    started = time.perf_counter()
    success = False
    error: Optional[str] = None
    try:
        result = await run_in_threadpool(
            run_pipeline, kind, payload, backend, geocoder, request_id
        )
        success = True
        return success_payload(result)
    except PipelineError as e:
        error = e.message
        raise
    finally:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{_log}Request finished | success={success}, duration={duration_ms:.0f}ms")
        if debug_logger:
            debug_logger.log_api_timing(endpoint, duration_ms, success, error)
            remove_logger(request_id)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/trip-plan", response_model=ApiResponse, response_model_exclude_none=True)
@limiter.limit(ai_rate_limit)
async def generate_trip_plan(
    request: Request,
    body: TripRequest,
    backend: TextBackend = Depends(get_backend),
    geocoder: Optional[GeocodingService] = Depends(get_geocoder),
):
    """
    Generate a day-by-day trip plan.

    The destination is geocoded first when geocoding is enabled; a failed
    lookup does not fail the request.
    """
    return await _execute("trip_plan", body, "/api/ai/trip-plan", backend, geocoder)


@router.post("/shuffle", response_model=ApiResponse, response_model_exclude_none=True)
@limiter.limit(ai_rate_limit)
async def shuffle_place(
    request: Request,
    body: ShuffleRequest,
    backend: TextBackend = Depends(get_backend),
):
    """Suggest one replacement for a place the traveler did not like."""
    return await _execute("shuffle", body, "/api/ai/shuffle", backend)


@router.post("/adjust-itinerary", response_model=ApiResponse, response_model_exclude_none=True)
@limiter.limit(ai_rate_limit)
async def adjust_itinerary(
    request: Request,
    body: ItineraryAdjustmentRequest,
    backend: TextBackend = Depends(get_backend),
):
    """Rework the current itinerary around a reported disruption."""
    return await _execute("adjustment", body, "/api/ai/adjust-itinerary", backend)


@router.post("/chat", response_model=ApiResponse, response_model_exclude_none=True)
@limiter.limit(chat_rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    backend: TextBackend = Depends(get_backend),
):
    """Free-form travel chat; the reply is returned as plain text."""
    return await _execute("chat", body, "/api/ai/chat", backend)


@router.get("/test", response_model=ApiResponse, response_model_exclude_none=True)
async def test_ai_service():
    """Liveness probe for the AI routes."""
    return success_payload({
        "message": "AI service is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
