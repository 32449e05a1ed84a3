"""
Pipeline nodes.

Each node reads the pipeline state, does one step and returns a partial state
update. A PipelineError raised inside a node is recorded in `error` instead of
propagating, so the router can end the run and the caller gets one failure.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from tripgenie.graph.state import PipelineState
from tripgenie.graph.validation import VALIDATORS, wrap_chat
from tripgenie.parsing.parser import parse_model_response
from tripgenie.prompts.builders import (
    build_adjustment_prompt,
    build_chat_prompt,
    build_shuffle_prompt,
    build_trip_plan_prompt,
)
from tripgenie.services.geocoding import GeocodingError, GeocodingService
from tripgenie.shared.contracts.requests import GeoTag
from tripgenie.shared.errors import PipelineError
from tripgenie.shared.llm.client import TextBackend
from tripgenie.shared.logging.config import log_pipeline_event
from tripgenie.shared.logging.debug_logger import get_logger


logger = logging.getLogger(__name__)


PROMPT_BUILDERS: Dict[str, Callable[[Any], str]] = {
    "trip_plan": build_trip_plan_prompt,
    "shuffle": build_shuffle_prompt,
    "chat": build_chat_prompt,
    "adjustment": build_adjustment_prompt,
}


def _log_prefix(state: PipelineState, node: str) -> str:
    request_id = state.get("request_id") or "unknown"
    return f"[request={request_id}] [graph=pipeline] [node={node}] "


def _message(node: str, content: str) -> Dict[str, Any]:
    return {"role": "system", "node": node, "content": content}


def _failed(state: PipelineState, node: str, error: PipelineError) -> Dict[str, Any]:
    logger.error(f"{_log_prefix(state, node)}{type(error).__name__}: {error.message}")
    log_pipeline_event(
        f"{node}_failed",
        {**state, "error": error},
        extra={"error_type": type(error).__name__},
    )
    return {
        "error": error,
        "messages": [_message(node, f"{type(error).__name__}: {error.message}")],
    }


def enrich_location_node(
    state: PipelineState,
    geocoder: Optional[GeocodingService] = None,
) -> Dict[str, Any]:
    """
    Attach coordinates and a resolved address to the request location.

    Failure is non-fatal: the request proceeds with the location it came with.
    """
    _log = _log_prefix(state, "enrich_location")
    request = state["request"]
    location = request.location

    if geocoder is None:
        logger.info(f"{_log}Geocoding disabled, skipping")
        return {"messages": [_message("enrich_location", "Geocoding skipped.")]}

    if location.geotag is not None:
        logger.info(f"{_log}Location already has coordinates, skipping")
        return {"messages": [_message("enrich_location", "Coordinates already present.")]}

    try:
        resolved = geocoder.geocode(location.city)
    except GeocodingError as e:
        logger.warning(f"{_log}Geocoding failed for '{location.city}', continuing without coordinates: {e}")
        return {"messages": [_message("enrich_location", f"Geocoding failed: {e}")]}

    coordinates = resolved["coordinates"]
    enriched = location.model_copy(update={
        "geotag": GeoTag(latitude=coordinates["lat"], longitude=coordinates["lng"]),
        "address": resolved.get("address") or location.address,
    })
    logger.info(
        f"{_log}Resolved '{location.city}' -> "
        f"({coordinates['lat']:.4f}, {coordinates['lng']:.4f})"
    )
    return {
        "request": request.model_copy(update={"location": enriched}),
        "messages": [_message("enrich_location", f"Resolved {location.city}.")],
    }


def prompt_node(state: PipelineState) -> Dict[str, Any]:
    """Render the request into prompt text."""
    _log = _log_prefix(state, "build_prompt")
    kind = state["kind"]

    try:
        prompt = PROMPT_BUILDERS[kind](state["request"])
    except PipelineError as e:
        return _failed(state, "build_prompt", e)

    logger.info(f"{_log}Prompt built | kind={kind}, chars={len(prompt)}")
    return {
        "prompt": prompt,
        "messages": [_message("build_prompt", f"Built {kind} prompt ({len(prompt)} chars).")],
    }


def generate_node(state: PipelineState, backend: TextBackend) -> Dict[str, Any]:
    """Make the single model call of this request."""
    _log = _log_prefix(state, "generate")
    prompt = state["prompt"]

    logger.info(f"{_log}Calling backend '{backend.name}'")
    started = time.perf_counter()
    try:
        raw_response = backend.generate(prompt)
    except PipelineError as e:
        return _failed(state, "generate", e)
    duration_ms = (time.perf_counter() - started) * 1000

    debug_logger = get_logger(state.get("request_id"))
    if debug_logger:
        debug_logger.log_llm_call(backend.name, prompt, raw_response, duration_ms)

    logger.info(f"{_log}Backend replied | chars={len(raw_response)}, duration={duration_ms:.0f}ms")
    return {
        "raw_response": raw_response,
        "messages": [_message("generate", f"Received {len(raw_response)} chars from {backend.name}.")],
    }


def parse_node(state: PipelineState) -> Dict[str, Any]:
    """Decode the raw reply into a JSON value."""
    _log = _log_prefix(state, "parse")
    debug_logger = get_logger(state.get("request_id"))

    try:
        outcome = parse_model_response(state.get("raw_response"))
    except PipelineError as e:
        if debug_logger:
            for attempt in e.details.get("attempts", []):
                debug_logger.log_parse_attempt(
                    attempt["stage"], attempt["succeeded"], attempt.get("error")
                )
        return _failed(state, "parse", e)

    if debug_logger:
        for attempt in outcome.attempts:
            debug_logger.log_parse_attempt(attempt.stage.value, attempt.succeeded, attempt.error)

    logger.info(f"{_log}Parsed | stage={outcome.stage.value}, attempts={len(outcome.attempts)}")
    log_pipeline_event("parse_complete", {**state, "parse_stage": outcome.stage.value})
    return {
        "parsed": outcome.value,
        "parse_stage": outcome.stage.value,
        "messages": [_message("parse", f"Parsed at stage '{outcome.stage.value}'.")],
    }


def validate_node(state: PipelineState) -> Dict[str, Any]:
    """Check the parsed value's shape and produce the endpoint result."""
    _log = _log_prefix(state, "validate")
    kind = state["kind"]

    if kind == "chat":
        result = wrap_chat(state["raw_response"])
    else:
        try:
            result = VALIDATORS[kind](state.get("parsed"), state["request"])
        except PipelineError as e:
            return _failed(state, "validate", e)

    logger.info(f"{_log}Result ready | kind={kind}, keys={sorted(result.keys())}")
    return {
        "result": result,
        "messages": [_message("validate", f"{kind} result validated.")],
    }
