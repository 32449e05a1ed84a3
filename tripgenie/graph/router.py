"""
Routing logic for the pipeline graph.

A recorded error always ends the run; otherwise the kind of request decides
which optional steps run.
"""

import logging
from typing import Literal

from tripgenie.graph.state import PipelineState


logger = logging.getLogger(__name__)


def _log_prefix(state: PipelineState, router: str) -> str:
    request_id = state.get("request_id") or "unknown"
    return f"[request={request_id}] [graph=pipeline] [router={router}] "


def route_entry(state: PipelineState) -> Literal["enrich_location", "build_prompt"]:
    """Trip plans are geocoded first; every other kind starts at the prompt."""
    target = "enrich_location" if state["kind"] == "trip_plan" else "build_prompt"
    logger.info(f"{_log_prefix(state, 'route_entry')}Routing to '{target}' | kind={state['kind']}")
    return target


def route_after_generate(state: PipelineState) -> Literal["parse", "validate", "failed"]:
    """
    Routing logic:
    1. If the model call failed -> end
    2. If the request is a chat -> validate (raw text is the result)
    3. Otherwise -> parse
    """
    _log = _log_prefix(state, "route_after_generate")
    if state.get("error") is not None:
        logger.info(f"{_log}Routing to 'failed' | error={type(state['error']).__name__}")
        return "failed"
    if state["kind"] == "chat":
        logger.info(f"{_log}Routing to 'validate' | chat skips parsing")
        return "validate"
    logger.info(f"{_log}Routing to 'parse'")
    return "parse"


def route_after_step(state: PipelineState) -> Literal["continue", "failed"]:
    """Continue unless the previous node recorded an error."""
    if state.get("error") is not None:
        logger.info(
            f"{_log_prefix(state, 'route_after_step')}Routing to 'failed' | "
            f"error={type(state['error']).__name__}"
        )
        return "failed"
    return "continue"
