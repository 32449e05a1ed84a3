"""
Pipeline graph construction.

Builds the per-request graph that sequences geocoding, prompt building, the
model call, parsing and shape validation. The backend and geocoder are bound
into the nodes when the graph is built, so tests inject stubs here.
"""

import logging
import uuid
from functools import lru_cache
from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, END

from tripgenie.graph.nodes import (
    enrich_location_node,
    generate_node,
    parse_node,
    prompt_node,
    validate_node,
)
from tripgenie.graph.router import route_after_generate, route_after_step, route_entry
from tripgenie.graph.state import PipelineState, RequestKind
from tripgenie.services.geocoding import GeocodingService
from tripgenie.shared.errors import PipelineError
from tripgenie.shared.llm.client import TextBackend
from tripgenie.shared.logging.config import log_pipeline_event


logger = logging.getLogger(__name__)


def create_pipeline_graph(
    backend: TextBackend,
    geocoder: Optional[GeocodingService] = None,
):
    """
    Create and compile the request pipeline graph.

    The graph structure is:
        Entry -> route_entry
          -> "enrich_location" (trip plans) -> build_prompt
          -> "build_prompt" -> generate -> route_after_generate
               -> "parse"    -> parse    -> validate -> END
               -> "validate" (chat)      -> validate -> END
        Any node that records an error routes straight to END.

    Args:
        backend: Text-generation backend used by the generate node
        geocoder: Optional geocoder; trip plans are not enriched without it

    Returns:
        Compiled LangGraph application ready for execution.
    """

    def enrich_location(state: PipelineState) -> Dict[str, Any]:
        return enrich_location_node(state, geocoder=geocoder)

    def generate(state: PipelineState) -> Dict[str, Any]:
        return generate_node(state, backend=backend)

    graph = StateGraph(PipelineState)

    # Add nodes
    graph.add_node("enrich_location", enrich_location)
    graph.add_node("build_prompt", prompt_node)
    graph.add_node("generate", generate)
    graph.add_node("parse", parse_node)
    graph.add_node("validate", validate_node)

    # Conditional entry point - only trip plans are geocoded
    graph.set_conditional_entry_point(
        route_entry,
        {
            "enrich_location": "enrich_location",
            "build_prompt": "build_prompt",
        },
    )

    # Geocoding failures are non-fatal, so no routing is needed here
    graph.add_edge("enrich_location", "build_prompt")

    graph.add_conditional_edges(
        "build_prompt",
        route_after_step,
        {"continue": "generate", "failed": END},
    )

    # Chat replies skip parsing
    graph.add_conditional_edges(
        "generate",
        route_after_generate,
        {"parse": "parse", "validate": "validate", "failed": END},
    )

    graph.add_conditional_edges(
        "parse",
        route_after_step,
        {"continue": "validate", "failed": END},
    )

    graph.add_edge("validate", END)

    app = graph.compile()

    return app


@lru_cache(maxsize=16)
def get_pipeline_graph(
    backend: TextBackend,
    geocoder: Optional[GeocodingService] = None,
):
    """
    Return the compiled graph for a backend and geocoder pair, compiling it once.

    Both collaborators are process-wide, so in production this holds a single
    entry. Compiled graphs keep no per-run state and are shared across threads.
    """
    logger.info(f"Compiling pipeline graph | backend={backend.name}, geocoder={geocoder is not None}")
    return create_pipeline_graph(backend=backend, geocoder=geocoder)


def run_pipeline(
    kind: RequestKind,
    request: Any,
    backend: TextBackend,
    geocoder: Optional[GeocodingService] = None,
    request_id: Optional[str] = None,
) -> dict:
    """
    Run one request through the pipeline.

    Blocking; the API layer runs it in a worker thread.

    Args:
        kind: "trip_plan", "shuffle", "chat" or "adjustment"
        request: Validated request model for that kind
        backend: Text-generation backend
        geocoder: Optional geocoder for trip plans
        request_id: Identifier used in logs; generated when omitted

    Returns:
        The endpoint result dict

    Raises:
        PipelineError: The error recorded by the first failing node
    """
    request_id = request_id or str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=pipeline] "

    app = get_pipeline_graph(backend, geocoder)
    initial_state: PipelineState = {
        "kind": kind,
        "request": request,
        "request_id": request_id,
        "messages": [],
    }

    logger.info(f"{_log}Invoking pipeline | kind={kind}")
    final_state = app.invoke(initial_state)

    error = final_state.get("error")
    if error is not None:
        log_pipeline_event("pipeline_failed", final_state)
        raise error

    result = final_state.get("result")
    if result is None:
        raise PipelineError(
            f"Pipeline finished without a result for {kind}",
            details={"messages": final_state.get("messages", [])},
        )

    log_pipeline_event(
        "pipeline_complete",
        final_state,
        extra={"steps": len(final_state.get("messages", []))},
    )
    logger.info(f"{_log}Pipeline complete | kind={kind}, parse_stage={final_state.get('parse_stage')}")
    return result
