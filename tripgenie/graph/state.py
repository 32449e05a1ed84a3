"""
Pipeline state schema.

One state dict flows through the request graph per API call and is discarded
with the response.
"""

from typing import Any, Annotated, List, Literal, Optional, TypedDict
import operator

from tripgenie.shared.errors import PipelineError


RequestKind = Literal["trip_plan", "shuffle", "chat", "adjustment"]


class PipelineState(TypedDict, total=False):
    """
    State schema for the request pipeline graph.

    `request` is the validated request model. Nodes fill `prompt`,
    `raw_response`, `parsed`/`parse_stage` and finally `result`. The first
    node that fails records its PipelineError in `error` and the router
    ends the run.
    """

    # Input
    kind: RequestKind
    request: Any
    request_id: Optional[str]

    # Produced by the nodes
    prompt: Optional[str]
    raw_response: Optional[str]
    parsed: Any
    parse_stage: Optional[str]
    result: Optional[dict]
    error: Optional[PipelineError]

    # Tracking
    messages: Annotated[List[dict], operator.add]
