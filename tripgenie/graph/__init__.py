"""Request pipeline graph: prompt -> model call -> parse -> validate."""

from tripgenie.graph.build import create_pipeline_graph, get_pipeline_graph, run_pipeline
from tripgenie.graph.state import PipelineState

__all__ = ["create_pipeline_graph", "get_pipeline_graph", "run_pipeline", "PipelineState"]
