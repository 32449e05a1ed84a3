"""
TripGenie AI service.

This package contains:
- shared/: Common infrastructure (config, errors, LLM backends, logging, contracts)
- prompts/: Prompt templates and builders for each AI endpoint
- parsing/: Sanitization and resilient JSON parsing of model replies
- graph/: Request pipeline (prompt -> model call -> parse -> validate)
- services/: External collaborators (geocoding)
- api/: FastAPI routes, response envelope, rate limiting
"""

from tripgenie.graph.build import create_pipeline_graph, run_pipeline

__all__ = ["create_pipeline_graph", "run_pipeline"]
