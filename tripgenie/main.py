"""
FastAPI application entry point.

Assembles the FastAPI app with the AI router, rate limiter and exception
handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripgenie.api.ai_api import router as ai_router
from tripgenie.api.errors import register_exception_handlers
from tripgenie.api.rate_limit import limiter
from tripgenie.shared.config import get_settings
from tripgenie.shared.logging.config import setup_logging


settings = get_settings()

# Single source of truth for logging across the service
setup_logging(level=settings.log_level, json_logs=settings.log_json)


# Create FastAPI app
app = FastAPI(
    title="TripGenie",
    description="AI trip planning service: plans, replacements, adjustments and chat",
    version="0.1.0",
)

app.state.limiter = limiter
register_exception_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(ai_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "TripGenie",
        "version": "0.1.0",
        "environment": settings.app_env,
        "ai": {
            "provider": settings.llm_provider,
            "endpoints": "/api/ai",
            "geocoding": "enabled" if settings.geocoding_enabled else "disabled",
        },
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
