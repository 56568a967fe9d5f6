"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from keeper import __version__
from keeper.config import settings
from keeper.middleware.logging import RequestLoggingMiddleware
from keeper.api import webhooks
from keeper.models.api_response import HealthResponse
from keeper.utils.logging import setup_logging, get_logger

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title="greenkeeper-keeper",
    description="Merges dependency update pull requests once they are cleanly mergeable",
    version=__version__
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "greenkeeper-keeper",
        "version": __version__,
        "webhook": "/payload"
    }


# Include API routers
app.include_router(webhooks.router)


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup."""
    logger.info("Starting greenkeeper-keeper")

    from keeper.services.dispatcher import get_event_dispatcher
    dispatcher = get_event_dispatcher()
    logger.info(
        "Event dispatcher initialized",
        extra={
            "squash_merges": dispatcher.executor.squash,
            "delete_branches": dispatcher.executor.delete_branches,
        }
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup services on application shutdown."""
    logger.info("Shutting down greenkeeper-keeper")

    from keeper.services.dispatcher import close_event_dispatcher
    await close_event_dispatcher()
    logger.info("GitHub client closed")


def run() -> None:
    """Console entry point."""
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
