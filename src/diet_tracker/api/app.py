"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from diet_tracker.api.routes import router as diet_router
from diet_tracker.app_logging import configure_logging
from diet_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Diet Tracker")
    app.state.container = container
    app.include_router(diet_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    logger.info(
        "Diet tracker API ready (environment=%s)", container.settings.environment
    )
    return app
