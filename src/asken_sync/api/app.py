"""FastAPI application factory."""

from fastapi import FastAPI

from asken_sync.api.sync import router as sync_router
from asken_sync.app_logging import configure_logging
from asken_sync.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI(title="asken-sync")
    app.state.container = container

    app.include_router(sync_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
