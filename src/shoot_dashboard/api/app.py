"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shoot_dashboard.api.admin import router as admin_router
from shoot_dashboard.api.catalog import router as catalog_router
from shoot_dashboard.api.shoots import router as shoots_router
from shoot_dashboard.app_logging import configure_logging
from shoot_dashboard.containers import AppContainer
from shoot_dashboard.errors import BackendRequestError, DashboardError
from shoot_dashboard.services.notices import notice_for_error, status_for_error


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(catalog_router)
    app.include_router(shoots_router)
    app.include_router(admin_router)

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(
        request: Request, exc: DashboardError
    ) -> JSONResponse:
        status_code = status_for_error(exc)
        logger.warning(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            status_code,
            exc.message,
        )
        content: dict[str, object] = notice_for_error(exc).as_dict()
        if isinstance(exc, BackendRequestError) and exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
