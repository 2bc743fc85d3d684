"""FastAPI application factory for the Flowdex backend service."""

from __future__ import annotations
from fastapi import FastAPI
from flowdex.catalog import CatalogService
from flowdex_backend.app.dependencies import get_catalog_service
from flowdex_backend.app.logging_config import get_logger
from flowdex_backend.app.routers import catalog_router, system_router


logger = get_logger()


def create_app(service: CatalogService | None = None) -> FastAPI:
    """Build the API application, optionally bound to a specific service."""
    application = FastAPI(title="Flowdex workflow catalog")
    application.include_router(system_router, prefix="/api")
    application.include_router(catalog_router, prefix="/api")
    if service is not None:
        application.dependency_overrides[get_catalog_service] = lambda: service
        logger.debug("Catalog API bound to %s.", service.root)
    return application


app = create_app()


__all__ = ["app", "create_app", "get_catalog_service"]
