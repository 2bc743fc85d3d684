"""API routers for the Flowdex backend."""

from flowdex_backend.app.routers.catalog import router as catalog_router
from flowdex_backend.app.routers.system import router as system_router


__all__ = ["catalog_router", "system_router"]
