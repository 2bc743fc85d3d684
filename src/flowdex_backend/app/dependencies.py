"""FastAPI dependency providers for the catalog service."""

from __future__ import annotations
from typing import Annotated
from fastapi import Depends
from flowdex.catalog import CatalogService
from flowdex.catalog import get_catalog_service as _get_default_service


def get_catalog_service() -> CatalogService:
    """Return the process-wide catalog service."""
    return _get_default_service()


CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]


__all__ = ["CatalogServiceDep", "get_catalog_service"]
