"""Flowdex: index and search a corpus of automation workflow definitions."""

from flowdex.catalog import CatalogIndex, CatalogService, get_catalog_service


__all__ = ["CatalogIndex", "CatalogService", "get_catalog_service"]
