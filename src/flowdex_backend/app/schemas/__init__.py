"""Pydantic schemas exposed by the Flowdex HTTP API."""

from flowdex_backend.app.schemas.catalog import (
    CatalogReindexResponse,
    CatalogSearchHit,
    CatalogSearchRequest,
    CatalogSearchResponse,
    CatalogStatsResponse,
    CatalogWorkflowDetail,
    CatalogWorkflowSummary,
    InstallPlanResponse,
    QueryRewriteRequest,
    QueryRewriteResponse,
)


__all__ = [
    "CatalogReindexResponse",
    "CatalogSearchHit",
    "CatalogSearchRequest",
    "CatalogSearchResponse",
    "CatalogStatsResponse",
    "CatalogWorkflowDetail",
    "CatalogWorkflowSummary",
    "InstallPlanResponse",
    "QueryRewriteRequest",
    "QueryRewriteResponse",
]
