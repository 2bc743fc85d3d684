"""Workflow catalog search, metadata and download routes."""

from __future__ import annotations
import json
import logging
from fastapi import APIRouter
from fastapi.responses import Response
from flowdex.catalog import (
    CatalogBuildTimeoutError,
    InvalidWorkflowIdError,
    WorkflowDocumentError,
    WorkflowNotFoundError,
)
from flowdex.config import get_settings
from flowdex_backend.app.dependencies import CatalogServiceDep
from flowdex_backend.app.errors import (
    raise_bad_request,
    raise_not_found,
    raise_unavailable,
    raise_unprocessable,
)
from flowdex_backend.app.schemas import (
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


router = APIRouter(prefix="/catalog", tags=["catalog"])
logger = logging.getLogger(__name__)


def _clamp_limit(requested: int | None) -> int:
    settings = get_settings()
    if requested is None:
        return int(settings.search_default_limit)
    return min(int(requested), int(settings.search_max_limit))


@router.get("/workflows", response_model=list[CatalogWorkflowSummary])
def list_catalog_workflows(service: CatalogServiceDep) -> list[CatalogWorkflowSummary]:
    """Return every indexed workflow in crawl order."""
    try:
        workflows = service.get_catalog_index()
    except CatalogBuildTimeoutError as exc:
        raise_unavailable("Catalog index is not available yet", exc)
    return [CatalogWorkflowSummary.from_workflow(workflow) for workflow in workflows]


@router.post("/search", response_model=CatalogSearchResponse)
def search_catalog(
    request: CatalogSearchRequest, service: CatalogServiceDep
) -> CatalogSearchResponse:
    """Return ranked workflows matching the query and required tags."""
    try:
        hits = service.search_catalog(
            request.query,
            limit=_clamp_limit(request.limit),
            required_tags=request.required_tags,
        )
    except CatalogBuildTimeoutError as exc:
        raise_unavailable("Catalog index is not available yet", exc)
    return CatalogSearchResponse(
        items=[
            CatalogSearchHit(
                workflow=CatalogWorkflowSummary.from_workflow(hit.workflow),
                score=hit.score,
                install_plan=InstallPlanResponse.from_plan(
                    service.build_install_plan(hit.workflow)
                ),
            )
            for hit in hits
        ]
    )


@router.get("/stats", response_model=CatalogStatsResponse)
def get_catalog_stats(service: CatalogServiceDep) -> CatalogStatsResponse:
    """Return counts describing the current snapshot."""
    try:
        stats = service.catalog_stats()
    except CatalogBuildTimeoutError as exc:
        raise_unavailable("Catalog index is not available yet", exc)
    return CatalogStatsResponse(
        workflows=stats.workflows,
        skipped=stats.skipped,
        built_at=stats.built_at,
        complexity=stats.complexity,
        top_tags=list(stats.top_tags),
    )


@router.post("/reindex", response_model=CatalogReindexResponse)
def reindex_catalog(service: CatalogServiceDep) -> CatalogReindexResponse:
    """Rebuild the index from disk."""
    try:
        snapshot = service.reindex()
    except CatalogBuildTimeoutError as exc:
        logger.warning("Catalog reindex timed out: %s", exc)
        raise_unavailable("Catalog reindex timed out", exc)
    return CatalogReindexResponse(
        workflows=len(snapshot.workflows), skipped=list(snapshot.skipped)
    )


@router.post("/query-rewrite", response_model=QueryRewriteResponse)
def rewrite_catalog_query(
    request: QueryRewriteRequest, service: CatalogServiceDep
) -> QueryRewriteResponse:
    """Expand a free-text request into a keyword query with tag filters."""
    return QueryRewriteResponse.from_rewrite(service.rewrite_query(request.query))


@router.get("/workflow/{workflow_id}", response_model=CatalogWorkflowDetail)
def get_catalog_workflow(
    workflow_id: str, service: CatalogServiceDep
) -> CatalogWorkflowDetail:
    """Return indexed metadata and the install plan for one workflow."""
    try:
        workflow = service.get_workflow(workflow_id)
    except InvalidWorkflowIdError as exc:
        logger.warning("Rejected workflow id %r: %s", workflow_id, exc.reason)
        raise_bad_request("Invalid workflow id", exc)
    except WorkflowNotFoundError as exc:
        raise_not_found("Workflow not found", exc)
    except CatalogBuildTimeoutError as exc:
        raise_unavailable("Catalog index is not available yet", exc)
    return CatalogWorkflowDetail(
        workflow=CatalogWorkflowSummary.from_workflow(workflow),
        node_types=list(workflow.node_types),
        install_plan=InstallPlanResponse.from_plan(
            service.build_install_plan(workflow)
        ),
    )


@router.get("/workflow/{workflow_id}/raw")
def download_catalog_workflow(workflow_id: str, service: CatalogServiceDep) -> Response:
    """Return the workflow definition as a pretty-printed JSON attachment."""
    try:
        payload = service.read_workflow_json_by_id(workflow_id)
    except InvalidWorkflowIdError as exc:
        logger.warning("Rejected workflow id %r: %s", workflow_id, exc.reason)
        raise_bad_request("Invalid workflow id", exc)
    except WorkflowNotFoundError as exc:
        raise_not_found("Workflow not found", exc)
    except WorkflowDocumentError as exc:
        raise_unprocessable("Workflow file is not valid JSON", exc)
    return Response(
        content=json.dumps(payload, indent=2, ensure_ascii=False),
        media_type="application/json; charset=utf-8",
        headers={
            "content-disposition": f'attachment; filename="workflow-{workflow_id}.json"'
        },
    )


__all__ = ["router"]
