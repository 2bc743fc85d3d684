"""Workflow catalog indexing, search and install planning."""

from flowdex.catalog.errors import (
    CatalogBuildTimeoutError,
    CatalogError,
    InvalidWorkflowIdError,
    WorkflowDocumentError,
    WorkflowNotFoundError,
)
from flowdex.catalog.extractor import extract_workflow
from flowdex.catalog.ids import (
    decode_workflow_id,
    encode_workflow_id,
    resolve_workflow_path,
)
from flowdex.catalog.index import CatalogIndex
from flowdex.catalog.install_plan import build_install_plan
from flowdex.catalog.models import (
    CatalogSnapshot,
    CatalogStats,
    CatalogWorkflow,
    Complexity,
    ScoredWorkflow,
    SkippedFile,
    WorkflowInstallPlan,
)
from flowdex.catalog.query_rewrite import QueryRewrite, rewrite_query
from flowdex.catalog.scoring import search
from flowdex.catalog.service import CatalogService, get_catalog_service


__all__ = [
    "CatalogBuildTimeoutError",
    "CatalogError",
    "CatalogIndex",
    "CatalogService",
    "CatalogSnapshot",
    "CatalogStats",
    "CatalogWorkflow",
    "Complexity",
    "InvalidWorkflowIdError",
    "QueryRewrite",
    "ScoredWorkflow",
    "SkippedFile",
    "WorkflowDocumentError",
    "WorkflowInstallPlan",
    "WorkflowNotFoundError",
    "build_install_plan",
    "decode_workflow_id",
    "encode_workflow_id",
    "extract_workflow",
    "get_catalog_service",
    "resolve_workflow_path",
    "rewrite_query",
    "search",
]
