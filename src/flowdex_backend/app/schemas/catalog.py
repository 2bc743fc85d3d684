"""Request and response schemas for catalog routes."""

from __future__ import annotations
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field
from flowdex.catalog import (
    CatalogWorkflow,
    QueryRewrite,
    SkippedFile,
    WorkflowInstallPlan,
)


class CatalogSearchRequest(BaseModel):
    """Search payload; ``requiredTags`` is accepted for older clients."""

    query: str = ""
    limit: int | None = None
    required_tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("required_tags", "requiredTags"),
    )


class QueryRewriteRequest(BaseModel):
    """Free-text request to turn into a catalog query."""

    query: str = ""


class InstallPlanResponse(BaseModel):
    """Install, test and risk checklist for a workflow."""

    credential_checklist: list[str]
    install_steps: list[str]
    test_steps: list[str]
    risk_notes: list[str]

    @classmethod
    def from_plan(cls, plan: WorkflowInstallPlan) -> InstallPlanResponse:
        """Convert a catalog install plan into a response payload."""
        return cls(
            credential_checklist=list(plan.credential_checklist),
            install_steps=list(plan.install_steps),
            test_steps=list(plan.test_steps),
            risk_notes=list(plan.risk_notes),
        )


class CatalogWorkflowSummary(BaseModel):
    """Public view of an indexed workflow."""

    id: str
    name: str
    description: str
    tags: list[str]
    complexity: str
    credentials: list[str]
    node_count: int
    json_url: str

    @classmethod
    def from_workflow(cls, workflow: CatalogWorkflow) -> CatalogWorkflowSummary:
        """Build the summary for ``workflow``."""
        return cls(
            id=workflow.id,
            name=workflow.name,
            description=workflow.description,
            tags=list(workflow.tags),
            complexity=workflow.complexity.value,
            credentials=list(workflow.credentials),
            node_count=workflow.node_count,
            json_url=f"/api/catalog/workflow/{workflow.id}/raw",
        )


class CatalogSearchHit(BaseModel):
    """One ranked search result."""

    workflow: CatalogWorkflowSummary
    score: int
    install_plan: InstallPlanResponse


class CatalogSearchResponse(BaseModel):
    """Ranked search results."""

    items: list[CatalogSearchHit]


class CatalogWorkflowDetail(BaseModel):
    """Workflow metadata together with its install plan."""

    workflow: CatalogWorkflowSummary
    node_types: list[str]
    install_plan: InstallPlanResponse


class CatalogStatsResponse(BaseModel):
    """Counts describing the current catalog snapshot."""

    workflows: int
    skipped: int
    built_at: datetime
    complexity: dict[str, int]
    top_tags: list[tuple[str, int]]


class CatalogReindexResponse(BaseModel):
    """Outcome of a forced rebuild."""

    ok: bool = True
    workflows: int
    skipped: list[SkippedFile] = Field(default_factory=list)


class QueryRewriteResponse(BaseModel):
    """Keyword query and tag filters derived from a user request."""

    query: str
    required_tags: list[str]
    keywords: list[str]
    notes: str | None = None

    @classmethod
    def from_rewrite(cls, rewrite: QueryRewrite) -> QueryRewriteResponse:
        """Convert a catalog rewrite into a response payload."""
        return cls(
            query=rewrite.query,
            required_tags=list(rewrite.required_tags),
            keywords=list(rewrite.keywords),
            notes=rewrite.notes,
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
