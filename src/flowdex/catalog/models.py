"""Catalog entities produced by indexing a workflow corpus."""

from __future__ import annotations
from datetime import UTC, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


LOW_COMPLEXITY_MAX_NODES = 5
MEDIUM_COMPLEXITY_MAX_NODES = 12


class Complexity(str, Enum):
    """Coarse installation-effort bucket derived from node count."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def complexity_for(node_count: int) -> Complexity:
    """Return the complexity bucket for a workflow with ``node_count`` nodes."""
    if node_count <= LOW_COMPLEXITY_MAX_NODES:
        return Complexity.LOW
    if node_count <= MEDIUM_COMPLEXITY_MAX_NODES:
        return Complexity.MEDIUM
    return Complexity.HIGH


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CatalogWorkflow(_FrozenModel):
    """Metadata extracted from one workflow file at crawl time."""

    id: str
    relative_path: str
    name: str
    description: str
    tags: tuple[str, ...] = ()
    search_tokens: tuple[str, ...] = ()
    complexity: Complexity
    credentials: tuple[str, ...] = ()
    node_types: tuple[str, ...] = ()
    node_count: int = Field(ge=0)

    def has_node_type(self, *needles: str) -> bool:
        """Return whether any node type contains one of ``needles``."""
        lowered = [node_type.lower() for node_type in self.node_types]
        return any(needle in node_type for node_type in lowered for needle in needles)


class ScoredWorkflow(_FrozenModel):
    """A search hit paired with its ranking score."""

    workflow: CatalogWorkflow
    score: int


class WorkflowInstallPlan(_FrozenModel):
    """Checklist for importing, testing and operating a catalog workflow."""

    credential_checklist: tuple[str, ...]
    install_steps: tuple[str, ...]
    test_steps: tuple[str, ...]
    risk_notes: tuple[str, ...]


class SkippedFile(_FrozenModel):
    """A corpus file left out of the index because it could not be parsed."""

    relative_path: str
    reason: str


class CatalogSnapshot(_FrozenModel):
    """Immutable result of one full crawl of the workflow corpus."""

    root: str
    workflows: tuple[CatalogWorkflow, ...] = ()
    skipped: tuple[SkippedFile, ...] = ()
    built_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    duration_seconds: float = 0.0

    def find(self, workflow_id: str) -> CatalogWorkflow | None:
        """Return the workflow with ``workflow_id`` if it was indexed."""
        for workflow in self.workflows:
            if workflow.id == workflow_id:
                return workflow
        return None


class CatalogStats(_FrozenModel):
    """Aggregate counts describing the current snapshot."""

    workflows: int
    skipped: int
    built_at: datetime
    complexity: dict[str, int]
    top_tags: tuple[tuple[str, int], ...]


__all__ = [
    "CatalogSnapshot",
    "CatalogStats",
    "CatalogWorkflow",
    "Complexity",
    "ScoredWorkflow",
    "SkippedFile",
    "WorkflowInstallPlan",
    "complexity_for",
]
