"""Exceptions raised by the workflow catalog."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for catalog failures."""


class InvalidWorkflowIdError(CatalogError, ValueError):
    """Raised when a workflow id cannot be decoded or escapes the corpus root."""

    def __init__(self, workflow_id: str, reason: str = "Invalid workflow id") -> None:
        """Store the offending id alongside a short reason."""
        super().__init__(reason)
        self.workflow_id = workflow_id
        self.reason = reason


class WorkflowNotFoundError(CatalogError, LookupError):
    """Raised when a well-formed workflow id has no backing workflow."""


class WorkflowDocumentError(CatalogError, ValueError):
    """Raised when a workflow definition cannot be parsed."""


class CatalogBuildTimeoutError(CatalogError):
    """Raised when building the catalog index exceeds its time budget."""


__all__ = [
    "CatalogBuildTimeoutError",
    "CatalogError",
    "InvalidWorkflowIdError",
    "WorkflowDocumentError",
    "WorkflowNotFoundError",
]
