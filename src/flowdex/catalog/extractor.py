"""Derive catalog metadata from a single workflow definition."""

from __future__ import annotations
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath
from flowdex.catalog.documents import WorkflowDocument, parse_workflow_document
from flowdex.catalog.ids import encode_workflow_id
from flowdex.catalog.models import CatalogWorkflow, complexity_for
from flowdex.catalog.text import tag_candidate
from flowdex.catalog.tokens import build_search_tokens


MAX_TAGS = 12
DESCRIPTION_TAG_COUNT = 6
NOISE_TAGS = frozenset({"start", "manual trigger"})


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def extract_node_types(document: WorkflowDocument) -> list[str]:
    """Return distinct non-empty node types in node order."""
    return _unique(node.type for node in document.nodes if node.type)


def extract_tags(node_types: Sequence[str]) -> list[str]:
    """Return up to twelve human-readable tags for ``node_types``."""
    candidates = _unique(
        candidate for candidate in map(tag_candidate, node_types) if candidate
    )
    return [tag for tag in candidates if tag not in NOISE_TAGS][:MAX_TAGS]


def extract_credentials(document: WorkflowDocument) -> list[str]:
    """Return the sorted set of credential slots referenced by any node."""
    return sorted(
        {credential.key for node in document.nodes for credential in node.credentials}
    )


def describe(document: WorkflowDocument, tags: Sequence[str]) -> str:
    """Return the generated summary shown alongside a workflow."""
    if document.timezone is not None:
        return f"Timezone: {document.timezone}."
    integrations = ", ".join(tags[:DESCRIPTION_TAG_COUNT]) or "n8n"
    return f"Auto-extracted integrations: {integrations}."


def build_catalog_workflow(
    relative_path: str, document: WorkflowDocument
) -> CatalogWorkflow:
    """Build the catalog entry for an already-decoded workflow document."""
    name = document.name if document.name and document.name.strip() else None
    if name is None:
        name = PurePosixPath(relative_path).stem
    node_types = extract_node_types(document)
    tags = extract_tags(node_types)
    credentials = extract_credentials(document)
    search_tokens = build_search_tokens(
        document,
        relative_path=relative_path,
        tags=tags,
        credentials=credentials,
        node_types=node_types,
    )
    return CatalogWorkflow(
        id=encode_workflow_id(relative_path),
        relative_path=relative_path,
        name=name,
        description=describe(document, tags),
        tags=tuple(tags),
        search_tokens=search_tokens,
        complexity=complexity_for(document.node_count),
        credentials=tuple(credentials),
        node_types=tuple(node_types),
        node_count=document.node_count,
    )


def extract_workflow(relative_path: str, raw: bytes | str) -> CatalogWorkflow:
    """Parse ``raw`` file contents and return its catalog entry.

    Raises:
        WorkflowDocumentError: if the contents are not a JSON object.
    """
    return build_catalog_workflow(relative_path, parse_workflow_document(raw))


__all__ = [
    "build_catalog_workflow",
    "describe",
    "extract_credentials",
    "extract_node_types",
    "extract_tags",
    "extract_workflow",
]
