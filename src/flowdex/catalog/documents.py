"""Typed view over loosely-shaped n8n workflow exports.

Workflow files come from a third-party corpus and routinely deviate from the
schema n8n writes: ``nodes`` may be missing or an object, node entries may be
``null``, credentials may be strings. Everything downstream works on the
dataclasses below, which only ever hold values of the expected type. A field
of the wrong JSON type is treated as absent.
"""

from __future__ import annotations
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from flowdex.catalog.errors import WorkflowDocumentError


@dataclass(frozen=True, slots=True)
class CredentialRef:
    """A credential slot on a node: ``{"slackApi": {"id": .., "name": ..}}``."""

    key: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class NodeDocument:
    """Fields of a single node that the catalog reads."""

    name: str | None = None
    type: str | None = None
    notes: str | None = None
    url: str | None = None
    sticky_content: str | None = None
    credentials: tuple[CredentialRef, ...] = field(default_factory=tuple)

    @property
    def is_sticky_note(self) -> bool:
        """Return whether the node is an editor sticky note."""
        return self.type is not None and "stickynote" in self.type.lower()


@dataclass(frozen=True, slots=True)
class WorkflowDocument:
    """Fields of a workflow export that the catalog reads."""

    name: str | None = None
    nodes: tuple[NodeDocument, ...] = field(default_factory=tuple)
    timezone: str | None = None

    @property
    def node_count(self) -> int:
        """Return the number of entries in the source ``nodes`` array."""
        return len(self.nodes)


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _credential_refs(value: Any) -> tuple[CredentialRef, ...]:
    return tuple(
        CredentialRef(key=str(key), name=_string(_mapping(entry).get("name")))
        for key, entry in _mapping(value).items()
    )


def _node(value: Any) -> NodeDocument:
    if not isinstance(value, Mapping):
        return NodeDocument()
    parameters = _mapping(value.get("parameters"))
    content = _string(parameters.get("content"))
    if content is None:
        content = _string(parameters.get("text"))
    return NodeDocument(
        name=_string(value.get("name")),
        type=_string(value.get("type")),
        notes=_string(value.get("notes")),
        url=_string(parameters.get("url")),
        sticky_content=content,
        credentials=_credential_refs(value.get("credentials")),
    )


def workflow_document_from_json(payload: Any) -> WorkflowDocument:
    """Build a :class:`WorkflowDocument` from an already-decoded JSON value."""
    if not isinstance(payload, Mapping):
        msg = f"Expected a JSON object, got {type(payload).__name__}."
        raise WorkflowDocumentError(msg)
    raw_nodes = payload.get("nodes")
    nodes: tuple[NodeDocument, ...] = ()
    if isinstance(raw_nodes, list):
        nodes = tuple(_node(item) for item in raw_nodes)
    return WorkflowDocument(
        name=_string(payload.get("name")),
        nodes=nodes,
        timezone=_string(_mapping(payload.get("settings")).get("timezone")),
    )


def load_json(raw: bytes | str) -> Any:
    """Decode ``raw`` as JSON, wrapping failures in :class:`WorkflowDocumentError`."""
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as exc:
        msg = f"Invalid JSON: {exc}"
        raise WorkflowDocumentError(msg) from exc


def parse_workflow_document(raw: bytes | str) -> WorkflowDocument:
    """Parse raw file contents into a :class:`WorkflowDocument`."""
    return workflow_document_from_json(load_json(raw))


__all__ = [
    "CredentialRef",
    "NodeDocument",
    "WorkflowDocument",
    "load_json",
    "parse_workflow_document",
    "workflow_document_from_json",
]
