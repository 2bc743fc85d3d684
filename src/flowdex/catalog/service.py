"""Catalog operations consumed by the HTTP service and the CLI."""

from __future__ import annotations
import logging
import threading
from collections import Counter
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any
from flowdex.catalog.documents import load_json
from flowdex.catalog.errors import WorkflowNotFoundError
from flowdex.catalog.ids import (
    decode_workflow_id,
    encode_workflow_id,
    resolve_workflow_path,
)
from flowdex.catalog.index import DEFAULT_MAX_FILE_BYTES, CatalogIndex
from flowdex.catalog.install_plan import build_install_plan
from flowdex.catalog.models import (
    CatalogSnapshot,
    CatalogStats,
    CatalogWorkflow,
    Complexity,
    ScoredWorkflow,
    WorkflowInstallPlan,
)
from flowdex.catalog.query_rewrite import QueryRewrite, rewrite_query
from flowdex.catalog.scoring import DEFAULT_HEURISTICS, Heuristic, search
from flowdex.config import get_settings


logger = logging.getLogger(__name__)

TOP_TAGS_IN_STATS = 10


class CatalogService:
    """Facade over one corpus root and its cached index."""

    def __init__(
        self,
        index: CatalogIndex,
        *,
        default_limit: int = 10,
        heuristics: Sequence[Heuristic] = DEFAULT_HEURISTICS,
    ) -> None:
        """Wrap ``index``; searches use ``heuristics`` for the ranking policy."""
        self._index = index
        self._default_limit = default_limit
        self._heuristics = tuple(heuristics)

    @classmethod
    def from_directory(
        cls,
        root: Path | str,
        *,
        max_workers: int | None = None,
        build_timeout: float | None = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        default_limit: int = 10,
    ) -> CatalogService:
        """Create a service indexing the corpus under ``root``."""
        index = CatalogIndex(
            root,
            max_workers=max_workers,
            build_timeout=build_timeout,
            max_file_bytes=max_file_bytes,
        )
        return cls(index, default_limit=default_limit)

    @property
    def root(self) -> Path:
        """Return the corpus root."""
        return self._index.root

    @property
    def index(self) -> CatalogIndex:
        """Return the underlying index."""
        return self._index

    def get_catalog_index(self) -> tuple[CatalogWorkflow, ...]:
        """Return all indexed workflows in crawl order."""
        return self._index.get()

    def get_catalog_snapshot(self) -> CatalogSnapshot:
        """Return the current snapshot including skipped files."""
        return self._index.snapshot()

    def search_catalog(
        self,
        query: str,
        *,
        limit: int | None = None,
        required_tags: Iterable[str] = (),
    ) -> list[ScoredWorkflow]:
        """Return the best matches for ``query`` in the cached index."""
        return search(
            self._index.get(),
            query,
            limit=self._default_limit if limit is None else limit,
            required_tags=required_tags,
            heuristics=self._heuristics,
        )

    def build_install_plan(self, meta: CatalogWorkflow) -> WorkflowInstallPlan:
        """Return the install checklist for ``meta``."""
        return build_install_plan(meta)

    def encode_workflow_id(self, relative_path: str) -> str:
        """Return the opaque id for ``relative_path``."""
        return encode_workflow_id(relative_path)

    def decode_workflow_id(self, workflow_id: str) -> str:
        """Return the relative path behind ``workflow_id``."""
        return decode_workflow_id(workflow_id)

    def get_workflow(self, workflow_id: str) -> CatalogWorkflow:
        """Return indexed metadata for ``workflow_id``.

        Raises:
            InvalidWorkflowIdError: if the id is malformed or escapes the root.
            WorkflowNotFoundError: if the id is valid but not indexed.
        """
        resolve_workflow_path(self.root, workflow_id)
        workflow = self._index.snapshot().find(workflow_id)
        if workflow is None:
            msg = f"Workflow {workflow_id} is not in the catalog index."
            raise WorkflowNotFoundError(msg)
        return workflow

    def read_workflow_json_by_id(self, workflow_id: str) -> Any:
        """Read the raw workflow definition behind ``workflow_id``.

        The decoded path is checked against the corpus root before any read.

        Raises:
            InvalidWorkflowIdError: if the id is malformed or escapes the root.
            WorkflowNotFoundError: if no readable file exists at the decoded
                path.
            WorkflowDocumentError: if the file is not valid JSON.
        """
        path = resolve_workflow_path(self.root, workflow_id)
        try:
            raw = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            msg = f"Workflow file for {workflow_id} does not exist."
            raise WorkflowNotFoundError(msg) from exc
        except OSError as exc:
            logger.warning("Cannot read workflow file %s: %s", path, exc)
            msg = f"Workflow file for {workflow_id} is not readable."
            raise WorkflowNotFoundError(msg) from exc
        return load_json(raw)

    def reset_catalog_index_cache(self) -> None:
        """Invalidate the cached index; the next read rebuilds it."""
        self._index.reset()

    def reindex(self) -> CatalogSnapshot:
        """Rebuild the index immediately and return the new snapshot."""
        self._index.reset()
        return self._index.rebuild()

    def catalog_stats(self) -> CatalogStats:
        """Summarise the current snapshot."""
        snapshot = self._index.snapshot()
        counts = Counter(workflow.complexity for workflow in snapshot.workflows)
        tags = Counter(tag for workflow in snapshot.workflows for tag in workflow.tags)
        return CatalogStats(
            workflows=len(snapshot.workflows),
            skipped=len(snapshot.skipped),
            built_at=snapshot.built_at,
            complexity={level.value: counts.get(level, 0) for level in Complexity},
            top_tags=tuple(tags.most_common(TOP_TAGS_IN_STATS)),
        )

    def rewrite_query(self, query: str) -> QueryRewrite:
        """Expand a free-text request into a catalog keyword query."""
        return rewrite_query(query)


_service_lock = threading.Lock()
_service_ref: dict[str, CatalogService | None] = {"service": None}


def create_catalog_service() -> CatalogService:
    """Build a service from the current settings."""
    settings = get_settings()
    return CatalogService.from_directory(
        settings.workflows_dir,
        max_workers=settings.index_max_workers,
        build_timeout=settings.index_build_timeout_seconds,
        max_file_bytes=settings.index_max_file_bytes,
        default_limit=settings.search_default_limit,
    )


def get_catalog_service(*, refresh: bool = False) -> CatalogService:
    """Return the process-wide service, creating it from settings on first use."""
    with _service_lock:
        service = _service_ref["service"]
        if service is None or refresh:
            service = create_catalog_service()
            _service_ref["service"] = service
            logger.debug("Created catalog service for %s.", service.root)
        return service


__all__ = ["CatalogService", "create_catalog_service", "get_catalog_service"]
