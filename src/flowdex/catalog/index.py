"""Lazily built, atomically published snapshot of the workflow corpus."""

from __future__ import annotations
import itertools
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import UTC, datetime
from pathlib import Path
from flowdex.catalog.crawler import list_workflow_files
from flowdex.catalog.errors import CatalogBuildTimeoutError, WorkflowDocumentError
from flowdex.catalog.extractor import extract_workflow
from flowdex.catalog.models import CatalogSnapshot, CatalogWorkflow, SkippedFile
from flowdex.observability.metrics import (
    INDEX_TIMEOUTS,
    MetricRecorder,
    metrics,
    record_index_build,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_BYTES = 8 * 1024 * 1024
DEFAULT_RETRY_BACKOFF_SECONDS = 30.0


def load_catalog_entry(
    root: Path, path: Path, *, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
) -> CatalogWorkflow | SkippedFile:
    """Read and extract one corpus file, turning parse failures into a skip."""
    relative_path = path.relative_to(root).as_posix()
    try:
        size = path.stat().st_size
        if size > max_file_bytes:
            return SkippedFile(
                relative_path=relative_path,
                reason=f"File is {size} bytes; limit is {max_file_bytes}.",
            )
        return extract_workflow(relative_path, path.read_bytes())
    except WorkflowDocumentError as exc:
        return SkippedFile(relative_path=relative_path, reason=str(exc))
    except OSError as exc:
        return SkippedFile(relative_path=relative_path, reason=f"Unreadable: {exc}")


class CatalogIndex:
    """Read-mostly cache of catalog metadata for one corpus root.

    The snapshot is built on first access and replaced wholesale by
    :meth:`rebuild`. Publishing is a single attribute assignment of a frozen
    :class:`CatalogSnapshot`, so readers of a current snapshot never lock.

    A lock serialises builds. Each build remembers the invalidation epoch it
    crawled under; a :meth:`reset` that lands mid-build bumps the epoch, so
    the published result is already stale and the next access crawls again.
    While a snapshot exists, readers that find a rebuild in progress, or a
    timed-out rebuild still inside its retry backoff, keep getting the
    previous snapshot instead of queueing for another build.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        max_workers: int | None = None,
        build_timeout: float | None = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        recorder: MetricRecorder | None = None,
    ) -> None:
        """Configure the index; nothing is read from disk until first access."""
        self._root = Path(root).resolve()
        self._max_workers = max_workers or os.cpu_count() or 4
        self._build_timeout = build_timeout
        self._max_file_bytes = max_file_bytes
        self._retry_backoff = retry_backoff
        self._recorder = recorder if recorder is not None else metrics
        self._snapshot: CatalogSnapshot | None = None
        self._epochs = itertools.count(1)
        self._epoch = 0
        self._snapshot_epoch = -1
        self._builds_started = 0
        self._published_build = 0
        self._retry_at = 0.0
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        """Return the resolved corpus root."""
        return self._root

    @property
    def is_stale(self) -> bool:
        """Return whether the next access will rebuild the snapshot."""
        return self._snapshot is None or self._snapshot_epoch != self._epoch

    def get(self) -> tuple[CatalogWorkflow, ...]:
        """Return every indexed workflow in crawl order."""
        return self.snapshot().workflows

    def snapshot(self) -> CatalogSnapshot:
        """Return the published snapshot, building it if missing or stale.

        When a rebuild after :meth:`reset` is running or has timed out, the
        previous snapshot keeps being served.

        Raises:
            CatalogBuildTimeoutError: if no snapshot was ever published and
                the build timed out, now or within the retry backoff.
        """
        current = self._snapshot
        if current is not None:
            if not self.is_stale or self._backing_off():
                return current
            if not self._lock.acquire(blocking=False):
                logger.debug(
                    "Catalog rebuild for %s in progress; serving snapshot "
                    "built at %s.",
                    self._root,
                    current.built_at.isoformat(),
                )
                return current
        else:
            self._lock.acquire()
        try:
            if not self.is_stale:
                return self._snapshot
            if self._backing_off():
                if self._snapshot is not None:
                    return self._snapshot
                msg = (
                    f"Indexing {self._root} timed out recently; retrying "
                    f"after {self._retry_backoff} seconds."
                )
                raise CatalogBuildTimeoutError(msg)
            try:
                return self._build_and_publish(self._build_timeout)
            except CatalogBuildTimeoutError:
                if self._snapshot is None:
                    raise
                logger.warning(
                    "Catalog rebuild for %s timed out; serving previous snapshot "
                    "built at %s.",
                    self._root,
                    self._snapshot.built_at.isoformat(),
                )
                return self._snapshot
        finally:
            self._lock.release()

    def rebuild(self, *, timeout: float | None = None) -> CatalogSnapshot:
        """Crawl the corpus now and publish the result.

        A build another thread started after this call was made is reused
        instead of crawling twice.

        Raises:
            CatalogBuildTimeoutError: if the build exceeds ``timeout`` (or the
                configured build timeout). The previous snapshot stays
                published.
        """
        ticket = self._builds_started
        with self._lock:
            if self._published_build > ticket and not self.is_stale:
                return self._snapshot
            return self._build_and_publish(
                timeout if timeout is not None else self._build_timeout
            )

    def reset(self) -> None:
        """Invalidate the snapshot so the next access rebuilds it from disk."""
        self._epoch = next(self._epochs)
        self._retry_at = 0.0

    def _backing_off(self) -> bool:
        return time.monotonic() < self._retry_at

    def _build_and_publish(self, timeout: float | None) -> CatalogSnapshot:
        self._builds_started += 1
        build = self._builds_started
        epoch = self._epoch
        try:
            snapshot = self._build(timeout)
        except CatalogBuildTimeoutError:
            self._retry_at = time.monotonic() + self._retry_backoff
            raise
        self._snapshot = snapshot
        self._snapshot_epoch = epoch
        self._published_build = build
        self._retry_at = 0.0
        return snapshot

    def _build(self, timeout: float | None) -> CatalogSnapshot:
        started = time.perf_counter()
        files = list_workflow_files(self._root)

        executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="flowdex-index"
        )
        try:
            futures = [
                executor.submit(
                    load_catalog_entry,
                    self._root,
                    path,
                    max_file_bytes=self._max_file_bytes,
                )
                for path in files
            ]
            remaining = None
            if timeout is not None:
                remaining = max(0.0, timeout - (time.perf_counter() - started))
            _, pending = wait(futures, timeout=remaining)
            if pending:
                for future in pending:
                    future.cancel()
                self._recorder.increment(INDEX_TIMEOUTS, root=str(self._root))
                msg = (
                    f"Indexing {len(files)} workflow files under {self._root} "
                    f"exceeded {timeout} seconds."
                )
                raise CatalogBuildTimeoutError(msg)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        workflows: list[CatalogWorkflow] = []
        skipped: list[SkippedFile] = []
        for future in futures:
            entry = future.result()
            if isinstance(entry, SkippedFile):
                logger.warning(
                    "Skipping workflow file %s: %s", entry.relative_path, entry.reason
                )
                skipped.append(entry)
            else:
                workflows.append(entry)

        duration = time.perf_counter() - started
        record_index_build(
            self._recorder,
            root=str(self._root),
            workflows=len(workflows),
            skipped=len(skipped),
            duration_seconds=duration,
        )
        logger.info(
            "Indexed %d workflows from %s in %.3fs (%d skipped).",
            len(workflows),
            self._root,
            duration,
            len(skipped),
        )
        return CatalogSnapshot(
            root=str(self._root),
            workflows=tuple(workflows),
            skipped=tuple(skipped),
            built_at=datetime.now(tz=UTC),
            duration_seconds=duration,
        )


__all__ = [
    "DEFAULT_MAX_FILE_BYTES",
    "DEFAULT_RETRY_BACKOFF_SECONDS",
    "CatalogIndex",
    "load_catalog_entry",
]
