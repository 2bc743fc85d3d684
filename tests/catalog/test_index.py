"""Tests for the cached catalog index."""

from __future__ import annotations
import logging
import threading
import time
from pathlib import Path
import pytest
from flowdex.catalog import (
    CatalogBuildTimeoutError,
    CatalogIndex,
    CatalogService,
    SkippedFile,
)
from flowdex.catalog import index as index_module
from flowdex.observability.metrics import (
    INDEX_BUILDS,
    INDEX_SKIPPED,
    INDEX_TIMEOUTS,
    INDEX_WORKFLOWS,
    MetricRecorder,
)
from tests.factories import slack_notifier


def test_index_is_built_lazily(
    scenario_corpus: Path, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    assert index.is_stale
    assert recorder.events(INDEX_BUILDS) == []

    workflows = index.get()

    assert [workflow.relative_path for workflow in workflows] == [
        "a_slack_notifier.json",
        "b_complex_etl.json",
    ]
    assert not index.is_stale
    assert len(recorder.events(INDEX_BUILDS)) == 1
    assert recorder.events(INDEX_WORKFLOWS)[0].value == 2


def test_repeated_reads_reuse_the_snapshot(
    scenario_corpus: Path, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    first = index.snapshot()
    assert index.snapshot() is first
    assert len(recorder.events(INDEX_BUILDS)) == 1


def test_invalid_files_are_skipped_and_logged(
    tmp_path: Path,
    write_workflow,
    recorder: MetricRecorder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    write_workflow(tmp_path, "good.json", slack_notifier())
    write_workflow(tmp_path, "broken.json", "{nope")
    write_workflow(tmp_path, "nested/array.json", "[1, 2, 3]")
    index = CatalogIndex(tmp_path, recorder=recorder)

    with caplog.at_level(logging.WARNING, logger="flowdex.catalog.index"):
        snapshot = index.snapshot()

    assert [workflow.relative_path for workflow in snapshot.workflows] == ["good.json"]
    assert [skip.relative_path for skip in snapshot.skipped] == [
        "broken.json",
        "nested/array.json",
    ]
    assert "broken.json" in caplog.text
    assert recorder.events(INDEX_SKIPPED)[0].value == 2


def test_oversized_files_are_skipped(tmp_path: Path, write_workflow) -> None:
    write_workflow(tmp_path, "huge.json", slack_notifier())
    index = CatalogIndex(tmp_path, max_file_bytes=16, recorder=MetricRecorder())

    snapshot = index.snapshot()

    assert snapshot.workflows == ()
    assert snapshot.skipped[0].relative_path == "huge.json"
    assert "limit is 16" in snapshot.skipped[0].reason


def test_load_catalog_entry_reports_unreadable_files(tmp_path: Path) -> None:
    entry = index_module.load_catalog_entry(tmp_path, tmp_path / "missing.json")
    assert isinstance(entry, SkippedFile)
    assert entry.reason.startswith("Unreadable")


def test_missing_root_builds_an_empty_snapshot(tmp_path: Path) -> None:
    index = CatalogIndex(tmp_path / "absent", recorder=MetricRecorder())
    snapshot = index.snapshot()
    assert snapshot.workflows == ()
    assert snapshot.skipped == ()


def test_reset_rebuilds_from_disk_on_next_access(
    scenario_corpus: Path, write_workflow, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    assert len(index.get()) == 2

    write_workflow(scenario_corpus, "c_new.json", slack_notifier())
    assert len(index.get()) == 2

    index.reset()
    assert index.is_stale
    assert len(index.get()) == 3
    assert len(recorder.events(INDEX_BUILDS)) == 2


def test_rebuild_publishes_immediately(
    scenario_corpus: Path, write_workflow, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    before = index.snapshot()
    write_workflow(scenario_corpus, "c_new.json", slack_notifier())

    after = index.rebuild()

    assert after is not before
    assert len(after.workflows) == 3
    assert index.snapshot() is after


def test_concurrent_first_access_builds_once(
    scenario_corpus: Path, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, max_workers=2, recorder=recorder)
    barrier = threading.Barrier(8)
    results: list[int] = []
    results_lock = threading.Lock()

    def reader() -> None:
        barrier.wait()
        snapshot = index.snapshot()
        with results_lock:
            results.append(id(snapshot))

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(recorder.events(INDEX_BUILDS)) == 1
    assert len(set(results)) == 1


@pytest.fixture
def blocking_loader(monkeypatch: pytest.MonkeyPatch):
    """Make every file load wait until the returned event is set."""
    release = threading.Event()
    original = index_module.load_catalog_entry

    def _blocking(root, path, **kwargs):
        release.wait(5)
        return original(root, path, **kwargs)

    monkeypatch.setattr(index_module, "load_catalog_entry", _blocking)
    yield release
    release.set()


def test_first_build_timeout_raises(
    scenario_corpus: Path, recorder: MetricRecorder, blocking_loader
) -> None:
    index = CatalogIndex(scenario_corpus, build_timeout=0.05, recorder=recorder)

    with pytest.raises(CatalogBuildTimeoutError):
        index.snapshot()

    assert index.is_stale
    assert len(recorder.events(INDEX_TIMEOUTS)) == 1
    assert recorder.events(INDEX_BUILDS) == []


def test_timed_out_rebuild_keeps_previous_snapshot(
    scenario_corpus: Path,
    recorder: MetricRecorder,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    index = CatalogIndex(scenario_corpus, build_timeout=5.0, recorder=recorder)
    previous = index.snapshot()

    release = threading.Event()
    original = index_module.load_catalog_entry

    def _blocking(root, path, **kwargs):
        release.wait(5)
        return original(root, path, **kwargs)

    monkeypatch.setattr(index_module, "load_catalog_entry", _blocking)
    try:
        with pytest.raises(CatalogBuildTimeoutError):
            index.rebuild(timeout=0.05)
        assert index.snapshot() is previous

        index.reset()
        monkeypatch.setattr(index, "_build_timeout", 0.05)
        assert index.snapshot() is previous
    finally:
        release.set()

    assert len(recorder.events(INDEX_TIMEOUTS)) == 2


@pytest.mark.skipif(not hasattr(Path, "symlink_to"), reason="symlinks unsupported")
def test_symlinked_files_outside_root_are_not_indexed(
    tmp_path: Path, write_workflow
) -> None:
    root = tmp_path / "corpus"
    outside = write_workflow(tmp_path, "outside/secret.json", slack_notifier())
    write_workflow(root, "inside.json", slack_notifier())
    (root / "escape.json").symlink_to(outside)

    index = CatalogIndex(root, recorder=MetricRecorder())

    assert [workflow.relative_path for workflow in index.get()] == ["inside.json"]


@pytest.fixture
def paused_crawl(monkeypatch: pytest.MonkeyPatch):
    """Pause the first build right after it lists the corpus files."""
    crawled = threading.Event()
    proceed = threading.Event()
    original = index_module.list_workflow_files

    def _paused(root):
        files = original(root)
        if not crawled.is_set():
            crawled.set()
            proceed.wait(5)
        return files

    monkeypatch.setattr(index_module, "list_workflow_files", _paused)
    yield crawled, proceed
    proceed.set()


def test_reset_during_build_keeps_the_index_stale(
    scenario_corpus: Path, write_workflow, recorder: MetricRecorder, paused_crawl
) -> None:
    crawled, proceed = paused_crawl
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    first = threading.Thread(target=index.get)
    first.start()
    assert crawled.wait(5)

    write_workflow(scenario_corpus, "c_new.json", slack_notifier())
    index.reset()
    proceed.set()
    first.join(5)

    assert index.is_stale
    assert len(index.get()) == 3
    assert not index.is_stale


def test_reindex_waiting_on_a_build_crawls_again(
    scenario_corpus: Path, write_workflow, recorder: MetricRecorder, paused_crawl
) -> None:
    crawled, proceed = paused_crawl
    service = CatalogService(CatalogIndex(scenario_corpus, recorder=recorder))
    first = threading.Thread(target=service.get_catalog_index)
    first.start()
    assert crawled.wait(5)

    write_workflow(scenario_corpus, "c_new.json", slack_notifier())
    results = []
    second = threading.Thread(target=lambda: results.append(service.reindex()))
    second.start()
    time.sleep(0.05)
    proceed.set()
    first.join(5)
    second.join(5)

    assert len(results[0].workflows) == 3
    assert len(service.get_catalog_index()) == 3


def test_sequential_rebuilds_each_crawl(
    scenario_corpus: Path, recorder: MetricRecorder
) -> None:
    index = CatalogIndex(scenario_corpus, recorder=recorder)
    first = index.rebuild()
    second = index.rebuild()

    assert second is not first
    assert len(recorder.events(INDEX_BUILDS)) == 2


def test_readers_during_timed_out_rebuild_share_one_attempt(
    scenario_corpus: Path,
    recorder: MetricRecorder,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    index = CatalogIndex(scenario_corpus, build_timeout=0.2, recorder=recorder)
    previous = index.snapshot()
    index.reset()

    release = threading.Event()
    original = index_module.load_catalog_entry

    def _blocking(root, path, **kwargs):
        release.wait(5)
        return original(root, path, **kwargs)

    monkeypatch.setattr(index_module, "load_catalog_entry", _blocking)
    barrier = threading.Barrier(5)
    served: list[object] = []

    def reader() -> None:
        barrier.wait()
        served.append(index.snapshot())

    threads = [threading.Thread(target=reader) for _ in range(5)]
    started = time.monotonic()
    try:
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(5)
        elapsed = time.monotonic() - started
    finally:
        release.set()

    assert served == [previous] * 5
    assert len(recorder.events(INDEX_TIMEOUTS)) == 1
    assert elapsed < 1.0
    assert index.snapshot() is previous
    assert len(recorder.events(INDEX_TIMEOUTS)) == 1


def test_first_build_timeout_backs_off_before_retrying(
    scenario_corpus: Path,
    recorder: MetricRecorder,
    monkeypatch: pytest.MonkeyPatch,
    blocking_loader,
) -> None:
    index = CatalogIndex(scenario_corpus, build_timeout=0.05, recorder=recorder)

    with pytest.raises(CatalogBuildTimeoutError):
        index.snapshot()
    with pytest.raises(CatalogBuildTimeoutError, match="timed out recently"):
        index.snapshot()
    assert len(recorder.events(INDEX_TIMEOUTS)) == 1

    blocking_loader.set()
    monkeypatch.setattr(index, "_build_timeout", 5.0)
    index.reset()
    assert len(index.get()) == 2
