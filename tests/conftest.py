"""Shared fixtures for Flowdex tests."""

from __future__ import annotations
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
import pytest
from flowdex.catalog import CatalogIndex, CatalogService
from flowdex.observability.metrics import MetricRecorder
from tests.factories import complex_etl, slack_notifier


WriteWorkflow = Callable[[Path, str, Any], Path]


@pytest.fixture
def write_workflow() -> WriteWorkflow:
    """Return a helper writing ``payload`` under ``root``.

    Strings and bytes are written verbatim; anything else is dumped as JSON.
    """

    def _write(root: Path, relative_path: str, payload: Any) -> Path:
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            path.write_bytes(payload)
        elif isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scenario_corpus(tmp_path: Path, write_workflow: WriteWorkflow) -> Path:
    """Corpus with a small Slack workflow and a large ETL workflow."""
    root = tmp_path / "workflows"
    root.mkdir()
    write_workflow(root, "a_slack_notifier.json", slack_notifier())
    write_workflow(root, "b_complex_etl.json", complex_etl())
    return root


@pytest.fixture
def recorder() -> MetricRecorder:
    return MetricRecorder()


@pytest.fixture
def scenario_service(scenario_corpus: Path, recorder: MetricRecorder) -> CatalogService:
    index = CatalogIndex(scenario_corpus, max_workers=2, recorder=recorder)
    return CatalogService(index)
