"""Tests for deriving catalog metadata from workflow files."""

from __future__ import annotations
import json
import pytest
from flowdex.catalog import Complexity, WorkflowDocumentError, extract_workflow
from flowdex.catalog.documents import workflow_document_from_json
from flowdex.catalog.extractor import describe, extract_tags
from flowdex.catalog.ids import decode_workflow_id
from tests.factories import complex_etl, node, slack_notifier


def _extract(relative_path: str, payload: object):
    return extract_workflow(relative_path, json.dumps(payload))


def test_extracts_small_slack_workflow() -> None:
    meta = _extract("a_slack_notifier.json", slack_notifier())

    assert meta.name == "Slack Notifier"
    assert decode_workflow_id(meta.id) == "a_slack_notifier.json"
    assert meta.relative_path == "a_slack_notifier.json"
    assert meta.node_types == (
        "n8n-nodes-base.webhook",
        "n8n-nodes-base.set",
        "n8n-nodes-base.slack",
    )
    assert meta.tags == ("webhook", "set", "slack")
    assert meta.credentials == ("slackApi",)
    assert meta.complexity is Complexity.LOW
    assert meta.node_count == 3
    assert meta.description == "Auto-extracted integrations: webhook, set, slack."


def test_extracts_large_etl_workflow() -> None:
    meta = _extract("b_complex_etl.json", complex_etl())

    assert meta.complexity is Complexity.HIGH
    assert meta.node_count == 20
    assert meta.credentials == (
        "airtableTokenApi",
        "aws",
        "googleSheetsOAuth2Api",
        "mySql",
        "postgres",
    )
    assert meta.tags == (
        "code",
        "postgres",
        "my sql",
        "aws s3",
        "google sheets",
        "airtable",
        "no op",
    )


def test_name_falls_back_to_file_stem() -> None:
    meta = _extract("team/My Flow.json", {"name": "   ", "nodes": []})
    assert meta.name == "My Flow"


def test_timezone_description_wins() -> None:
    meta = _extract(
        "tz.json",
        {
            "name": "Timed",
            "settings": {"timezone": "UTC"},
            "nodes": [node("Cron", "n8n-nodes-base.cron")],
        },
    )
    assert meta.description == "Timezone: UTC."


def test_description_without_tags_mentions_n8n() -> None:
    document = workflow_document_from_json({"nodes": []})
    assert describe(document, []) == "Auto-extracted integrations: n8n."


def test_description_lists_at_most_six_tags() -> None:
    document = workflow_document_from_json({"nodes": []})
    tags = ["a", "b", "c", "d", "e", "f", "g"]
    assert describe(document, tags) == "Auto-extracted integrations: a, b, c, d, e, f."


def test_tags_drop_noise_and_duplicates() -> None:
    tags = extract_tags(
        [
            "n8n-nodes-base.start",
            "n8n-nodes-base.manualTrigger",
            "n8n-nodes-base.set",
            "custom.set",
            "n8n-nodes-base.httpRequest",
        ]
    )
    assert tags == ["set", "http request"]


def test_tags_are_capped_at_twelve() -> None:
    node_types = [f"n8n-nodes-base.service{i:02d}" for i in range(15)]
    tags = extract_tags(node_types)
    assert len(tags) == 12
    assert tags[0] == "service00"


def test_complexity_thresholds() -> None:
    def meta_for(count: int):
        nodes = [node(f"n{i}", "n8n-nodes-base.noOp") for i in range(count)]
        return _extract("c.json", {"nodes": nodes})

    assert meta_for(0).complexity is Complexity.LOW
    assert meta_for(5).complexity is Complexity.LOW
    assert meta_for(6).complexity is Complexity.MEDIUM
    assert meta_for(12).complexity is Complexity.MEDIUM
    assert meta_for(13).complexity is Complexity.HIGH


def test_null_nodes_count_but_contribute_nothing() -> None:
    meta = _extract("nulls.json", {"name": "Nulls", "nodes": [None, None]})
    assert meta.node_count == 2
    assert meta.node_types == ()
    assert meta.tags == ()


@pytest.mark.parametrize("raw", ["[1, 2]", "{broken", '"string"'])
def test_invalid_documents_raise(raw: str) -> None:
    with pytest.raises(WorkflowDocumentError):
        extract_workflow("bad.json", raw)
