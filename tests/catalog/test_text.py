"""Tests for text folding, tokenizing and tag normalization."""

from __future__ import annotations
import pytest
from flowdex.catalog.text import (
    STOPWORDS,
    fold_text,
    normalize_tag,
    tag_candidate,
    tokenize,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Sözleşme İmza", "sozlesme imza"),
        ("ılık", "ilik"),
        ("Café Crème", "cafe creme"),
        ("PLAIN", "plain"),
    ],
)
def test_fold_text_lowercases_and_strips_marks(raw: str, expected: str) -> None:
    assert fold_text(raw) == expected


def test_tokenize_splits_on_non_alphanumerics() -> None:
    assert tokenize("Send-to_Slack, now!") == ["send", "to", "slack", "now"]


@pytest.mark.parametrize("raw", [None, "", "--__!!"])
def test_tokenize_empty_inputs(raw: str | None) -> None:
    assert tokenize(raw) == []


def test_tokenize_keeps_digits_and_folds() -> None:
    assert tokenize("Ödeme v2 → GPT4") == ["odeme", "v2", "gpt4"]


@pytest.mark.parametrize(
    ("node_type", "expected"),
    [
        ("n8n-nodes-base.httpRequest", "http Request"),
        ("@n8n/n8n-nodes-langchain.lmChatOpenAi", "lm Chat Open Ai"),
        ("n8n-nodes-community.my-custom_node", "my custom node"),
        ("vendor.package.someThing", "vendor.package.some Thing"),
    ],
)
def test_normalize_tag(node_type: str, expected: str) -> None:
    assert normalize_tag(node_type) == expected


@pytest.mark.parametrize(
    ("node_type", "expected"),
    [
        ("n8n-nodes-base.httpRequest", "http request"),
        ("n8n-nodes-base.googleSheets", "google sheets"),
        ("n8n-nodes-base.stickyNote", "sticky note"),
        ("vendor.package.some_thing", "some thing"),
        ("n8n-nodes-base.slack", "slack"),
    ],
)
def test_tag_candidate_uses_last_segment(node_type: str, expected: str) -> None:
    assert tag_candidate(node_type) == expected


def test_stopwords_cover_generic_automation_terms() -> None:
    assert {"webhook", "workflow", "http", "the"} <= STOPWORDS
    assert "slack" not in STOPWORDS
