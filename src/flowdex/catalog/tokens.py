"""Frequency-ranked search tokens for a workflow."""

from __future__ import annotations
from collections.abc import Iterable, Sequence
from flowdex.catalog.documents import WorkflowDocument
from flowdex.catalog.text import STOPWORDS, tokenize


MAX_SEARCH_TOKENS = 64
MIN_TOKEN_LENGTH = 3


def _searchable_text(
    document: WorkflowDocument,
    *,
    relative_path: str,
    tags: Sequence[str],
    credentials: Sequence[str],
    node_types: Sequence[str],
) -> Iterable[str | None]:
    yield relative_path
    yield document.name
    yield " ".join(tags)
    yield " ".join(credentials)
    yield " ".join(node_types)
    for node in document.nodes:
        yield node.name
        yield node.notes
        if node.is_sticky_note:
            yield node.sticky_content
        yield node.url
        for credential in node.credentials:
            yield credential.name


def build_search_tokens(
    document: WorkflowDocument,
    *,
    relative_path: str,
    tags: Sequence[str],
    credentials: Sequence[str],
    node_types: Sequence[str],
    limit: int = MAX_SEARCH_TOKENS,
) -> tuple[str, ...]:
    """Return up to ``limit`` tokens ordered by descending frequency.

    Ties keep the order in which tokens were first seen.
    """
    frequencies: dict[str, int] = {}
    for text in _searchable_text(
        document,
        relative_path=relative_path,
        tags=tags,
        credentials=credentials,
        node_types=node_types,
    ):
        for token in tokenize(text):
            if len(token) < MIN_TOKEN_LENGTH or token in STOPWORDS:
                continue
            frequencies[token] = frequencies.get(token, 0) + 1

    ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
    return tuple(token for token, _ in ranked[:limit])


__all__ = ["MAX_SEARCH_TOKENS", "MIN_TOKEN_LENGTH", "build_search_tokens"]
