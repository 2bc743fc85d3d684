"""Keyword search over catalog snapshots.

Ranking runs in two stages. :func:`relevance_score` measures how well a
workflow matches the query tokens and returns ``None`` when nothing matched.
:func:`heuristic_adjustment` then nudges surviving candidates by how easy they
are to install and maintain; the adjustments are plain callables so callers
can swap the policy.
"""

from __future__ import annotations
from collections.abc import Callable, Iterable, Sequence
from flowdex.catalog.models import CatalogWorkflow, Complexity, ScoredWorkflow
from flowdex.catalog.text import fold_text, tokenize


NAME_WEIGHT = 10
TAG_WEIGHT = 6
DESCRIPTION_WEIGHT = 3
SEARCH_TOKEN_WEIGHT = 4
EMPTY_QUERY_SCORE = 1
MAX_CREDENTIAL_PENALTY = 6

Heuristic = Callable[[CatalogWorkflow], int]


def _complexity_adjustment(workflow: CatalogWorkflow) -> int:
    if workflow.complexity is Complexity.LOW:
        return 2
    if workflow.complexity is Complexity.HIGH:
        return -4
    return 0


def _credential_penalty(workflow: CatalogWorkflow) -> int:
    return -min(MAX_CREDENTIAL_PENALTY, len(workflow.credentials))


def _webhook_bonus(workflow: CatalogWorkflow) -> int:
    return 2 if workflow.has_node_type("webhook") else 0


def _schedule_bonus(workflow: CatalogWorkflow) -> int:
    return 1 if workflow.has_node_type("schedule", "cron") else 0


def _http_penalty(workflow: CatalogWorkflow) -> int:
    return -2 if workflow.has_node_type("http") else 0


def _code_penalty(workflow: CatalogWorkflow) -> int:
    return -4 if workflow.has_node_type("code", "function") else 0


DEFAULT_HEURISTICS: tuple[Heuristic, ...] = (
    _complexity_adjustment,
    _credential_penalty,
    _webhook_bonus,
    _schedule_bonus,
    _http_penalty,
    _code_penalty,
)


def relevance_score(workflow: CatalogWorkflow, tokens: Sequence[str]) -> int | None:
    """Return the lexical score of ``workflow`` for ``tokens``.

    An empty token list scores every workflow the same. ``None`` means no
    token matched any field and the workflow is not a candidate.
    """
    if not tokens:
        return EMPTY_QUERY_SCORE

    name = fold_text(workflow.name)
    description = fold_text(workflow.description)
    tags = [fold_text(tag) for tag in workflow.tags]

    score = 0
    matched = False
    for token in tokens:
        if token in name:
            score += NAME_WEIGHT
            matched = True
        if any(token in tag for tag in tags):
            score += TAG_WEIGHT
            matched = True
        if token in description:
            score += DESCRIPTION_WEIGHT
            matched = True
        if any(token in search_token for search_token in workflow.search_tokens):
            score += SEARCH_TOKEN_WEIGHT
            matched = True
    return score if matched else None


def heuristic_adjustment(
    workflow: CatalogWorkflow, heuristics: Iterable[Heuristic] = DEFAULT_HEURISTICS
) -> int:
    """Return the query-independent score adjustment for ``workflow``."""
    return sum(heuristic(workflow) for heuristic in heuristics)


def has_required_tags(workflow: CatalogWorkflow, required_tags: Sequence[str]) -> bool:
    """Return whether every required tag is contained in one of the workflow tags."""
    tags = [fold_text(tag) for tag in workflow.tags]
    return all(any(required in tag for tag in tags) for required in required_tags)


def normalize_required_tags(required_tags: Iterable[str]) -> list[str]:
    """Fold and trim required tags, dropping blank entries."""
    normalized = (fold_text(str(tag)).strip() for tag in required_tags)
    return [tag for tag in normalized if tag]


def search(
    workflows: Iterable[CatalogWorkflow],
    query: str,
    *,
    limit: int = 10,
    required_tags: Iterable[str] = (),
    heuristics: Sequence[Heuristic] = DEFAULT_HEURISTICS,
) -> list[ScoredWorkflow]:
    """Rank ``workflows`` for ``query`` and return at most ``limit`` hits.

    Ties keep the order of ``workflows``, which for a catalog snapshot is the
    crawl order.
    """
    if limit <= 0:
        return []
    tokens = tokenize(query)
    required = normalize_required_tags(required_tags)

    scored: list[ScoredWorkflow] = []
    for workflow in workflows:
        if not has_required_tags(workflow, required):
            continue
        relevance = relevance_score(workflow, tokens)
        if relevance is None:
            continue
        total = relevance + heuristic_adjustment(workflow, heuristics)
        scored.append(ScoredWorkflow(workflow=workflow, score=total))

    # list.sort is stable, so equal scores stay in crawl order.
    scored.sort(key=lambda hit: hit.score, reverse=True)
    return scored[:limit]


__all__ = [
    "DEFAULT_HEURISTICS",
    "DESCRIPTION_WEIGHT",
    "EMPTY_QUERY_SCORE",
    "NAME_WEIGHT",
    "SEARCH_TOKEN_WEIGHT",
    "TAG_WEIGHT",
    "Heuristic",
    "has_required_tags",
    "heuristic_adjustment",
    "normalize_required_tags",
    "relevance_score",
    "search",
]
