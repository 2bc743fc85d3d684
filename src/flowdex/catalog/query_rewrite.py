"""Deterministic rewrite of free-text requests into catalog keyword queries.

Users describe what they want in plain English or Turkish ("fatura gelince
slack'e yaz"). The rules below add the integration names the catalog actually
indexes and pick a few must-have tags.
"""

from __future__ import annotations
import re
from collections.abc import Iterable
from dataclasses import dataclass, field


MAX_QUERY_FRAGMENTS = 18
MAX_REQUIRED_TAGS = 3
MAX_KEYWORDS = 24

FALLBACK_NOTES = "Fallback rewrite (no LLM): added common integration keywords."


@dataclass(frozen=True, slots=True)
class SynonymRule:
    """Keywords and tags added when ``pattern`` matches the request."""

    pattern: re.Pattern[str]
    keywords: tuple[str, ...]
    tags: tuple[str, ...] = ()


def _rule(
    pattern: str, keywords: Iterable[str], tags: Iterable[str] = ()
) -> SynonymRule:
    return SynonymRule(
        pattern=re.compile(pattern, re.IGNORECASE),
        keywords=tuple(keywords),
        tags=tuple(tags),
    )


SYNONYM_RULES: tuple[SynonymRule, ...] = (
    _rule(
        r"\bfatura\b|\binvoice\b|\bfaturalama\b",
        ["invoice", "billing", "payment"],
        ["invoice"],
    ),
    _rule(
        r"\bsözleşme\b|\bkontrat\b|\bcontract\b|\be-?imza\b|\bimza\b",
        ["contract", "sign", "pdf"],
    ),
    _rule(
        r"\bcrm\b|\blead\b|\bsatış\b|\bfunnel\b", ["crm", "lead", "deal"], ["hubspot"]
    ),
    _rule(r"\bslack\b", ["slack"], ["slack"]),
    _rule(r"\bdiscord\b", ["discord"], ["discord"]),
    _rule(r"\btelegram\b", ["telegram"], ["telegram"]),
    _rule(r"\bwhatsapp\b", ["whatsapp"], ["whatsapp"]),
    _rule(
        r"\bgoogle\s*sheets?\b|\bgsheets?\b|\bsheets?\b",
        ["google sheets"],
        ["google sheets"],
    ),
    _rule(r"\bgmail\b|\bemail\b|\be-?posta\b", ["gmail", "email"], ["gmail"]),
    _rule(
        r"\bcalendar\b|\btakvim\b|\brandevu\b",
        ["google calendar", "calendar"],
        ["google calendar"],
    ),
    _rule(
        r"\bwebhook\b|\bform\b|\btypeform\b|\bform\s*submit\b",
        ["webhook", "form"],
        ["webhook"],
    ),
    _rule(
        r"\bshopify\b|\be-?ticaret\b|\beticaret\b|\becommerce\b",
        ["shopify", "order", "payment"],
        ["shopify"],
    ),
    _rule(
        r"\bwoocommerce\b|\bwoo\b",
        ["woocommerce", "order", "payment"],
        ["woocommerce"],
    ),
    _rule(r"\bstripe\b|\bödeme\b|\bpayment\b", ["stripe", "payment"], ["stripe"]),
    _rule(r"\bnotion\b", ["notion"], ["notion"]),
    _rule(r"\bairtable\b", ["airtable"], ["airtable"]),
    _rule(r"\bzapier\b", ["zapier"]),
    _rule(r"\bheygen\b", ["heygen", "video", "avatar"]),
)


@dataclass(frozen=True, slots=True)
class QueryRewrite:
    """Keyword query and tag filters derived from a user request."""

    query: str
    required_tags: tuple[str, ...] = field(default_factory=tuple)
    keywords: tuple[str, ...] = field(default_factory=tuple)
    notes: str | None = None


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(item.strip() for item in items if item.strip()))


def rewrite_query(query: str) -> QueryRewrite:
    """Expand ``query`` with integration keywords and required tags."""
    text = str(query or "").strip()
    if not text:
        return QueryRewrite(query="", notes="Empty query")

    keywords = [text]
    required_tags: list[str] = []
    for rule in SYNONYM_RULES:
        if not rule.pattern.search(text):
            continue
        keywords.extend(rule.keywords)
        required_tags.extend(rule.tags)

    fragments = _unique(re.sub(r"\s+", " ", keyword) for keyword in keywords)
    compact = " ".join(fragments[:MAX_QUERY_FRAGMENTS])
    return QueryRewrite(
        query=compact or text,
        required_tags=tuple(_unique(required_tags)[:MAX_REQUIRED_TAGS]),
        keywords=tuple(_unique(keywords)[:MAX_KEYWORDS]),
        notes=FALLBACK_NOTES,
    )


__all__ = ["SYNONYM_RULES", "QueryRewrite", "SynonymRule", "rewrite_query"]
