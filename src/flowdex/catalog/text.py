"""Text normalization shared by indexing and query parsing."""

from __future__ import annotations
import re
import unicodedata


_TOKEN_SPLIT_RE = re.compile(r"[\W_]+")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
_SEPARATOR_RE = re.compile(r"[-_]")

VENDOR_PREFIXES: tuple[str, ...] = (
    "n8n-nodes-base.",
    "@n8n/n8n-nodes-langchain.",
    "n8n-nodes-langchain.",
    "n8n-nodes-community.",
)
"""Node type prefixes that carry no meaning for catalog tags."""

STOPWORDS: frozenset[str] = frozenset(
    {
        "the",
        "and",
        "for",
        "with",
        "this",
        "that",
        "from",
        "into",
        "your",
        "you",
        "to",
        "of",
        "in",
        "on",
        "or",
        "a",
        "an",
        "is",
        "are",
        "be",
        "as",
        "via",
        "api",
        "url",
        "http",
        "https",
        "request",
        "webhook",
        "trigger",
        "manual",
        "workflow",
        "node",
        "json",
        "set",
        "get",
        "create",
        "update",
        "delete",
        "send",
        "data",
        "true",
        "false",
    }
)
"""Words too common in automation definitions to be useful search tokens."""


def fold_text(text: str) -> str:
    """Lowercase ``text`` and strip diacritics so ``sözleşme`` reads ``sozlesme``."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # Turkish dotless i has no decomposition.
    return stripped.replace("ı", "i")


def tokenize(text: str | None) -> list[str]:
    """Split ``text`` into folded tokens of letters and digits."""
    if not text:
        return []
    return [token for token in _TOKEN_SPLIT_RE.split(fold_text(text)) if token]


def normalize_tag(node_type: str) -> str:
    """Turn a raw node type such as ``n8n-nodes-base.httpRequest`` into words."""
    value = node_type
    for prefix in VENDOR_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix) :]
            break
    value = _CAMEL_BOUNDARY_RE.sub(r"\1 \2", value)
    value = _SEPARATOR_RE.sub(" ", value)
    return value.strip()


def tag_candidate(node_type: str) -> str:
    """Return the lowercase tag derived from the last segment of a node type."""
    return normalize_tag(node_type).split(".")[-1].strip().lower()


__all__ = [
    "STOPWORDS",
    "VENDOR_PREFIXES",
    "fold_text",
    "normalize_tag",
    "tag_candidate",
    "tokenize",
]
