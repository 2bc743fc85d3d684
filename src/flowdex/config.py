"""Runtime configuration helpers for Flowdex."""

from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path
from dynaconf import Dynaconf


_DEFAULTS: dict[str, object] = {
    "WORKFLOWS_DIR": "external/n8n-workflows/workflows",
    "INDEX_MAX_WORKERS": None,
    "INDEX_BUILD_TIMEOUT_SECONDS": 60.0,
    "INDEX_MAX_FILE_BYTES": 8 * 1024 * 1024,
    "SEARCH_DEFAULT_LIMIT": 10,
    "SEARCH_MAX_LIMIT": 100,
    "HOST": "0.0.0.0",
    "PORT": 8000,
}


def _build_loader() -> Dynaconf:
    """Create a Dynaconf loader wired to environment variables only."""
    return Dynaconf(
        envvar_prefix="FLOWDEX",
        settings_files=[],  # No config files, env vars only
        load_dotenv=True,
        environments=False,
    )


def _coerce_int(source: Dynaconf, key: str, *, minimum: int) -> int:
    raw = source.get(key, _DEFAULTS[key])
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        msg = f"FLOWDEX_{key} must be an integer."
        raise ValueError(msg) from exc
    if value < minimum:
        msg = f"FLOWDEX_{key} must be at least {minimum}."
        raise ValueError(msg)
    return value


def _normalize_settings(source: Dynaconf) -> Dynaconf:
    """Validate and fill defaults on the raw Dynaconf settings."""
    normalized = Dynaconf(
        envvar_prefix="FLOWDEX",
        settings_files=[],
        load_dotenv=False,
        environments=False,
    )

    workflows_dir = source.get("WORKFLOWS_DIR") or _DEFAULTS["WORKFLOWS_DIR"]
    normalized.set("WORKFLOWS_DIR", str(Path(str(workflows_dir)).resolve()))

    workers_raw = source.get("INDEX_MAX_WORKERS")
    if workers_raw in (None, ""):
        normalized.set("INDEX_MAX_WORKERS", os.cpu_count() or 4)
    else:
        normalized.set(
            "INDEX_MAX_WORKERS", _coerce_int(source, "INDEX_MAX_WORKERS", minimum=1)
        )

    timeout_raw = source.get(
        "INDEX_BUILD_TIMEOUT_SECONDS", _DEFAULTS["INDEX_BUILD_TIMEOUT_SECONDS"]
    )
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError) as exc:
        msg = "FLOWDEX_INDEX_BUILD_TIMEOUT_SECONDS must be a number."
        raise ValueError(msg) from exc
    if timeout <= 0:
        msg = "FLOWDEX_INDEX_BUILD_TIMEOUT_SECONDS must be greater than zero."
        raise ValueError(msg)
    normalized.set("INDEX_BUILD_TIMEOUT_SECONDS", timeout)
    normalized.set(
        "INDEX_MAX_FILE_BYTES",
        _coerce_int(source, "INDEX_MAX_FILE_BYTES", minimum=1),
    )

    default_limit = _coerce_int(source, "SEARCH_DEFAULT_LIMIT", minimum=1)
    max_limit = _coerce_int(source, "SEARCH_MAX_LIMIT", minimum=1)
    if max_limit < default_limit:
        msg = (
            "FLOWDEX_SEARCH_MAX_LIMIT must be greater than or equal to "
            "FLOWDEX_SEARCH_DEFAULT_LIMIT."
        )
        raise ValueError(msg)
    normalized.set("SEARCH_DEFAULT_LIMIT", default_limit)
    normalized.set("SEARCH_MAX_LIMIT", max_limit)

    host = source.get("HOST") or _DEFAULTS["HOST"]
    normalized.set("HOST", str(host))
    normalized.set("PORT", _coerce_int(source, "PORT", minimum=0))

    return normalized


@lru_cache(maxsize=1)
def _load_settings() -> Dynaconf:
    """Load settings once and cache the normalized Dynaconf instance."""
    return _normalize_settings(_build_loader())


def get_settings(*, refresh: bool = False) -> Dynaconf:
    """Return the cached Dynaconf settings, reloading them if requested."""
    if refresh:
        _load_settings.cache_clear()
    return _load_settings()


__all__ = ["get_settings"]
