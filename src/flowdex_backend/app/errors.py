"""Helpers translating catalog failures into HTTP errors."""

from __future__ import annotations
from typing import NoReturn
from fastapi import HTTPException, status


def raise_bad_request(detail: str, exc: Exception) -> NoReturn:
    """Raise a 400 for client input that can never succeed."""
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc


def raise_not_found(detail: str, exc: Exception) -> NoReturn:
    """Raise a 404 for a missing workflow."""
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail) from exc


def raise_unprocessable(detail: str, exc: Exception) -> NoReturn:
    """Raise a 422 for a stored workflow that cannot be decoded."""
    raise HTTPException(status_code=422, detail=detail) from exc


def raise_unavailable(detail: str, exc: Exception) -> NoReturn:
    """Raise a 503 when the catalog cannot be built in time."""
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail
    ) from exc


__all__ = [
    "raise_bad_request",
    "raise_not_found",
    "raise_unavailable",
    "raise_unprocessable",
]
