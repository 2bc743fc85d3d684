"""Backend entrypoint package for the Flowdex FastAPI service."""

from fastapi import FastAPI
from flowdex_backend.app import app, create_app


__all__ = ["app", "create_app", "get_app"]


def get_app() -> FastAPI:
    """Return the module-level FastAPI application for deployment entrypoints."""
    return app
