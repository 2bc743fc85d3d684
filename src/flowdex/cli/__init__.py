"""Command line interface for the Flowdex workflow catalog."""

from __future__ import annotations
from flowdex.cli.main import app, run


__all__ = ["app", "run"]
