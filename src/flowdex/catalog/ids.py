"""Opaque, URL-safe workflow identifiers derived from corpus-relative paths."""

from __future__ import annotations
import base64
import binascii
import os
import re
from pathlib import Path, PurePosixPath
from flowdex.catalog.errors import InvalidWorkflowIdError


_WORKFLOW_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+={0,2}$")


def encode_workflow_id(relative_path: str) -> str:
    """Return the unpadded base64url encoding of ``relative_path``."""
    encoded = base64.urlsafe_b64encode(relative_path.encode("utf-8"))
    return encoded.decode("ascii").rstrip("=")


def decode_workflow_id(workflow_id: str) -> str:
    """Decode ``workflow_id`` back into the relative path it was built from.

    Both padded and unpadded identifiers are accepted. Anything outside the
    base64url alphabet, or a payload that is not UTF-8, raises
    :class:`InvalidWorkflowIdError`.
    """
    candidate = workflow_id.strip() if isinstance(workflow_id, str) else ""
    if not candidate or not _WORKFLOW_ID_PATTERN.fullmatch(candidate):
        raise InvalidWorkflowIdError(str(workflow_id))
    stripped = candidate.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise InvalidWorkflowIdError(workflow_id) from exc


def resolve_workflow_path(root: Path | str, workflow_id: str) -> Path:
    """Resolve ``workflow_id`` to a file path that stays inside ``root``.

    The check runs before any filesystem read so crafted ids that decode to
    ``../`` sequences, absolute paths or NUL bytes are rejected outright.
    """
    relative_path = decode_workflow_id(workflow_id)
    if not relative_path or "\x00" in relative_path:
        raise InvalidWorkflowIdError(workflow_id)
    if PurePosixPath(relative_path).is_absolute() or Path(relative_path).is_absolute():
        raise InvalidWorkflowIdError(workflow_id)

    base = Path(root).resolve()
    full_path = (base / relative_path).resolve()
    if not str(full_path).startswith(str(base) + os.sep):
        raise InvalidWorkflowIdError(workflow_id)
    return full_path


__all__ = ["decode_workflow_id", "encode_workflow_id", "resolve_workflow_path"]
