"""Discover workflow definition files under a corpus root."""

from __future__ import annotations
import logging
import os
from pathlib import Path


logger = logging.getLogger(__name__)

WORKFLOW_FILE_SUFFIX = ".json"


def _is_within(path: Path, root: Path) -> bool:
    return path == root or path.is_relative_to(root)


def list_workflow_files(root: Path | str) -> list[Path]:
    """Return absolute paths of every ``.json`` file below ``root``.

    Entries are visited depth-first with each directory's entries sorted by
    name, so repeated crawls of an unchanged tree yield the same order.
    Symlinks are followed only when their target stays inside ``root``.
    A missing root yields an empty list.
    """
    base = Path(root).resolve()
    if not base.is_dir():
        logger.info("Workflow corpus %s is not a directory; nothing to index.", base)
        return []

    files: list[Path] = []
    visited: set[Path] = set()
    _walk(base, base, files, visited)
    return files


def _walk(directory: Path, base: Path, files: list[Path], visited: set[Path]) -> None:
    real_directory = directory.resolve()
    if real_directory in visited:
        return
    visited.add(real_directory)

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Unable to list workflow directory %s: %s", directory, exc)
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            if entry.is_symlink():
                target = path.resolve()
                if not _is_within(target, base):
                    logger.debug("Skipping symlink %s pointing outside corpus.", path)
                    continue
            if entry.is_dir():
                _walk(path, base, files, visited)
            elif entry.is_file() and entry.name.lower().endswith(WORKFLOW_FILE_SUFFIX):
                files.append(path.absolute())
        except OSError as exc:
            logger.warning("Unable to inspect %s: %s", path, exc)


__all__ = ["WORKFLOW_FILE_SUFFIX", "list_workflow_files"]
