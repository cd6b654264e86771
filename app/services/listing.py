from __future__ import annotations

import logging
import os
from pathlib import Path

import psutil

from ..schemas import DirectoryListing, FileEntry
from .errors import TypeConflict, translate_os_error
from .paths import PathResolver

logger = logging.getLogger(__name__)


def volume_space(path: Path) -> tuple[int, int]:
    """Total and user-available bytes of the volume holding ``path``."""
    try:
        usage = psutil.disk_usage(str(path))
    except OSError as exc:
        logger.warning('Unable to read volume statistics for %s: %s', path, exc)
        return 0, 0
    return usage.total, usage.free


def _entry_for(dir_entry: os.DirEntry, parent: str) -> FileEntry:
    try:
        is_dir = dir_entry.is_dir()
    except OSError:
        is_dir = False
    item = FileEntry(path=parent, name=dir_entry.name, is_directory=is_dir)
    try:
        info = dir_entry.stat()
    except OSError as exc:
        logger.debug('Skipping metadata for %s: %s', dir_entry.name, exc)
        return item
    item.size = info.st_size
    item.modified_at = int(info.st_mtime)
    return item


def list_directory(resolver: PathResolver, entry: FileEntry) -> DirectoryListing:
    resolved = resolver.classify(entry)
    display = resolver.display_path(resolved.path)
    if not resolved.is_directory:
        raise TypeConflict(f"'{display}' is not a directory")

    try:
        with os.scandir(resolved.path) as it:
            entries = [_entry_for(item, display) for item in it]
    except OSError as exc:
        raise translate_os_error(exc, display) from exc

    total, free = volume_space(resolved.path)
    return DirectoryListing(entries=entries, total_space_bytes=total, free_space_bytes=free)
