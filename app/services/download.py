from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator
from urllib.parse import quote

from .errors import PermissionDenied, TypeConflict, translate_os_error
from .paths import PathResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadTarget:
    path: Path
    size: int
    filename: str


def content_disposition(filename: str) -> str:
    return f"attachment; filename*=UTF-8''{quote(filename, safe='')}"


def prepare_download(resolver: PathResolver, raw_path: str) -> DownloadTarget:
    target = resolver.canonical_raw(raw_path)
    resolved = resolver.require(target)
    if resolved.is_directory:
        raise TypeConflict('Cannot download a directory')
    try:
        size = os.stat(target).st_size
    except OSError as exc:
        raise translate_os_error(exc, resolver.display_path(target)) from exc
    if not os.access(target, os.R_OK):
        raise PermissionDenied(f'Permission denied: {resolver.display_path(target)}')
    return DownloadTarget(path=target, size=size, filename=target.name)


def iter_file(path: Path, chunk_size: int) -> Iterator[bytes]:
    """Yield the file in chunks.

    Headers are already sent once the first chunk goes out, so a read error
    only ends the stream early.
    """
    try:
        with path.open('rb') as f:
            while chunk := f.read(chunk_size):
                yield chunk
    except OSError as exc:
        logger.error('Error streaming file %s: %s', path.name, exc)
