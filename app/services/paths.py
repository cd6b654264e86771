from __future__ import annotations

import os
import posixpath
import stat
from dataclasses import dataclass
from pathlib import Path

from ..schemas import FileEntry
from .errors import NotFound, PathTraversalRejected, TypeConflict, translate_os_error


def _inside(base: str, candidate: str) -> bool:
    return candidate == base or candidate.startswith(base.rstrip('/') + '/')


def validate_path(requested_path: str, device_mountpoint: str, follow_symlinks: bool = True) -> Path:
    """Return ``requested_path`` as an absolute path under ``device_mountpoint``.

    ``..`` components are resolved lexically first, so an escape is rejected
    before the filesystem is touched. Symlinks are then resolved and must stay
    under the root too; with ``follow_symlinks`` off only the parent directory
    is resolved, so a link itself can still be removed or renamed.
    """
    if '\x00' in requested_path:
        raise PathTraversalRejected('Invalid path: embedded null byte')

    base = posixpath.normpath(os.path.abspath(device_mountpoint))
    candidate = posixpath.normpath(posixpath.join(base, requested_path.lstrip('/')))
    if not _inside(base, candidate):
        raise PathTraversalRejected(f'Path traversal detected: {requested_path}')

    if candidate != base:
        real_base = os.path.realpath(base)
        checked = candidate if follow_symlinks else posixpath.dirname(candidate)
        if not _inside(real_base, os.path.realpath(checked)):
            raise PathTraversalRejected(f'Path traversal detected: {requested_path}')
    return Path(candidate)


def join_entry(entry: FileEntry) -> str:
    joined = f'{entry.path}/{entry.name}' if entry.name else entry.path
    return joined or '/'


@dataclass(frozen=True)
class ResolvedPath:
    path: Path
    is_directory: bool
    exists: bool


@dataclass(frozen=True)
class ResolvedPair:
    source: ResolvedPath
    target: ResolvedPath


class PathResolver:
    def __init__(self, root: str):
        self.root = Path(posixpath.normpath(os.path.abspath(root)))

    def canonical(self, entry: FileEntry, follow_symlinks: bool = True) -> Path:
        return validate_path(join_entry(entry), str(self.root), follow_symlinks)

    def canonical_raw(self, raw: str) -> Path:
        return validate_path(raw, str(self.root))

    def display_path(self, path: Path) -> str:
        rel = path.relative_to(self.root).as_posix()
        return '/' if rel == '.' else '/' + rel

    def probe(self, path: Path) -> ResolvedPath:
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return ResolvedPath(path, False, False)
        except OSError as exc:
            raise translate_os_error(exc, self.display_path(path)) from exc
        return ResolvedPath(path, stat.S_ISDIR(st.st_mode), True)

    def require(self, path: Path) -> ResolvedPath:
        resolved = self.probe(path)
        if not resolved.exists:
            raise NotFound(f"'{self.display_path(path)}' does not exist")
        return resolved

    def classify(self, entry: FileEntry) -> ResolvedPath:
        return self.require(self.canonical(entry))

    def resolve_pair(self, source: FileEntry, target: FileEntry, follow_source: bool = True) -> ResolvedPair:
        source_path = self.canonical(source, follow_source)
        target_path = self.canonical(target)

        src = self.require(source_path)
        dst = self.probe(target_path)
        if dst.exists:
            if src.is_directory and not dst.is_directory:
                raise TypeConflict(
                    f"Target '{self.display_path(target_path)}' is a file, "
                    f"cannot overwrite a file with the directory '{self.display_path(source_path)}'"
                )
            return ResolvedPair(src, dst)
        return ResolvedPair(src, ResolvedPath(target_path, src.is_directory, False))
