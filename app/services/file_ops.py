from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from ..schemas import ActionKind, ActionRequest, ActionResult, DirectoryListing, FileEntry
from . import results
from .errors import FileActionError, IOFailure, NotFound, PermissionDenied, TypeConflict, UnsupportedCombination, translate_os_error
from .listing import list_directory
from .paths import PathResolver

logger = logging.getLogger(__name__)


def _is_within(path: Path, parent: Path) -> bool:
    return path == parent or parent in path.parents


def _copy(resolver: PathResolver, request: ActionRequest) -> str:
    pair = resolver.resolve_pair(request.source, request.target)
    src, dst = pair.source, pair.target

    if src.is_directory:
        if _is_within(dst.path, src.path):
            raise UnsupportedCombination('Cannot copy a directory into itself')
        shutil.copytree(src.path, dst.path, symlinks=True, dirs_exist_ok=True)
        return f'Copied {resolver.display_path(src.path)} to {resolver.display_path(dst.path)}'

    destination = dst.path
    if dst.exists and dst.is_directory:
        destination = dst.path / src.path.name
        if resolver.probe(destination).is_directory:
            raise TypeConflict(f"Target '{resolver.display_path(destination)}' is a directory")
    if destination == src.path:
        raise UnsupportedCombination('Source and target are the same file')

    shutil.copy2(src.path, destination)
    return f'Copied {resolver.display_path(src.path)} to {resolver.display_path(destination)}'


def _move(resolver: PathResolver, request: ActionRequest) -> str:
    pair = resolver.resolve_pair(request.source, request.target, follow_source=False)
    src, dst = pair.source, pair.target
    if src.path == resolver.root:
        raise PermissionDenied('Refusing to move the storage root')

    destination = dst.path
    if dst.exists and dst.is_directory:
        destination = dst.path / src.path.name
    if destination == src.path:
        raise UnsupportedCombination('Source and target are the same')
    if src.is_directory and _is_within(destination, src.path):
        raise UnsupportedCombination('Cannot move a directory into itself')
    if not resolver.probe(destination.parent).is_directory:
        raise NotFound(f"Target directory '{resolver.display_path(destination.parent)}' does not exist")

    existing = resolver.probe(destination)
    if existing.exists:
        if existing.is_directory != src.is_directory:
            kind = 'directory' if existing.is_directory else 'file'
            raise TypeConflict(f"Target '{resolver.display_path(destination)}' is a {kind}")
        if existing.is_directory:
            if any(destination.iterdir()):
                raise IOFailure(f"Directory not empty: {resolver.display_path(destination)}")
            destination.rmdir()

    shutil.move(str(src.path), str(destination))
    return f'Moved {resolver.display_path(src.path)} to {resolver.display_path(destination)}'


def _delete(resolver: PathResolver, request: ActionRequest) -> str:
    path = resolver.canonical(request.source, follow_symlinks=False)
    if path == resolver.root:
        raise PermissionDenied('Refusing to delete the storage root')

    if path.is_symlink():
        path.unlink()
    elif resolver.require(path).is_directory:
        shutil.rmtree(path)
    else:
        path.unlink()
    return f'Deleted {resolver.display_path(path)}'


def _create_directory(resolver: PathResolver, request: ActionRequest) -> str:
    path = resolver.canonical(request.source)
    path.mkdir(parents=True, exist_ok=True)
    return f'Folder {resolver.display_path(path)} created'


_HANDLERS: dict[ActionKind, Callable[[PathResolver, ActionRequest], str]] = {
    ActionKind.COPY: _copy,
    ActionKind.MOVE: _move,
    ActionKind.RENAME: _move,
    ActionKind.DELETE: _delete,
    ActionKind.CREATE_DIRECTORY: _create_directory,
}

_unhandled = set(ActionKind) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f'No handler for action kinds: {sorted(k.value for k in _unhandled)}')


class FileOps:
    def __init__(self, root: str):
        self.resolver = PathResolver(root)
        self.root = self.resolver.root

    def safe_path(self, rel: str) -> Path:
        return self.resolver.canonical_raw(rel)

    def list_dir(self, entry: FileEntry) -> DirectoryListing:
        return list_directory(self.resolver, entry)

    def execute(self, request: ActionRequest) -> ActionResult:
        logger.info('Doing: %s', request.kind.value)
        try:
            try:
                message = _HANDLERS[request.kind](self.resolver, request)
            except OSError as exc:
                raise translate_os_error(exc, self._display(exc.filename)) from exc
        except FileActionError as exc:
            logger.warning('%s failed (%s): %s', request.kind.value, exc.kind, exc.message)
            return results.failure(exc)
        return results.success(message)

    def _display(self, filename) -> str | None:
        if not filename:
            return None
        path = Path(os.fsdecode(filename))
        if _is_within(path, self.root):
            return self.resolver.display_path(path)
        return path.name
