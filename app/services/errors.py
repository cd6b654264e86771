"""Typed errors raised by the file action engine.

Every error carries a ``kind`` so callers can branch on the failure class and
only flatten it to text when building a response.
"""
from __future__ import annotations

import errno
import shutil

_FATAL_ERRNOS = {errno.EMFILE, errno.ENFILE, errno.ENOMEM}


class FileActionError(Exception):
    kind = 'io_failure'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(FileActionError):
    kind = 'not_found'


class TypeConflict(FileActionError):
    kind = 'type_conflict'


class UnsupportedCombination(FileActionError):
    kind = 'unsupported_combination'


class PermissionDenied(FileActionError):
    kind = 'permission_denied'


class IOFailure(FileActionError):
    kind = 'io_failure'


class PathTraversalRejected(FileActionError):
    kind = 'path_traversal_rejected'


def translate_os_error(exc: OSError, display: str | None = None) -> FileActionError:
    """Map an ``OSError`` onto the error taxonomy.

    Descriptor and memory exhaustion are process level conditions, so the
    original exception is re-raised instead of being translated.
    """
    if exc.errno in _FATAL_ERRNOS:
        raise exc
    if isinstance(exc, shutil.SameFileError):
        return UnsupportedCombination('Source and target are the same file')
    if isinstance(exc, shutil.Error):
        failed = exc.args[0] if exc.args and isinstance(exc.args[0], list) else []
        return IOFailure(f'Copy incomplete, {len(failed)} entries failed')

    subject = display or exc.filename or ''
    reason = exc.strerror or str(exc)
    message = f'{reason}: {subject}' if subject else reason

    if isinstance(exc, FileNotFoundError):
        return NotFound(message)
    if isinstance(exc, PermissionError):
        return PermissionDenied(message)
    if isinstance(exc, (NotADirectoryError, IsADirectoryError, FileExistsError)):
        return TypeConflict(message)
    return IOFailure(message)
