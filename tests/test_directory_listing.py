from __future__ import annotations

import os
from dataclasses import dataclass

import pytest

from app.schemas import FileEntry
from app.services import listing
from app.services.errors import NotFound, PathTraversalRejected, TypeConflict
from app.services.paths import PathResolver


@dataclass
class _Usage:
    total: int
    used: int
    free: int


def test_list_directory_returns_every_child_with_volume_stats(tmp_path):
    (tmp_path / 'a.txt').write_text('abc')
    (tmp_path / 'b').mkdir()
    (tmp_path / 'c.bin').write_bytes(b'\x00' * 10)

    data = listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/'))

    assert len(data.entries) == 3
    assert data.total_space_bytes > 0
    assert data.free_space_bytes <= data.total_space_bytes
    by_name = {e.name: e for e in data.entries}
    assert by_name['a.txt'].size == 3
    assert by_name['a.txt'].is_directory is False
    assert by_name['b'].is_directory is True
    assert all(e.path == '/' for e in data.entries)
    assert by_name['c.bin'].modified_at > 0


def test_list_directory_is_not_recursive(tmp_path):
    (tmp_path / 'sub' / 'deep').mkdir(parents=True)
    (tmp_path / 'sub' / 'deep' / 'x.txt').write_text('x')

    data = listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/', name='sub'))

    assert [e.name for e in data.entries] == ['deep']
    assert data.entries[0].path == '/sub'


def test_list_directory_keeps_entry_when_metadata_fails(tmp_path):
    (tmp_path / 'ok.txt').write_text('ok')
    os.symlink(tmp_path / 'gone', tmp_path / 'dangling')

    data = listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/'))

    by_name = {e.name: e for e in data.entries}
    assert len(data.entries) == 2
    assert by_name['dangling'].size == 0
    assert by_name['dangling'].modified_at == 0
    assert by_name['ok.txt'].size == 2


def test_list_directory_uses_volume_statistics(tmp_path, monkeypatch):
    monkeypatch.setattr(listing.psutil, 'disk_usage', lambda _: _Usage(total=64 * 1024**3, used=20 * 1024**3, free=44 * 1024**3))

    data = listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/'))

    assert data.entries == []
    assert data.total_space_bytes == 64 * 1024**3
    assert data.free_space_bytes == 44 * 1024**3


def test_volume_failure_reports_zero_space(tmp_path, monkeypatch):
    def _fail(_path):
        raise OSError('statfs failed')

    monkeypatch.setattr(listing.psutil, 'disk_usage', _fail)

    data = listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/'))

    assert data.total_space_bytes == 0
    assert data.free_space_bytes == 0


def test_list_missing_directory_is_not_found(tmp_path):
    with pytest.raises(NotFound):
        listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/', name='missing'))


def test_list_file_is_rejected(tmp_path):
    (tmp_path / 'f.txt').write_text('x')

    with pytest.raises(TypeConflict):
        listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/', name='f.txt'))


def test_list_traversal_is_rejected(tmp_path):
    with pytest.raises(PathTraversalRejected):
        listing.list_directory(PathResolver(str(tmp_path)), FileEntry(path='/../../etc'))
