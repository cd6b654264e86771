from __future__ import annotations

import os

import pytest

from app.services import download
from app.services.errors import NotFound, PathTraversalRejected, TypeConflict
from app.services.paths import PathResolver


def test_content_disposition_is_rfc5987_encoded():
    header = download.content_disposition('my report ü.pdf')

    assert header == "attachment; filename*=UTF-8''my%20report%20%C3%BC.pdf"


def test_prepare_download_reports_size_and_name(tmp_path):
    (tmp_path / 'docs').mkdir()
    (tmp_path / 'docs' / 'a.txt').write_bytes(b'12345')

    target = download.prepare_download(PathResolver(str(tmp_path)), '/docs/a.txt')

    assert target.path == tmp_path / 'docs' / 'a.txt'
    assert target.size == 5
    assert target.filename == 'a.txt'


def test_prepare_download_rejects_directory(tmp_path):
    (tmp_path / 'docs').mkdir()

    with pytest.raises(TypeConflict):
        download.prepare_download(PathResolver(str(tmp_path)), 'docs')


def test_prepare_download_rejects_missing_file(tmp_path):
    with pytest.raises(NotFound):
        download.prepare_download(PathResolver(str(tmp_path)), 'missing.txt')


def test_prepare_download_rejects_traversal(tmp_path):
    with pytest.raises(PathTraversalRejected):
        download.prepare_download(PathResolver(str(tmp_path)), '../../etc/passwd')


def test_iter_file_streams_in_chunks(tmp_path):
    (tmp_path / 'data.bin').write_bytes(b'a' * 10)

    chunks = list(download.iter_file(tmp_path / 'data.bin', 4))

    assert chunks == [b'aaaa', b'aaaa', b'aa']


def test_iter_file_logs_and_stops_on_read_error(tmp_path, caplog):
    chunks = list(download.iter_file(tmp_path / 'vanished.bin', 4))

    assert chunks == []
    assert 'Error streaming file vanished.bin' in caplog.text


def test_prepare_download_rejects_symlink_leaving_root(tmp_path):
    root = tmp_path / 'root'
    root.mkdir()
    (tmp_path / 'secret.txt').write_text('outside')
    os.symlink('../secret.txt', root / 'link')

    with pytest.raises(PathTraversalRejected):
        download.prepare_download(PathResolver(str(root)), '/link')
