from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from ..config import settings
from ..deps import get_current_user
from ..schemas import ActionRequest, ActionResult, FileEntry
from ..services.download import content_disposition, iter_file, prepare_download
from ..services.errors import FileActionError
from ..services.file_ops import FileOps
from ..services.results import http_status_for

router = APIRouter(prefix='/api/files', tags=['files'])
ops = FileOps(settings.nas_root)


def _listing(entry: FileEntry) -> dict:
    try:
        listing = ops.list_dir(entry)
    except FileActionError as exc:
        raise HTTPException(status_code=http_status_for(exc), detail=exc.message)
    return {'ok': True, 'data': listing}


@router.get('/list')
def list_files(path: str = Query(default='/'), _=Depends(get_current_user)):
    return _listing(FileEntry(path=path, is_directory=True))


@router.post('/list')
def list_entry(payload: FileEntry, _=Depends(get_current_user)):
    return _listing(payload)


@router.post('/action', response_model=ActionResult)
def run_action(payload: ActionRequest, _=Depends(get_current_user)):
    return ops.execute(payload)


@router.get('/download')
def download(path: str = Query(...), _=Depends(get_current_user)):
    if not path:
        raise HTTPException(status_code=400, detail='Missing path parameter')
    try:
        target = prepare_download(ops.resolver, path)
    except FileActionError as exc:
        raise HTTPException(status_code=http_status_for(exc), detail=exc.message)

    headers = {
        'Content-Disposition': content_disposition(target.filename),
        'Content-Length': str(target.size),
    }
    return StreamingResponse(
        iter_file(target.path, settings.download_chunk_size),
        media_type='application/octet-stream',
        headers=headers,
    )
