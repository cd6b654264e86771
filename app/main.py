from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from .config import settings
from .db import Base, SessionLocal, User, engine
from .deps import enforce_csrf
from .routers import auth, files
from .security import hash_password

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    'Content-Security-Policy': "default-src 'none'; frame-ancestors 'none'",
    'X-Frame-Options': 'DENY',
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def _parse_cors_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.jwt_secret == 'change-me':
        raise RuntimeError('Refusing to start with insecure default JWT secret. Set JWT_SECRET in .env')

    Path(settings.nas_root).mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        if not db.query(User).first():
            db.add(User(username='admin', password_hash=hash_password('admin12345')))
            db.commit()
            logger.warning('Created default admin user, change its password')
    finally:
        db.close()

    logger.info('Serving files from %s', settings.nas_root)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

cors_origins = _parse_cors_origins(settings.cors_origins)
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Authorization', 'Content-Type', 'X-CSRF-Token'],
    )


def _apply_security_headers(response):
    for key, value in _SECURITY_HEADERS.items():
        response.headers[key] = value
    return response


@app.middleware('http')
async def security_middleware(request: Request, call_next):
    path = request.url.path

    if request.method in {'POST', 'PUT', 'PATCH', 'DELETE'} and path.startswith('/api/') and path != '/api/auth/login':
        try:
            enforce_csrf(request)
        except HTTPException as exc:
            return _apply_security_headers(JSONResponse({'detail': exc.detail}, status_code=exc.status_code))

    response = await call_next(request)
    return _apply_security_headers(response)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    if request.url.path.startswith('/api/'):
        return JSONResponse({'detail': 'Internal server error. Please try again.'}, status_code=500)
    return PlainTextResponse('Unexpected error', status_code=500)


@app.get('/healthz')
def healthz():
    return {'ok': True}


app.include_router(auth.router)
app.include_router(files.router)
