from __future__ import annotations

from datetime import datetime, timedelta, timezone
from secrets import token_urlsafe

from jose import JWTError, jwt
from passlib.context import CryptContext
from starlette.requests import HTTPConnection

from .config import settings

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

ACCESS_COOKIE = 'access_token'
CSRF_COOKIE = 'csrf_token'
CSRF_HEADER = 'X-CSRF-Token'


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(subject: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    return jwt.encode({'sub': subject, 'exp': expire}, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError('Invalid token') from exc


def token_from_request(request: HTTPConnection) -> str:
    """Bearer token from the Authorization header, falling back to the session cookie."""
    auth = request.headers.get('Authorization', '')
    if auth.startswith('Bearer '):
        return auth.split(' ', 1)[1].strip()
    return request.cookies.get(ACCESS_COOKIE, '').strip()


def subject_of(token: str) -> str | None:
    if not token:
        return None
    try:
        payload = decode_token(token)
    except ValueError:
        return None
    return payload.get('sub') or None


def new_csrf_token() -> str:
    return token_urlsafe(32)
