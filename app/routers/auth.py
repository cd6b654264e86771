from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from ..config import settings
from ..db import find_active_user, get_db
from ..schemas import ApiResponse, LoginRequest, TokenResponse
from ..security import ACCESS_COOKIE, CSRF_COOKIE, create_access_token, new_csrf_token, verify_password

router = APIRouter(prefix='/api/auth', tags=['auth'])
logger = logging.getLogger(__name__)


@router.post('/login', response_model=TokenResponse)
def login(payload: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = find_active_user(db, payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning('Failed login for %s', payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid credentials')

    token = create_access_token(user.username)
    max_age = settings.jwt_expire_minutes * 60
    is_https = request.url.scheme == 'https'
    response.set_cookie(ACCESS_COOKIE, token, httponly=True, secure=is_https, samesite='strict', max_age=max_age)
    response.set_cookie(CSRF_COOKIE, new_csrf_token(), httponly=False, secure=is_https, samesite='strict', max_age=max_age)
    return TokenResponse(access_token=token)


@router.post('/logout')
def logout(response: Response):
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(CSRF_COOKIE)
    return ApiResponse(ok=True, message='Logged out')
