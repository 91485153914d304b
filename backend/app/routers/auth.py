from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.config import (
    jwt_refresh_secret,
    jwt_refresh_ttl_days,
    jwt_secret,
    jwt_ttl_min,
)
from backend.app.core.security import REFRESH, decode_jwt, issue_jwt
from backend.app.deps import get_current_user_optional, settings
from backend.app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserPublic,
)
from backend.core.db.session import get_db
from backend.core.enums import Role
from backend.core.repos.factory import get_refresh_tokens_repo, get_users_repo
from backend.core.security.passwords import hash_password, verify_password


router = APIRouter()
logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _access_token(user_id: int, username: str, role: str) -> str:
    return issue_jwt(user_id=user_id, username=username, role=role, ttl_seconds=jwt_ttl_min() * 60, secret=jwt_secret())


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
):
    auth_cfg = settings.section("auth")
    repo = get_users_repo(session=db)
    caller_is_admin = (current_user or {}).get("role") == Role.ADMIN.value
    # Anyone may create the first account (bootstrap admin)
    if not caller_is_admin and repo.count() > 0:
        if not bool(auth_cfg.get("allow_open_registration", False)):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admins only")
        if payload.role is not Role.STAFF:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admins only")

    if repo.get_by_username(payload.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    algo = auth_cfg.get("password_algo", "bcrypt")
    try:
        user = repo.create(
            {
                "username": payload.username,
                "role": payload.role.value,
                "password_hash": hash_password(payload.password, algo),
                "password_algo": algo,
            }
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    logger.info("user.create id=%s role=%s", user.id, user.role)
    return user


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = get_users_repo(session=db).get_by_username(payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("auth.login_failed username=%s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    ttl_days = jwt_refresh_ttl_days()
    token = _access_token(user.id, user.username, user.role)
    refresh_token = issue_jwt(
        user_id=user.id,
        username=user.username,
        role=user.role,
        ttl_seconds=ttl_days * 24 * 3600,
        secret=jwt_refresh_secret(),
        token_type=REFRESH,
    )
    get_refresh_tokens_repo(session=db).create(
        token=refresh_token,
        user_id=user.id,
        expires=datetime.now(timezone.utc) + timedelta(days=ttl_days),
    )
    logger.info("auth.login user_id=%s role=%s", user.id, user.role)
    return LoginResponse(token=token, refresh_token=refresh_token, role=user.role)


@router.post("/refresh", response_model=RefreshResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    if not payload.refresh_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Refresh token missing")

    repo = get_refresh_tokens_repo(session=db)
    stored = repo.get_by_token(payload.refresh_token)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    if _as_utc(stored.expires) < datetime.now(timezone.utc):
        repo.delete(stored)
        db.commit()
        logger.info("auth.refresh_expired user_id=%s", stored.user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token expired")

    try:
        decoded = decode_jwt(payload.refresh_token, secret=jwt_refresh_secret(), token_type=REFRESH)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = get_users_repo(session=db).get(int(decoded["sub"]))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return RefreshResponse(token=_access_token(user.id, user.username, user.role))
