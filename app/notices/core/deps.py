from fastapi import Depends, Request
from jose import JWTError
from pydantic import ValidationError

from app.notices.core.config import settings
from app.notices.core.context import Actor, build_actor
from app.notices.core.error_catalog import AppError, ErrorCatalog
from app.notices.core.security import NONCE_TOKEN_TYPE, TokenData, decode_token, oauth2_scheme
from app.notices.db.session import get_db
from app.notices.repos.users import UserRepository
from app.notices.services.registry import NoticeRegistry


def get_current_token_data(request: Request, token: str | None = Depends(oauth2_scheme)) -> TokenData:
    token = token or request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    if not token:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    try:
        payload = decode_token(token)
        if payload.get("typ") == NONCE_TOKEN_TYPE:
            raise AppError(ErrorCatalog.INVALID_TOKEN)
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def get_current_user(token_data: TokenData = Depends(get_current_token_data), db=Depends(get_db)):
    user_id = token_data.sub
    if not user_id:
        raise AppError(ErrorCatalog.INVALID_TOKEN)

    repo = UserRepository(db)
    user = repo.get_by_id(user_id)
    if user is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    return user


def require_active_user(user=Depends(get_current_user)):
    if not user.is_active:
        raise AppError(ErrorCatalog.USER_INACTIVE)
    return user


def require_actor(request: Request, user=Depends(require_active_user)) -> Actor:
    actor = build_actor(user_id=str(user.id), role=user.role, username=user.username)
    request.state.user_id = actor.id
    return actor


def get_notice_registry(request: Request) -> NoticeRegistry:
    return request.app.state.notice_registry


__all__ = [
    "get_current_token_data",
    "get_current_user",
    "require_active_user",
    "require_actor",
    "get_notice_registry",
]
