from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from app.notices.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

NONCE_TOKEN_TYPE = "nonce"


class TokenData(BaseModel):
    sub: str
    role: str | None = None
    username: str
    is_active: bool = True


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_user_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {
            "sub": str(user.id),
            "role": user.role,
            "username": user.username,
            "is_active": user.is_active,
        },
        expires_delta=expires_delta,
    )


def create_nonce(nonce_scope: str, actor_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a nonce binding ``nonce_scope`` to ``actor_id``.

    Nonces share the access-token signing key, so they carry a ``typ`` claim
    and an access token can never pass as a nonce.
    """
    return create_access_token(
        {"typ": NONCE_TOKEN_TYPE, "sub": actor_id, "nonce_scope": nonce_scope},
        expires_delta=expires_delta or timedelta(minutes=settings.NONCE_TTL_MINUTES),
    )


def verify_nonce(token: str | None, nonce_scope: str, actor_id: str) -> bool:
    if not token:
        return False
    try:
        payload = decode_token(token)
    except JWTError:
        return False
    return (
        payload.get("typ") == NONCE_TOKEN_TYPE
        and payload.get("nonce_scope") == nonce_scope
        and payload.get("sub") == actor_id
    )
