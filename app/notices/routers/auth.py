from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request, Response

from app.notices.core.config import settings
from app.notices.db.session import get_db
from app.notices.schemas.auth import LoginRequest, OAuth2TokenResponse, TokenResponse
from app.notices.services.auth import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login (JSON)",
    description="Login with username or email. The token is also set as a cookie for dashboard pages.",
)
async def login(request: Request, response: Response, payload: LoginRequest, db=Depends(get_db)):
    service = AuthService(db)
    user, token = service.login(payload.username_or_email, payload.password)
    request.state.user_id = str(user.id)
    response.set_cookie(
        settings.ACCESS_TOKEN_COOKIE,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return TokenResponse(access_token=token, trace_id=getattr(request.state, "trace_id", ""))


@router.post(
    "/token",
    response_model=OAuth2TokenResponse,
    summary="OAuth2 Token",
    description="OAuth2 password flow endpoint using form-encoded username/password.",
)
async def oauth2_token(request: Request, db=Depends(get_db)):
    raw_body = (await request.body()).decode()
    form_data = parse_qs(raw_body)
    username = (form_data.get("username") or [""])[0]
    password = (form_data.get("password") or [""])[0]

    service = AuthService(db)
    _, token = service.login(username, password)
    return OAuth2TokenResponse(access_token=token)
