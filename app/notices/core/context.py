from dataclasses import dataclass

from fastapi import Request

from app.notices.core.config import settings

SCREEN_HEADER = "X-Admin-Screen"


@dataclass(frozen=True)
class Actor:
    id: str
    role: str | None = None
    username: str | None = None


def build_actor(*, user_id: str, role: str | None, username: str | None = None) -> Actor:
    return Actor(id=str(user_id), role=role, username=username)


def resolve_screen(request: Request) -> str:
    """Return the admin screen the caller is looking at."""
    screen = request.query_params.get("screen") or request.headers.get(SCREEN_HEADER)
    return (screen or settings.DEFAULT_SCREEN).strip()
