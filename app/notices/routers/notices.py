from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse

from app.notices.core.context import Actor, resolve_screen
from app.notices.core.deps import get_notice_registry, require_actor
from app.notices.db.session import get_db
from app.notices.services.authorization import CapabilityAuthorizer
from app.notices.services.nonces import JwtRequestVerifier
from app.notices.services.notice import DismissRequest, NoticeController
from app.notices.services.registry import NoticeRegistry
from app.notices.services.state_store import SqlStateStore

router = APIRouter()


def _first(form_data: dict[str, list[str]], key: str) -> str | None:
    values = form_data.get(key)
    return values[0] if values else None


def get_notice_controllers(
    request: Request,
    registry: NoticeRegistry = Depends(get_notice_registry),
    db=Depends(get_db),
) -> list[NoticeController]:
    cache = getattr(request.state, "capability_cache", None)
    if cache is None:
        cache = {}
        request.state.capability_cache = cache
    return registry.bind(
        authorizer=CapabilityAuthorizer(db, cache=cache),
        state_store=SqlStateStore(db),
        verifier=JwtRequestVerifier(),
        renderer=request.app.state.notice_renderer,
    )


@router.get(
    "/notices",
    response_class=HTMLResponse,
    summary="Render admin notices",
    description="Markup for every notice the caller may see on the requested screen.",
)
def render_notices(
    request: Request,
    actor: Actor = Depends(require_actor),
    controllers: list[NoticeController] = Depends(get_notice_controllers),
):
    screen = resolve_screen(request)
    return HTMLResponse(NoticeRegistry.render_all(controllers, actor, screen))


@router.post(
    "/admin-ajax",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss a notice",
    description="Form-encoded id/action/nonce. Requests that match no notice are ignored.",
)
async def admin_ajax(
    request: Request,
    actor: Actor = Depends(require_actor),
    controllers: list[NoticeController] = Depends(get_notice_controllers),
):
    raw_body = (await request.body()).decode("utf-8", errors="replace")
    form_data = parse_qs(raw_body)
    dismiss_request = DismissRequest(
        action=_first(form_data, "action"),
        notice_id=_first(form_data, "id"),
        nonce=_first(form_data, "nonce"),
        actor=actor,
    )
    NoticeRegistry.dispatch_dismiss(controllers, dismiss_request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
