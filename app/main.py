from collections.abc import Iterable

from fastapi import FastAPI

from app.notices.api import api_router
from app.notices.core.config import settings
from app.notices.core.errors import setup_exception_handlers
from app.notices.core.logging import configure_logging
from app.notices.middleware.observability import ObservabilityMiddleware
from app.notices.middleware.trace import TraceIdMiddleware
from app.notices.services.notice import NoticeConfig
from app.notices.services.registry import NoticeRegistry, load_notice_file
from app.notices.services.renderer import JinjaNoticeRenderer


def build_notice_registry(notices: Iterable[NoticeConfig] | None = None) -> NoticeRegistry:
    registry = NoticeRegistry()
    if settings.NOTICES_FILE:
        registry.register_many(load_notice_file(settings.NOTICES_FILE))
    if notices:
        registry.register_many(notices)
    return registry


def create_app(notices: Iterable[NoticeConfig] | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.state.notice_registry = build_notice_registry(notices)
    app.state.notice_renderer = JinjaNoticeRenderer()
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
