"""Process-wide notice registrations and per-request dispatch.

Notices are registered once at start-up. For every request the registry binds
them to request-scoped collaborators and fans render passes and dismiss
requests out to all of them, in registration order.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter

from app.notices.core.context import Actor
from app.notices.core.metrics import metrics
from app.notices.schemas.notices import NoticeDefinition
from app.notices.services.notice import DismissRequest, NoticeConfig, NoticeController
from app.notices.services.ports import Authorizer, NoticeRenderer, RequestVerifier, StateStore

logger = logging.getLogger("notices.registry")

_definitions_adapter = TypeAdapter(list[NoticeDefinition])


class NoticeRegistry:
    def __init__(self, configs: Iterable[NoticeConfig] | None = None):
        self._configs: list[NoticeConfig] = []
        if configs:
            self.register_many(configs)

    def register(self, config: NoticeConfig) -> NoticeConfig:
        if not config.enabled:
            logger.warning("Notice %r registered without id or content; it will never render", config.id)
        self._configs.append(config)
        return config

    def register_many(self, configs: Iterable[NoticeConfig]) -> None:
        for config in configs:
            self.register(config)

    @property
    def configs(self) -> tuple[NoticeConfig, ...]:
        return tuple(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def bind(
        self,
        *,
        authorizer: Authorizer,
        state_store: StateStore,
        verifier: RequestVerifier,
        renderer: NoticeRenderer,
    ) -> list[NoticeController]:
        return [
            NoticeController(
                config,
                authorizer=authorizer,
                state_store=state_store,
                verifier=verifier,
                renderer=renderer,
            )
            for config in self._configs
        ]

    @staticmethod
    def render_all(controllers: Iterable[NoticeController], actor: Actor, context: str | None) -> str:
        chunks = [controller.render(actor, context) for controller in controllers]
        rendered = [chunk for chunk in chunks if chunk]
        metrics.increment_notices_rendered(len(rendered))
        return "\n".join(rendered)

    @staticmethod
    def dispatch_dismiss(controllers: Iterable[NoticeController], request: DismissRequest) -> None:
        for controller in controllers:
            controller.handle_dismiss_request(request)


def load_notice_file(path: str | Path) -> list[NoticeConfig]:
    """Read notice definitions from a JSON array."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    definitions = _definitions_adapter.validate_python(raw)
    return [definition.to_config() for definition in definitions]
