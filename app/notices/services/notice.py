"""Dismissible admin notices.

A notice is configured once at application start (``NoticeConfig``) and bound
to request-scoped collaborators through ``NoticeController``. The controller
decides whether the notice renders for an actor on a given screen and records
dismissals coming back from the dismiss script.

Every failure path is a silent no-op: a misconfigured, unauthorized or
already-dismissed notice renders nothing, and a dismiss request that does not
match this notice (or carries a bad nonce) is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from app.notices.core.context import Actor
from app.notices.core.logging import log_json
from app.notices.core.metrics import metrics
from app.notices.services.ports import Authorizer, NoticeRenderer, RequestVerifier, StateStore

logger = logging.getLogger("notices.controller")

DISMISS_ACTION = "wptrt_dismiss_notice"
DEFAULT_CAPABILITY = "edit_theme_options"
DEFAULT_OPTION_KEY_PREFIX = "wptrt_notice_dismissed"
NONCE_SCOPE_PREFIX = "dismiss_"

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")


class NoticeScope(str, Enum):
    GLOBAL = "global"
    USER = "user"


class NoticeStyle(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def sanitize_key(key: str) -> str:
    """Lower-case ``key`` and drop anything but ``a-z``, ``0-9``, ``_`` and ``-``."""
    return _UNSAFE_KEY_CHARS.sub("", (key or "").lower())


@dataclass(frozen=True)
class NoticeConfig:
    id: str
    content: str
    dismissible: bool = True
    scope: NoticeScope = NoticeScope.GLOBAL
    style: NoticeStyle = NoticeStyle.INFO
    capability: str = DEFAULT_CAPABILITY
    option_key_prefix: str = DEFAULT_OPTION_KEY_PREFIX
    screens: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", self.id or "")
        object.__setattr__(self, "content", self.content or "")
        object.__setattr__(self, "scope", NoticeScope(self.scope))
        object.__setattr__(self, "style", NoticeStyle(self.style))
        object.__setattr__(self, "screens", frozenset(self.screens or ()))

    @property
    def enabled(self) -> bool:
        return bool(self.id) and bool(self.content)

    @property
    def storage_key(self) -> str:
        return f"{self.option_key_prefix}_{sanitize_key(self.id)}"

    @property
    def nonce_scope(self) -> str:
        return f"{NONCE_SCOPE_PREFIX}{self.id}"

    @property
    def css_classes(self) -> str:
        classes = f"notice notice-{self.style.value}"
        if self.dismissible:
            classes += " is-dismissible"
        return classes


@dataclass(frozen=True)
class DismissRequest:
    """A decoded dismiss POST together with the actor who sent it."""

    action: str | None
    notice_id: str | None
    nonce: str | None
    actor: Actor


class NoticeController:
    def __init__(
        self,
        config: NoticeConfig,
        *,
        authorizer: Authorizer,
        state_store: StateStore,
        verifier: RequestVerifier,
        renderer: NoticeRenderer,
    ):
        self.config = config
        self._authorizer = authorizer
        self._state_store = state_store
        self._verifier = verifier
        self._renderer = renderer

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def nonce_scope(self) -> str:
        return self.config.nonce_scope

    def should_render(self, actor: Actor, context: str | None) -> bool:
        if not self.enabled:
            return False
        if not self._authorizer.can(actor, self.config.capability):
            return False
        if not self.is_screen(context):
            return False
        return not self.is_dismissed(actor)

    def is_screen(self, context: str | None) -> bool:
        if not self.config.screens:
            return True
        return context in self.config.screens

    def is_dismissed(self, actor: Actor) -> bool:
        if not self.enabled or not self.config.dismissible:
            return False
        return bool(
            self._state_store.get(
                self.config.storage_key,
                self.config.scope,
                self._scoped_actor_id(actor),
            )
        )

    def render(self, actor: Actor, context: str | None) -> str:
        if not self.should_render(actor, context):
            return ""
        nonce = None
        if self.config.dismissible:
            nonce = self._verifier.mint_token(self.nonce_scope, actor)
        return self._renderer.render(self.config, nonce)

    def handle_dismiss_request(self, request: DismissRequest) -> None:
        if not self.enabled:
            return
        if request.action != DISMISS_ACTION:
            return
        # Every registered notice sees every dismiss request; only the addressed one reacts.
        if request.notice_id != self.config.id:
            return
        if not self._verifier.verify_token(request.nonce or "", self.nonce_scope, request.actor):
            logger.debug("Rejected dismiss request for notice %s: invalid nonce", self.config.id)
            metrics.increment_notice_dismiss_rejected()
            return
        self._dismiss(request.actor)

    def _dismiss(self, actor: Actor) -> None:
        actor_id = self._scoped_actor_id(actor)
        self._state_store.set(self.config.storage_key, self.config.scope, actor_id, True)
        metrics.increment_notice_dismissed(self.config.scope.value)
        log_json(
            logger,
            {
                "event": "notice_dismissed",
                "notice_id": self.config.id,
                "storage_key": self.config.storage_key,
                "scope": self.config.scope.value,
                "user_id": actor.id,
            },
        )

    def _scoped_actor_id(self, actor: Actor) -> str | None:
        if self.config.scope is NoticeScope.USER:
            return actor.id
        return None
