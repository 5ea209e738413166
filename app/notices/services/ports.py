"""Collaborator interfaces consumed by ``NoticeController``.

The controller only talks to the host through these protocols, so the
database, token and template machinery can be swapped or faked in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.notices.core.context import Actor
    from app.notices.services.notice import NoticeConfig, NoticeScope


@runtime_checkable
class Authorizer(Protocol):
    """Capability checks for the viewing actor."""

    def can(self, actor: "Actor", capability: str) -> bool:
        """Return True if ``actor`` holds ``capability``."""


@runtime_checkable
class StateStore(Protocol):
    """Dismissed-flag persistence, global or per actor."""

    def get(self, key: str, scope: "NoticeScope", actor_id: str | None = None) -> bool:
        """Return the stored flag; absent reads as False."""

    def set(self, key: str, scope: "NoticeScope", actor_id: str | None = None, value: bool = True) -> None:
        """Persist the flag."""


@runtime_checkable
class RequestVerifier(Protocol):
    """Anti-forgery tokens bound to an action scope and an actor."""

    def mint_token(self, scope: str, actor: "Actor") -> str:
        """Return a fresh token for ``scope``."""

    def verify_token(self, token: str, scope: str, actor: "Actor") -> bool:
        """Return True if ``token`` was minted for ``scope`` and ``actor``."""


@runtime_checkable
class NoticeRenderer(Protocol):
    """Markup for a notice and its dismiss script."""

    def render(self, config: "NoticeConfig", nonce: str | None) -> str:
        """Return the notice markup; ``nonce`` is None for persistent notices."""
