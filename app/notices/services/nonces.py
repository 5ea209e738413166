from __future__ import annotations

from datetime import timedelta

from app.notices.core.context import Actor
from app.notices.core.security import create_nonce, verify_nonce


class JwtRequestVerifier:
    """Signed, expiring nonces tied to an action scope and an actor."""

    def __init__(self, ttl: timedelta | None = None):
        self.ttl = ttl

    def mint_token(self, scope: str, actor: Actor) -> str:
        return create_nonce(scope, actor.id, expires_delta=self.ttl)

    def verify_token(self, token: str, scope: str, actor: Actor) -> bool:
        return verify_nonce(token, scope, actor.id)
