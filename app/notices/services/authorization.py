from __future__ import annotations

from app.notices.core.context import Actor
from app.notices.repos.capabilities import RoleCapabilityRepository


class CapabilityAuthorizer:
    """Grants a capability when the actor's role holds it."""

    def __init__(self, db, cache: dict | None = None):
        self.repo = RoleCapabilityRepository(db)
        self.cache = cache if cache is not None else {}

    def can(self, actor: Actor, capability: str) -> bool:
        if not actor.role or not capability:
            return False
        return capability.strip() in self._get_role_capabilities(actor.role)

    def _get_role_capabilities(self, role_name: str) -> set[str]:
        cache_key = f"role_capabilities:{role_name.strip().lower()}"
        if cache_key in self.cache:
            return self.cache[cache_key]
        capabilities = set(self.repo.list_capabilities_for_role(role_name))
        self.cache[cache_key] = capabilities
        return capabilities
