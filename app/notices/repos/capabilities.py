from sqlalchemy import func, select

from app.notices.db.models import RoleCapability


class RoleCapabilityRepository:
    def __init__(self, db):
        self.db = db

    def list_capabilities_for_role(self, role_name: str) -> list[str]:
        stmt = select(RoleCapability.capability).where(func.lower(RoleCapability.role) == role_name.strip().lower())
        return [row[0] for row in self.db.execute(stmt).all()]

    def grant(self, role_name: str, capability: str) -> RoleCapability:
        role_name = role_name.strip().lower()
        stmt = select(RoleCapability).where(
            RoleCapability.role == role_name,
            RoleCapability.capability == capability,
        )
        existing = self.db.execute(stmt).scalars().first()
        if existing is not None:
            return existing
        entry = RoleCapability(role=role_name, capability=capability)
        self.db.add(entry)
        self.db.flush()
        return entry
