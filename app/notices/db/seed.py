from sqlalchemy import select

from app.notices.core.config import settings
from app.notices.core.security import get_password_hash
from app.notices.db.models import User
from app.notices.repos.capabilities import RoleCapabilityRepository


DEFAULT_ROLE_CAPABILITIES = {
    "administrator": ["edit_theme_options", "manage_options", "edit_posts", "read"],
    "editor": ["edit_posts", "read"],
    "subscriber": ["read"],
}


def _seed_role_capabilities(db) -> None:
    repo = RoleCapabilityRepository(db)
    for role_name, capabilities in DEFAULT_ROLE_CAPABILITIES.items():
        for capability in capabilities:
            repo.grant(role_name, capability)


def _get_or_create_superadmin(db) -> User:
    stmt = select(User).where(User.username == settings.SUPERADMIN_USERNAME)
    user = db.execute(stmt).scalars().first()
    if user:
        return user
    user = User(
        username=settings.SUPERADMIN_USERNAME,
        email=settings.SUPERADMIN_EMAIL,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        role="administrator",
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


def run_seed(db) -> None:
    _seed_role_capabilities(db)
    _get_or_create_superadmin(db)
    db.commit()


if __name__ == "__main__":
    from app.notices.db.session import SessionLocal

    session = SessionLocal()
    try:
        run_seed(session)
    finally:
        session.close()
