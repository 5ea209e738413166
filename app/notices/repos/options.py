import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.notices.db.models import Option, UserMeta


class OptionRepository:
    """Site-wide key/value settings."""

    def __init__(self, db):
        self.db = db

    def get(self, option_name: str):
        stmt = select(Option).where(Option.option_name == option_name)
        return self.db.execute(stmt).scalars().first()

    def upsert(self, option_name: str, value) -> Option:
        option = self.get(option_name)
        if option is None:
            option = Option(option_name=option_name, option_value=value)
        else:
            option.option_value = value
        self.db.add(option)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request inserted the row first; last write wins.
            self.db.rollback()
            option = self.get(option_name)
            option.option_value = value
            self.db.commit()
        self.db.refresh(option)
        return option


def _user_key(user_id) -> uuid.UUID | None:
    try:
        return user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
    except ValueError:
        return None


class UserMetaRepository:
    """Per-user key/value settings. Ids that are not UUIDs own no rows."""

    def __init__(self, db):
        self.db = db

    def get(self, user_id: str, meta_key: str):
        key = _user_key(user_id)
        if key is None:
            return None
        stmt = select(UserMeta).where(UserMeta.user_id == key, UserMeta.meta_key == meta_key)
        return self.db.execute(stmt).scalars().first()

    def upsert(self, user_id: str, meta_key: str, value) -> UserMeta | None:
        key = _user_key(user_id)
        if key is None:
            return None
        meta = self.get(key, meta_key)
        if meta is None:
            meta = UserMeta(user_id=key, meta_key=meta_key, meta_value=value)
        else:
            meta.meta_value = value
        self.db.add(meta)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            meta = self.get(key, meta_key)
            meta.meta_value = value
            self.db.commit()
        self.db.refresh(meta)
        return meta
