from __future__ import annotations

from app.notices.repos.options import OptionRepository, UserMetaRepository
from app.notices.services.notice import NoticeScope


class SqlStateStore:
    """Dismissed flags in the options table (global) or user meta (per user)."""

    def __init__(self, db):
        self.options = OptionRepository(db)
        self.user_meta = UserMetaRepository(db)

    def get(self, key: str, scope: NoticeScope, actor_id: str | None = None) -> bool:
        if NoticeScope(scope) is NoticeScope.USER:
            if not actor_id:
                return False
            meta = self.user_meta.get(actor_id, key)
            return bool(meta is not None and meta.meta_value)
        option = self.options.get(key)
        return bool(option is not None and option.option_value)

    def set(self, key: str, scope: NoticeScope, actor_id: str | None = None, value: bool = True) -> None:
        if NoticeScope(scope) is NoticeScope.USER:
            if not actor_id:
                return
            self.user_meta.upsert(actor_id, key, bool(value))
            return
        self.options.upsert(key, bool(value))
