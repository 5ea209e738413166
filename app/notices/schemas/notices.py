from pydantic import BaseModel, Field

from app.notices.services.notice import (
    DEFAULT_CAPABILITY,
    DEFAULT_OPTION_KEY_PREFIX,
    NoticeConfig,
    NoticeScope,
    NoticeStyle,
)


class NoticeDefinition(BaseModel):
    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": "welcome",
                "content": "<p>Thanks for installing!</p>",
                "dismissible": True,
                "scope": "global",
                "type": "info",
                "capability": "edit_theme_options",
                "option_key_prefix": "wptrt_notice_dismissed",
                "screens": ["dashboard"],
            }
        },
    }

    id: str
    content: str
    dismissible: bool = True
    scope: NoticeScope = NoticeScope.GLOBAL
    style: NoticeStyle = Field(default=NoticeStyle.INFO, alias="type")
    capability: str = DEFAULT_CAPABILITY
    option_key_prefix: str = DEFAULT_OPTION_KEY_PREFIX
    screens: list[str] = Field(default_factory=list)

    def to_config(self) -> NoticeConfig:
        return NoticeConfig(
            id=self.id,
            content=self.content,
            dismissible=self.dismissible,
            scope=self.scope,
            style=self.style,
            capability=self.capability,
            option_key_prefix=self.option_key_prefix,
            screens=frozenset(self.screens),
        )
