from __future__ import annotations

from urllib.parse import quote, urlencode

from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from app.notices.core.config import settings
from app.notices.services.notice import DISMISS_ACTION, NoticeConfig

NOTICE_TEMPLATE = """\
<div id="notice-{{ notice_id }}" class="{{ css_classes }}">
{{ content }}
{%- if dismissible %}
<button type="button" class="notice-dismiss"><span class="screen-reader-text">Dismiss this notice.</span></button>
{%- endif %}
</div>
{%- if nonce %}
<script>
window.addEventListener("load", function () {
	var notice = document.getElementById({{ ("notice-" ~ notice_id)|tojson }});
	var dismissBtn = notice ? notice.querySelector(".notice-dismiss") : null;
	if (!dismissBtn) {
		return;
	}
	dismissBtn.addEventListener("click", function () {
		var httpRequest = new XMLHttpRequest();
		httpRequest.open("POST", {{ ajax_url|tojson }});
		httpRequest.setRequestHeader("Content-Type", "application/x-www-form-urlencoded");
		httpRequest.send({{ post_data|tojson }});
		notice.parentNode.removeChild(notice);
	});
});
</script>
{%- endif %}
"""


def build_dismiss_post_data(notice_id: str, nonce: str) -> str:
    """Form-encode a dismiss request body; the id is percent-encoded."""
    return urlencode(
        {"id": notice_id, "action": DISMISS_ACTION, "nonce": nonce},
        quote_via=quote,
        safe="",
    )


class JinjaNoticeRenderer:
    def __init__(self, ajax_url: str | None = None, environment: Environment | None = None):
        self.ajax_url = ajax_url or settings.AJAX_URL
        self.environment = environment or Environment(autoescape=select_autoescape(default=True))
        self.template = self.environment.from_string(NOTICE_TEMPLATE)

    def render(self, config: NoticeConfig, nonce: str | None) -> str:
        if not config.dismissible:
            nonce = None
        return self.template.render(
            notice_id=config.id,
            css_classes=config.css_classes,
            # Content is trusted, pre-sanitized markup.
            content=Markup(config.content),
            dismissible=config.dismissible,
            nonce=nonce,
            ajax_url=self.ajax_url,
            post_data=build_dismiss_post_data(config.id, nonce) if nonce else "",
        )
