import pytest

from app.notices.core.context import Actor
from app.notices.services.notice import (
    DISMISS_ACTION,
    DismissRequest,
    NoticeConfig,
    NoticeController,
    NoticeScope,
)
from app.notices.services.registry import NoticeRegistry


class FakeAuthorizer:
    def __init__(self, grants: dict[str, set[str]] | None = None):
        self.grants = grants or {}

    def can(self, actor, capability):
        return capability in self.grants.get(actor.id, set())


class InMemoryStateStore:
    def __init__(self):
        self.values = {}
        self.writes = []

    def get(self, key, scope, actor_id=None):
        return bool(self.values.get((key, NoticeScope(scope), actor_id)))

    def set(self, key, scope, actor_id=None, value=True):
        self.writes.append((key, NoticeScope(scope), actor_id, value))
        self.values[(key, NoticeScope(scope), actor_id)] = value


class FakeVerifier:
    def mint_token(self, scope, actor):
        return f"{scope}|{actor.id}"

    def verify_token(self, token, scope, actor):
        return token == f"{scope}|{actor.id}"


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def render(self, config, nonce):
        self.calls.append((config.id, nonce))
        return f"<div id=\"notice-{config.id}\">{config.content}</div>"


ALICE = Actor(id="alice", role="administrator")
BOB = Actor(id="bob", role="administrator")
MALLORY = Actor(id="mallory", role="subscriber")


@pytest.fixture()
def store():
    return InMemoryStateStore()


@pytest.fixture()
def renderer():
    return FakeRenderer()


@pytest.fixture()
def authorizer():
    return FakeAuthorizer(
        {
            "alice": {"edit_theme_options", "manage_options"},
            "bob": {"edit_theme_options"},
        }
    )


def _controller(config, *, authorizer, store, renderer=None):
    return NoticeController(
        config,
        authorizer=authorizer,
        state_store=store,
        verifier=FakeVerifier(),
        renderer=renderer or FakeRenderer(),
    )


def _dismiss(controller, actor, *, notice_id=None, action=DISMISS_ACTION, nonce=None):
    notice_id = controller.config.id if notice_id is None else notice_id
    if nonce is None:
        nonce = FakeVerifier().mint_token(f"dismiss_{notice_id}", actor)
    controller.handle_dismiss_request(
        DismissRequest(action=action, notice_id=notice_id, nonce=nonce, actor=actor)
    )


@pytest.mark.parametrize("notice_id,content", [("", "<p>Hi</p>"), ("welcome", ""), ("", "")])
def test_disabled_notice_never_renders_or_writes(notice_id, content, authorizer, store, renderer):
    controller = _controller(NoticeConfig(id=notice_id, content=content), authorizer=authorizer, store=store, renderer=renderer)

    assert controller.enabled is False
    assert controller.should_render(ALICE, "dashboard") is False
    assert controller.is_dismissed(ALICE) is False
    assert controller.render(ALICE, "dashboard") == ""

    _dismiss(controller, ALICE, notice_id=notice_id)
    assert store.writes == []
    assert renderer.calls == []


def test_missing_capability_blocks_rendering(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    assert controller.should_render(MALLORY, "dashboard") is False
    assert controller.render(MALLORY, "dashboard") == ""


def test_capability_is_checked_against_configured_capability(authorizer, store):
    config = NoticeConfig(id="billing", content="<p>Billing</p>", capability="manage_options")
    controller = _controller(config, authorizer=authorizer, store=store)

    assert controller.should_render(ALICE, "dashboard") is True
    assert controller.should_render(BOB, "dashboard") is False


def test_screens_gate_rendering(authorizer, store):
    config = NoticeConfig(id="themes", content="<p>Themes</p>", screens=frozenset({"themes", "customize"}))
    controller = _controller(config, authorizer=authorizer, store=store)

    assert controller.should_render(ALICE, "themes") is True
    assert controller.should_render(ALICE, "customize") is True
    assert controller.should_render(ALICE, "dashboard") is False
    assert controller.should_render(ALICE, None) is False


def test_empty_screens_never_gate(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    for screen in ("dashboard", "plugins", "", None):
        assert controller.should_render(ALICE, screen) is True


def test_non_dismissible_ignores_stored_flag(authorizer, store):
    config = NoticeConfig(id="maintenance", content="<p>Down</p>", dismissible=False)
    store.set(config.storage_key, NoticeScope.GLOBAL, None, True)
    controller = _controller(config, authorizer=authorizer, store=store)

    assert controller.is_dismissed(ALICE) is False
    assert controller.should_render(ALICE, "dashboard") is True


def test_non_dismissible_render_mints_no_nonce(authorizer, store, renderer):
    config = NoticeConfig(id="maintenance", content="<p>Down</p>", dismissible=False)
    controller = _controller(config, authorizer=authorizer, store=store, renderer=renderer)

    assert controller.render(ALICE, "dashboard")
    assert renderer.calls == [("maintenance", None)]


def test_render_passes_nonce_scoped_to_notice(authorizer, store, renderer):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store, renderer=renderer)

    markup = controller.render(ALICE, "dashboard")

    assert markup == '<div id="notice-welcome"><p>Hi</p></div>'
    assert renderer.calls == [("welcome", "dismiss_welcome|alice")]
    assert controller.nonce_scope == "dismiss_welcome"


def test_render_does_not_create_flag(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    controller.render(ALICE, "dashboard")

    assert store.writes == []


def test_successful_dismiss_hides_notice(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE)

    assert store.writes == [("wptrt_notice_dismissed_welcome", NoticeScope.GLOBAL, None, True)]
    assert controller.is_dismissed(ALICE) is True
    assert controller.should_render(ALICE, "dashboard") is False
    assert controller.render(ALICE, "dashboard") == ""


def test_global_dismissal_is_shared_between_actors(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE)

    assert controller.is_dismissed(BOB) is True
    assert controller.should_render(BOB, "dashboard") is False


def test_user_scope_dismissal_is_per_actor(authorizer, store):
    config = NoticeConfig(id="tour", content="<p>Tour</p>", scope="user")
    controller = _controller(config, authorizer=authorizer, store=store)

    _dismiss(controller, ALICE)

    assert store.writes == [("wptrt_notice_dismissed_tour", NoticeScope.USER, "alice", True)]
    assert controller.is_dismissed(ALICE) is True
    assert controller.is_dismissed(BOB) is False
    assert controller.should_render(BOB, "dashboard") is True


def test_mismatched_id_only_matching_controller_reacts(authorizer, store):
    registry = NoticeRegistry(
        [
            NoticeConfig(id="welcome", content="<p>Hi</p>"),
            NoticeConfig(id="welcome_back", content="<p>Hello again</p>"),
        ]
    )
    controllers = registry.bind(
        authorizer=authorizer,
        state_store=store,
        verifier=FakeVerifier(),
        renderer=FakeRenderer(),
    )
    request = DismissRequest(
        action=DISMISS_ACTION,
        notice_id="welcome_back",
        nonce=FakeVerifier().mint_token("dismiss_welcome_back", ALICE),
        actor=ALICE,
    )

    NoticeRegistry.dispatch_dismiss(controllers, request)

    welcome, welcome_back = controllers
    assert welcome.is_dismissed(ALICE) is False
    assert welcome_back.is_dismissed(ALICE) is True
    assert len(store.writes) == 1


@pytest.mark.parametrize("notice_id", ["Welcome", "welcom", "welcome ", "welcome%20", ""])
def test_id_must_match_exactly(notice_id, authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE, notice_id=notice_id, nonce="dismiss_welcome|alice")

    assert store.writes == []


@pytest.mark.parametrize("action", ["", None, "dismiss_notice", "wptrt_dismiss_notice_x"])
def test_wrong_action_is_ignored(action, authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE, action=action)

    assert store.writes == []


@pytest.mark.parametrize(
    "nonce",
    ["", "garbage", "dismiss_welcome|bob", "dismiss_other|alice"],
)
def test_invalid_nonce_leaves_flag_untouched(nonce, authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE, nonce=nonce)

    assert store.writes == []
    assert controller.is_dismissed(ALICE) is False


def test_missing_nonce_is_rejected_without_error(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    controller.handle_dismiss_request(
        DismissRequest(action=DISMISS_ACTION, notice_id="welcome", nonce=None, actor=ALICE)
    )

    assert store.writes == []


def test_dismissal_uses_configured_prefix(authorizer, store):
    config = NoticeConfig(id="Promo-2024!", content="<p>Sale</p>", option_key_prefix="mytheme_dismissed")
    controller = _controller(config, authorizer=authorizer, store=store)

    _dismiss(controller, ALICE)

    assert store.writes[0][0] == "mytheme_dismissed_promo-2024"


def test_dismissal_is_one_way(authorizer, store):
    controller = _controller(NoticeConfig(id="welcome", content="<p>Hi</p>"), authorizer=authorizer, store=store)

    _dismiss(controller, ALICE)
    _dismiss(controller, ALICE)

    assert controller.is_dismissed(ALICE) is True
    assert all(value is True for *_rest, value in store.writes)
