from fastapi.testclient import TestClient
import pytest

from actionpalette.config.settings import PaletteSettings
from actionpalette.plugins.strategies.handoff import handoff_strategies
from actionpalette.server.app_factory import create_app
from actionpalette.services.palette import build_palette

ACTIONS = {
    "Chat": {"strategy": "chat", "opts": {"slash_cmd": "chat"}},
    "Explain": {
        "strategy": "chat",
        "description": "Explain code",
        "opts": {"modes": ["V"], "slash_cmd": "explain", "auto_submit": True, "window": {"width": 80}},
        "prompts": [
            {"role": "system", "content": lambda ctx: f"You know {ctx.filetype}."},
            {"role": "user", "content": lambda ctx: "\n".join(ctx.lines), "contains_code": True},
        ],
    },
    "Rewrite": {
        "strategy": "inline",
        "opts": {"user_prompt": True, "placement": "replace"},
        "prompts": [{"role": "user", "content": "rewrite"}],
    },
    "Broken": {
        "strategy": "chat",
        "prompts": [{"role": "user", "content": lambda ctx: ctx.missing_attribute}],
    },
    "Invalid": {"description": "no strategy"},
}

STATE_V = {
    "filetype": "lua",
    "mode": "V",
    "selection_start": [1, 1],
    "selection_end": [2, 1],
    "lines": ["local a = 1", "return a", "-- tail"],
}


def _client(**settings) -> TestClient:
    cfg = PaletteSettings(**settings)
    palette = build_palette(strategies=handoff_strategies(), defaults=ACTIONS, settings=cfg)
    return TestClient(create_app(cfg=cfg, palette=palette))


@pytest.fixture
def client():
    return _client()


def test_list_actions_reports_issues(client):
    r = client.get("/api/v1/actions")
    assert r.status_code == 200
    data = r.json()

    assert [a["name"] for a in data["actions"]] == ["Chat", "Explain", "Rewrite", "Broken"]
    assert data["actions"][1]["modes"] == ["V"]
    assert data["actions"][1]["slash_cmd"] == "explain"
    assert [i["name"] for i in data["issues"]] == ["Invalid"]


def test_visible_actions_depend_on_mode(client):
    normal = client.post("/api/v1/actions/visible", json={"state": {"mode": "n"}}).json()
    visual = client.post("/api/v1/actions/visible", json={"state": STATE_V}).json()

    assert "Explain" not in [a["name"] for a in normal["actions"]]
    assert "Explain" in [a["name"] for a in visual["actions"]]


def test_dispatch_returns_rendered_prompts_and_handoff_payload(client):
    r = client.post("/api/v1/actions/Explain/dispatch", json={"state": STATE_V})
    assert r.status_code == 200
    data = r.json()

    assert data["state"] == "dispatched"
    assert data["prompts"] == [
        {"role": "system", "text": "You know lua."},
        {"role": "user", "text": "local a = 1\nreturn a"},
    ]
    assert data["output"]["strategy"] == "chat"
    assert data["output"]["opts"]["auto_submit"] is True
    assert data["output"]["opts"]["window"] == {"width": 80}
    assert data["error"] is None


def test_dispatch_of_hidden_action_is_forbidden(client):
    r = client.post("/api/v1/actions/Explain/dispatch", json={"state": {"mode": "n"}})
    assert r.status_code == 403


def test_dispatch_unknown_action_is_not_found(client):
    r = client.post("/api/v1/actions/Invalid/dispatch", json={})
    assert r.status_code == 404


def test_confirmation_answer_comes_from_the_request(client):
    declined = client.post("/api/v1/actions/Rewrite/dispatch", json={}).json()
    accepted = client.post("/api/v1/actions/Rewrite/dispatch", json={"confirmed": True}).json()

    assert declined["state"] == "aborted"
    assert declined["prompts"] == []
    assert accepted["state"] == "dispatched"
    assert accepted["output"]["opts"]["placement"] == "replace"


def test_content_error_is_reported_not_raised(client):
    data = client.post("/api/v1/actions/Broken/dispatch", json={}).json()

    assert data["state"] == "failed"
    assert "missing_attribute" in data["error"]
    assert [n["level"] for n in data["notices"]] == ["error"]


def test_send_code_disabled_blocks_code_prompts():
    client = _client(send_code=False)
    data = client.post("/api/v1/actions/Explain/dispatch", json={"state": STATE_V}).json()

    assert data["state"] == "dispatched"
    assert [p["role"] for p in data["prompts"]] == ["system"]
    assert data["blocked"] == [{"index": 1, "role": "user"}]
    assert [n["level"] for n in data["notices"]] == ["warn"]


def test_slash_route(client):
    assert client.post("/api/v1/slash/chat", json={}).json()["action"] == "Chat"
    assert client.post("/api/v1/slash/nope", json={}).status_code == 404


def test_non_mapping_picker_hints_are_passed_through():
    cfg = PaletteSettings()
    palette = build_palette(
        strategies=handoff_strategies(),
        defaults={"Chat": {"strategy": "chat", "opts": {"picker": ["compact", {"icon": "c"}]}}},
        settings=cfg,
    )
    client = TestClient(create_app(cfg=cfg, palette=palette))

    listed = client.get("/api/v1/actions").json()
    assert listed["actions"][0]["picker"] == ["compact", {"icon": "c"}]

    dispatched = client.post("/api/v1/actions/Chat/dispatch", json={}).json()
    assert dispatched["output"]["opts"]["picker"] == ["compact", {"icon": "c"}]
