import pytest

pytest.importorskip("httpx")

from conftest import ManualScheduler  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from starlette.websockets import WebSocketDisconnect  # noqa: E402

from hints_online.config.settings import settings  # noqa: E402
from hints_online.main import app  # noqa: E402
from hints_online.models.player import Player  # noqa: E402
from hints_online.services.game_runtime import RUNTIME  # noqa: E402
from hints_online.services.player_registry import PlayerRegistry  # noqa: E402

AUTH_HEADERS = {"Authorization": f"Bearer {settings.HOST_TOKEN}"}
client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_game(monkeypatch):
    engine = RUNTIME.engine
    monkeypatch.setattr(engine, "registry", PlayerRegistry())
    monkeypatch.setattr(engine, "scheduler", ManualScheduler())
    engine.reset_to_lobby()
    engine.theme_id = "standard"
    yield engine
    engine.reset_to_lobby()


def test_host_routes_require_token():
    assert client.get("/host/state").status_code == 401
    assert client.get("/host/state", headers={"Authorization": "Bearer nope"}).status_code == 403


def test_host_state_exposes_room_and_snapshot():
    response = client.get("/host/state", headers=AUTH_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["phase"] == "LOBBY"
    assert body["roomCode"] == RUNTIME.room_code
    assert body["turnIndex"] == 1
    assert body["connectionCount"] == 0


def test_start_rejected_with_too_few_players():
    response = client.post("/host/start", headers=AUTH_HEADERS)

    assert response.status_code == 409
    assert response.json()["detail"] == "not_enough_players"


def test_start_and_finish_turn_flow(fresh_game):
    fresh_game.join(Player(id="p1", name="Anna"))
    fresh_game.join(Player(id="p2", name="Bram"))

    response = client.post("/host/start", headers=AUTH_HEADERS)

    assert response.status_code == 200
    assert response.json()["phase"] == "SPINNING"
    assert client.post("/host/finish-turn", headers=AUTH_HEADERS).status_code == 409
    assert client.post("/host/reset", headers=AUTH_HEADERS).json()["phase"] == "LOBBY"


def test_settings_validation():
    ok = client.post("/host/settings", json={"themeId": "winter", "difficulty": "easy"}, headers=AUTH_HEADERS)
    bad = client.post("/host/settings", json={"themeId": "mars"}, headers=AUTH_HEADERS)

    assert ok.json() == {"ok": True, "themeId": "winter", "difficulty": "easy"}
    assert bad.status_code == 400
    assert bad.json()["detail"] == "unknown_theme"


def test_leaderboard_and_health(fresh_game):
    fresh_game.join(Player(id="p1", name="Anna"))
    fresh_game.join(Player(id="p2", name="Bram"))
    fresh_game.registry.award("p2", 3)

    board = client.get("/game/leaderboard").json()["leaderboard"]
    health = client.get("/health").json()

    assert [p["id"] for p in board] == ["p2", "p1"]
    assert health["ok"] is True
    assert health["room_code"] == RUNTIME.room_code
    assert client.get("/").json()["ok"] is True


def test_websocket_join_and_ping(fresh_game):
    with client.websocket_connect(f"/ws/{RUNTIME.room_code.lower()}") as ws:
        first = ws.receive_json()
        assert first["type"] == "STATE_UPDATE"
        assert first["state"]["phase"] == "LOBBY"

        ws.send_json({"type": "JOIN_LOBBY", "player": {"id": "p9", "name": "Cor", "avatarSeed": 1, "score": 0}})
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

    assert "p9" in fresh_game.registry


def test_websocket_unknown_room_is_closed():
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws/NOPE1"):
            pass

    assert exc.value.code == 4404


def test_every_host_route_requires_token_but_preflight_passes():
    for method, path in [("get", "/host/state"), ("post", "/host/settings"), ("post", "/host/start"),
                         ("post", "/host/finish-turn"), ("post", "/host/reset")]:
        assert getattr(client, method)(path).status_code == 401

    preflight = client.options(
        "/host/start",
        headers={"Origin": "http://192.168.1.20:5173", "Access-Control-Request-Method": "POST"},
    )

    assert preflight.status_code == 200
