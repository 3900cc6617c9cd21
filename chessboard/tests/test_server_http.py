import pytest

from chessboard.config import Settings
from conftest import get_test_client

E2_E4 = {"fromRow": 6, "fromCol": 4, "toRow": 4, "toCol": 4}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_initial_state(client):
    resp = client.get("/games/http-1")
    assert resp.status_code == 200
    state = resp.json()
    assert state["type"] == "state"
    assert state["turn"] == "white"
    assert state["status"] == "White's turn"
    assert state["gameOver"] is False
    assert state["fen"].startswith("rnbqkbnr")
    assert state["board"][0][0] == {"kind": "rook", "color": "black"}
    assert state["history"] == []


def test_legal_move_updates_state(client):
    resp = client.post("/games/http-2/moves", json=E2_E4)
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["state"]["turn"] == "black"
    assert body["state"]["lastMove"]["notation"] == "e4"

    history = client.get("/games/http-2/history").json()
    assert len(history) == 1
    assert history[0]["from"] == {"row": 6, "col": 4}
    assert history[0]["captured"] is None


def test_illegal_move_is_reported_not_raised(client):
    initial = client.get("/games/http-3").json()

    resp = client.post("/games/http-3/moves", json={"fromRow": 6, "fromCol": 4, "toRow": 3, "toCol": 4})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is False
    assert body["state"]["fen"] == initial["fen"]
    assert body["state"]["history"] == []


def test_off_board_move_is_rejected(client):
    resp = client.post("/games/http-4/moves", json={"fromRow": 9, "fromCol": 4, "toRow": 4, "toCol": 4})
    assert resp.status_code == 200
    assert resp.json()["ok"] is False


def test_malformed_move_body(client):
    resp = client.post("/games/http-5/moves", json={"fromRow": 6})
    assert resp.status_code == 422


def test_reset(client):
    client.post("/games/http-6/moves", json=E2_E4)

    state = client.post("/games/http-6/reset").json()
    assert state["turn"] == "white"
    assert state["history"] == []
    assert state["lastMove"] is None


def test_games_do_not_share_state(client):
    client.post("/games/http-a/moves", json=E2_E4)
    assert client.get("/games/http-b").json()["history"] == []


def test_apps_do_not_share_games():
    first = get_test_client()
    second = get_test_client()

    first.post("/games/shared-id/moves", json=E2_E4)
    assert second.get("/games/shared-id").json()["history"] == []


def test_sandbox_rules_from_settings():
    client = get_test_client(Settings(rules="sandbox"))

    body = client.post("/games/sandbox/moves", json={"fromRow": 6, "fromCol": 4, "toRow": 3, "toCol": 4}).json()
    assert body["ok"] is True
    assert body["state"]["fen"] is None


def test_coordinates_route(client):
    assert client.get("/coordinates/6/4").json() == {"square": "e2"}
    assert client.get("/coordinates/0/0").json() == {"square": "a8"}
    assert client.get("/coordinates/8/0").status_code == 422


def test_module_import_ignores_bad_environment(monkeypatch):
    import importlib

    import chessboard.server

    monkeypatch.setenv("CHESSBOARD_PORT", "eighty")
    monkeypatch.setenv("CHESSBOARD_RULES", "atomic")

    module = importlib.reload(chessboard.server)
    assert module.app.state.registry.rules == "standard"

    with pytest.raises(ValueError):
        Settings.from_env()
