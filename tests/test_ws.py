import pytest
from fastapi.testclient import TestClient

from numberline.main import create_app
from numberline.settings import Settings


@pytest.fixture()
def client():
    app = create_app(Settings(ROOM_TTL_SEC=0, LOG_LEVEL="WARNING"))
    with TestClient(app) as c:
        yield c


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "rooms": 0}


def _play_round(client, host, guest, code):
    guest.send_json({"type": "JOIN_ROOM", "code": code.lower(), "name": "Bob"})
    joined = guest.receive_json()
    assert joined["you"]["name"] == "Bob"
    assert host.receive_json()["room"]["currentOrder"] == joined["room"]["currentOrder"]

    host.send_json({"type": "START_GAME", "code": code})
    host_state = host.receive_json()
    guest_state = guest.receive_json()
    assert guest_state["room"]["phase"] == "ORDERING"
    assert all(p["number"] is None for p in guest_state["room"]["players"])
    assert 1 <= guest_state["you"]["number"] <= 100
    assert guest_state["you"]["number"] != host_state["you"]["number"]

    order = list(reversed(guest_state["room"]["currentOrder"]))
    guest.send_json({"type": "UPDATE_ORDER", "code": code, "orderedPlayerIds": order})
    assert host.receive_json()["room"]["currentOrder"] == order
    assert guest.receive_json()["room"]["currentOrder"] == order

    host.send_json({"type": "REVEAL_NUMBERS", "code": code})
    revealed = guest.receive_json()
    host.receive_json()
    assert revealed["room"]["phase"] == "REVEAL"
    assert revealed["room"]["finalOrder"] == order
    assert all(p["number"] is not None for p in revealed["room"]["players"])
    assert revealed["room"]["result"]["outcome"] in ("EXACT", "INCORRECT")

    rooms = client.get("/admin/rooms").json()["rooms"]
    assert [r["room_code"] for r in rooms] == [code]
    assert rooms[0]["phase"] == "REVEAL"
    assert rooms[0]["connected"] == 2


def test_full_round_over_websockets(client):
    with client.websocket_connect("/ws") as host:
        host.send_json({"type": "CREATE_ROOM", "name": "Ann"})
        created = host.receive_json()
        assert created["type"] == "ROOM_STATE"
        assert created["you"]["isHost"] is True
        code = created["room"]["code"]

        with client.websocket_connect("/ws") as guest:
            _play_round(client, host, guest, code)

            # guest's socket closes: host sees them as disconnected
            guest.close()
            left = host.receive_json()
            bob = next(p for p in left["room"]["players"] if p["name"] == "Bob")
            assert bob["connected"] is False
            assert len(left["room"]["players"]) == 2


def test_join_unknown_room_gets_error(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "JOIN_ROOM", "code": "zzzz", "name": "Bob"})
        msg = ws.receive_json()
        assert msg["type"] == "ERROR"
        assert msg["code"] == "ROOM_NOT_FOUND"


def test_admin_close_unknown_room(client):
    assert client.post("/admin/rooms/QQQQ/close").status_code == 404


def test_admin_close_room(client):
    with client.websocket_connect("/ws") as host:
        host.send_json({"type": "CREATE_ROOM", "name": "Ann"})
        code = host.receive_json()["room"]["code"]

    res = client.post(f"/admin/rooms/{code.lower()}/close")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "room_code": code}
    assert client.get("/health").json()["rooms"] == 0
