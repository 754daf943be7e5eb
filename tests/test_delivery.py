import pytest

from numberline.transport.sessions import SessionTable
from numberline.transport.ws import deliver
from numberline.transport.ws_manager import WSManager


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(data)


class FakeApp:
    def __init__(self):
        self.state = type("State", (), {})()
        self.state.sessions = SessionTable()
        self.state.wsman = WSManager()


@pytest.mark.asyncio
async def test_deliver_sends_only_to_live_sessions():
    app = FakeApp()
    live, dropped = FakeSocket(), FakeSocket()
    app.state.wsman.add("s-live", live)
    app.state.wsman.add("s-dropped", dropped)
    app.state.sessions.bind("s-live", "ABCD", "p-live")
    app.state.sessions.bind("s-dropped", "ABCD", "p-dropped")
    app.state.wsman.remove("s-dropped")

    await deliver(app, [
        ("p-live", {"type": "ROOM_STATE", "n": 1}),
        ("p-dropped", {"type": "ROOM_STATE", "n": 2}),
        ("p-never-bound", {"type": "ROOM_STATE", "n": 3}),
    ])

    assert live.sent == [{"type": "ROOM_STATE", "n": 1}]
    assert dropped.sent == []


@pytest.mark.asyncio
async def test_failed_send_drops_the_connection():
    wsman = WSManager()
    wsman.add("s1", FakeSocket(fail=True))

    assert await wsman.send_to_sid("s1", {"type": "ROOM_STATE"}) is False
    assert not wsman.is_live("s1")
    assert len(wsman) == 0


@pytest.mark.asyncio
async def test_send_to_unknown_sid_is_a_no_op():
    wsman = WSManager()
    assert await wsman.send_to_sid(None, {"type": "ROOM_STATE"}) is False
    assert await wsman.send_to_sid("nope", {"type": "ROOM_STATE"}) is False


@pytest.mark.asyncio
async def test_deliver_keeps_going_after_a_failed_send():
    app = FakeApp()
    broken, healthy = FakeSocket(fail=True), FakeSocket()
    app.state.wsman.add("s-broken", broken)
    app.state.wsman.add("s-ok", healthy)
    app.state.sessions.bind("s-broken", "ABCD", "p1")
    app.state.sessions.bind("s-ok", "ABCD", "p2")

    await deliver(app, [("p1", {"n": 1}), ("p2", {"n": 2})])

    assert healthy.sent == [{"n": 2}]
    assert not app.state.wsman.is_live("s-broken")
