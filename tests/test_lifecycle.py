import pytest

from numberline.domain.lifecycle.handlers import handle_create_room, handle_disconnect, handle_join_room
from numberline.transport.protocols import InCreateRoom, InJoinRoom


async def _create(app, sid="s-host", name="Hana"):
    to_sender, to_players = await handle_create_room(app=app, sid=sid, msg=InCreateRoom(name=name))
    assert to_sender == []
    pid, state = to_players[0]
    return state.room["code"], pid


async def _join(app, code, sid, name="Guest"):
    return await handle_join_room(app=app, sid=sid, msg=InJoinRoom(code=code, name=name))


@pytest.mark.asyncio
async def test_create_room_makes_lobby_with_single_host(app):
    code, host_id = await _create(app)
    room = await app.state.repo.get_room(code)

    assert room.phase == "LOBBY"
    assert room.host_id == host_id
    assert room.current_order == [host_id]
    assert room.final_order is None
    assert [p.is_host for p in room.players] == [True]
    assert room.players[0].name == "Hana"
    assert app.state.sessions.player_id("s-host", code) == host_id


@pytest.mark.asyncio
async def test_create_room_default_name(app):
    code, _ = await _create(app, name="   ")
    room = await app.state.repo.get_room(code)
    assert room.players[0].name == "Host"


@pytest.mark.asyncio
async def test_joins_keep_current_order_a_permutation(app):
    code, host_id = await _create(app)

    for i in range(6):
        to_sender, to_players = await _join(app, code.lower(), sid=f"s{i}", name="")
        assert to_sender == []
        room = await app.state.repo.get_room(code)
        assert sorted(room.current_order) == sorted(p.id for p in room.players)
        assert len(set(room.current_order)) == len(room.players)
        # everybody in the room gets a fresh state
        assert {pid for pid, _ in to_players} == {p.id for p in room.players}

    room = await app.state.repo.get_room(code)
    assert room.players[-1].name == "Player"
    assert [p.is_host for p in room.players].count(True) == 1
    assert room.host_id == host_id == room.players[0].id
    # distinct cosmetic identities while the palette lasts
    assert len({(p.color, p.icon) for p in room.players}) == len(room.players)


@pytest.mark.asyncio
async def test_join_unknown_room_errors_without_side_effects(app):
    code, _ = await _create(app)
    before = (await app.state.repo.get_room(code)).model_dump()

    to_sender, to_players = await _join(app, "zzzz", sid="s-x")

    assert [e.type for e in to_sender] == ["ERROR"]
    assert to_sender[0].code == "ROOM_NOT_FOUND"
    assert to_players == []
    assert (await app.state.repo.get_room(code)).model_dump() == before
    assert app.state.sessions.bindings("s-x") == []


@pytest.mark.asyncio
async def test_join_full_room_is_refused(small_app):
    code, _ = await _create(small_app)
    await _join(small_app, code, sid="s1")

    to_sender, to_players = await _join(small_app, code, sid="s2")

    assert to_sender[0].type == "ERROR"
    assert to_sender[0].code == "ROOM_FULL"
    assert to_players == []
    assert len((await small_app.state.repo.get_room(code)).players) == 2


@pytest.mark.asyncio
async def test_same_connection_joining_twice_keeps_one_player(app):
    code, _ = await _create(app)
    _, first = await _join(app, code, sid="s1")
    _, again = await _join(app, code, sid="s1")

    room = await app.state.repo.get_room(code)
    assert len(room.players) == 2
    assert [pid for pid, _ in again] == [room.players[1].id]


@pytest.mark.asyncio
async def test_disconnect_marks_player_and_broadcasts(app):
    code, host_id = await _create(app)
    await _join(app, code, sid="s1", name="Gus")
    room = await app.state.repo.get_room(code)
    guest_id = room.players[1].id

    to_sender, to_players = await handle_disconnect(app=app, sid="s1")

    assert to_sender == []
    assert {pid for pid, _ in to_players} == {host_id, guest_id}
    assert [p.connected for p in room.players] == [True, False]
    # the player stays in the room and in the ordering
    assert guest_id in room.current_order
    assert app.state.sessions.sid_for(guest_id) is None


@pytest.mark.asyncio
async def test_disconnect_of_unknown_session_is_quiet(app):
    await _create(app)
    assert await handle_disconnect(app=app, sid="nobody") == ([], [])
    assert await handle_disconnect(app=app, sid=None) == ([], [])
