from unittest.mock import Mock

import orjson

from hints_online.models.messages import JoinLobby, SendGuess, StateUpdate, parse_message
from hints_online.services.message_router import MessageRouter


def _engine():
    engine = Mock()
    engine.join.return_value = {"ok": True, "added": True}
    engine.signal_ready.return_value = {"ok": False, "error": "wrong_phase"}
    engine.submit_guess.return_value = {"ok": True, "matched": False}
    return engine


def test_join_lobby_routes_to_engine():
    engine = _engine()
    router = MessageRouter(engine)

    msg = router.dispatch(
        {"type": "JOIN_LOBBY", "player": {"id": "p1", "name": "Anna", "avatarSeed": 4, "score": 9}}
    )

    assert isinstance(msg, JoinLobby)
    player = engine.join.call_args.args[0]
    assert (player.id, player.avatar_seed) == ("p1", 4)


def test_start_round_and_guess_accept_json_text():
    engine = _engine()
    router = MessageRouter(engine)

    router.dispatch('{"type": "START_ROUND", "playerId": "p1"}')
    msg = router.dispatch(
        orjson.dumps(
            {
                "type": "SEND_GUESS",
                "guess": {"id": "g1", "playerId": "p2", "playerName": "Bram", "text": "fiets", "timestamp": 5},
            }
        )
    )

    engine.signal_ready.assert_called_once_with("p1")
    assert isinstance(msg, SendGuess)
    assert engine.submit_guess.call_args.args[0].player_id == "p2"


def test_malformed_messages_are_dropped():
    engine = _engine()
    router = MessageRouter(engine)

    assert router.dispatch("not json") is None
    assert router.dispatch({"type": "KICK_PLAYER"}) is None
    assert router.dispatch({"type": "START_ROUND"}) is None
    assert router.dispatch([1, 2]) is None
    engine.signal_ready.assert_not_called()


def test_state_update_goes_to_callback_only():
    engine = _engine()
    received = []
    router = MessageRouter(engine, on_state_update=received.append)

    msg = router.dispatch({"type": "STATE_UPDATE", "state": {"phase": "SPINNING"}, "sentAt": 10})

    assert isinstance(msg, StateUpdate)
    assert received[0].state.phase.value == "SPINNING"
    engine.join.assert_not_called()


def test_state_update_wire_shape_is_camel_case():
    msg = parse_message({"type": "STATE_UPDATE", "state": {"activeTheme": "summer"}, "sentAt": 1})

    wire = msg.to_wire()

    assert wire["sentAt"] == 1
    assert wire["state"]["activeTheme"] == "summer"
    assert wire["state"]["currentRound"] is None


def test_router_without_engine_drops_intents():
    received = []
    router = MessageRouter(on_state_update=received.append)

    msg = router.dispatch({"type": "JOIN_LOBBY", "player": {"id": "p1", "name": "Anna"}})
    router.dispatch({"type": "START_ROUND", "playerId": "p1"})

    assert isinstance(msg, JoinLobby)
    assert received == []
