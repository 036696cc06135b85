from hints_online.models.game import Phase
from hints_online.services.guest_client import GuestClient


def _update(sent_at, phase="ROUND_INTRO", player_id="p1", word="Fiets"):
    return {
        "type": "STATE_UPDATE",
        "sentAt": sent_at,
        "state": {
            "phase": phase,
            "currentRound": {
                "playerId": player_id,
                "timeLeft": 20,
                "cardIndex": 1,
                "totalCards": 3,
                "secretWord": word,
            },
        },
    }


def test_intents_are_camel_case():
    guest = GuestClient("p1", "Anna", avatar_seed=3, clock=lambda: 2.0)

    assert guest.join_message() == {
        "type": "JOIN_LOBBY",
        "player": {"id": "p1", "name": "Anna", "avatarSeed": 3, "score": 0},
    }
    assert guest.start_message() == {"type": "START_ROUND", "playerId": "p1"}

    guess = guest.guess_message("  fiets ")["guess"]
    assert guess["text"] == "fiets"
    assert guess["playerName"] == "Anna"
    assert guess["timestamp"] == 2000
    assert guess["id"] != guest.guess_message("fiets")["guess"]["id"]


def test_blank_guess_is_refused():
    assert GuestClient("p1", "Anna").guess_message("   ") is None


def test_older_updates_are_discarded():
    guest = GuestClient("p1", "Anna")

    assert guest.apply(_update(200, phase="ROUND_ACTIVE")) is True
    assert guest.apply(_update(100, phase="SPINNING")) is False

    assert guest.phase == Phase.ROUND_ACTIVE


def test_secret_word_only_for_the_describer():
    me = GuestClient("p1", "Anna")
    other = GuestClient("p2", "Bram")
    for guest in (me, other):
        guest.apply(_update(1))

    assert me.is_my_turn and me.secret_word == "Fiets"
    assert not other.is_my_turn and other.secret_word is None


def test_non_state_messages_are_ignored():
    guest = GuestClient("p1", "Anna")

    assert guest.apply({"type": "pong"}) is False
    assert guest.phase == Phase.LOBBY


def test_intents_echoed_to_a_guest_are_ignored():
    guest = GuestClient("p1", "Anna")
    other = GuestClient("p2", "Bram")

    assert guest.apply(other.join_message()) is False
    assert guest.apply(other.guess_message("fiets")) is False
    assert guest.state is None
