import pytest

from hints_online.engine.guess_evaluator import MatchOutcome, SeenGuessIds, evaluate, normalize_text


def test_normalize_strips_accents_and_punctuation():
    assert normalize_text("  Crème Brûlée! ") == "cremebrulee"
    assert normalize_text("Sinter-klaas 2024") == "sinterklaas2024"
    assert normalize_text("") == ""


@pytest.mark.parametrize(
    "guess,secret,expected",
    [
        ("fiets", "Fiets", MatchOutcome.MATCH),
        ("ik denk fiets", "Fiets", MatchOutcome.MATCH),
        ("Kerst-boom!", "kerstboom", MatchOutcome.MATCH),
        ("Café", "cafe", MatchOutcome.MATCH),
        ("kat", "Kat", MatchOutcome.MATCH),
        ("katten", "Kat", MatchOutcome.NO_MATCH),  # secret trop court pour l'inclusion
        ("fiet", "Fiets", MatchOutcome.NO_MATCH),
        ("anything", "!!!", MatchOutcome.NO_MATCH),
        ("", "", MatchOutcome.NO_MATCH),
    ],
)
def test_evaluate(guess, secret, expected):
    assert evaluate(guess, secret) is expected


def test_seen_ids_reports_resends():
    seen = SeenGuessIds(capacity=3)

    assert seen.check_and_add("a") is True
    assert seen.check_and_add("a") is False
    assert "a" in seen


def test_seen_ids_clears_when_full():
    seen = SeenGuessIds(capacity=2)
    seen.check_and_add("a")
    seen.check_and_add("b")

    assert seen.check_and_add("c") is True
    assert len(seen) == 1
    assert "a" not in seen
