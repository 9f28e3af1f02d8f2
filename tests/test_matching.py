"""Tests for client matching strategies."""

from models.matching import (
    Ambiguous,
    Confident,
    MatchResult,
    MatchStrategy,
    Unmatched,
    classify,
)
from services.matching import ClientMatcher, contains_word

matcher = ClientMatcher()


def strategies(title, names, keywords=()):
    return [(r.client_name, r.strategy) for r in matcher.find_matches_with_strategy(title, names, keywords)]


def test_full_name_match():
    assert strategies("Session with John Doe", ["John Doe", "Jane Smith"]) == [
        ("John Doe", MatchStrategy.FULL_NAME)
    ]


def test_case_and_accent_insensitive():
    assert matcher.find_matches("ΒΑΣΙΛΙΚΗ ΣΤΑΙΚΟΥΡΑ Μετρητά", ["Βασιλική Σταικούρα"]) == [
        "Βασιλική Σταικούρα"
    ]


def test_client_name_extra_words_are_ignored():
    assert matcher.find_matches("Μαρία Παπαδοπούλου 10:00", ["Μαρία Παπαδοπούλου Online"]) == [
        "Μαρία Παπαδοπούλου Online"
    ]


def test_reversed_name():
    assert strategies("Κουσουλού Ζωή Ραντεβού", ["Ζωή Κουσουλού"]) == [
        ("Ζωή Κουσουλού", MatchStrategy.REVERSED_NAME)
    ]


def test_dash_segment():
    names = ["Ndrekaj Ornela - Ντρεκαι Ορνελα"]
    assert strategies("Ντρεκαι Ορνελα 10:00", names) == [
        ("Ndrekaj Ornela - Ντρεκαι Ορνελα", MatchStrategy.DASH_SEGMENT)
    ]
    assert strategies("Ndrekaj Ornela", names) == [
        ("Ndrekaj Ornela - Ντρεκαι Ορνελα", MatchStrategy.FULL_NAME)
    ]


def test_single_word_client_name():
    assert strategies("Ραντεβού Κώστας", ["Κώστας"]) == [("Κώστας", MatchStrategy.SINGLE_NAME)]


def test_surname_whole_word():
    assert strategies("Συνεδρία Παπαδόπουλος", ["Κωνσταντίνος Παπαδόπουλος"]) == [
        ("Κωνσταντίνος Παπαδόπουλος", MatchStrategy.SURNAME)
    ]


def test_surname_must_be_whole_word():
    assert matcher.find_matches("Συνεδρία Παπαδόπουλου", ["Κωνσταντίνος Παπαδόπουλος"]) == []


def test_first_name_whole_word():
    assert strategies("Συνεδρία με Κωνσταντίνος", ["Κωνσταντίνος Παπαδόπουλος"]) == [
        ("Κωνσταντίνος Παπαδόπουλος", MatchStrategy.FIRST_NAME)
    ]


def test_short_partial_names_are_ignored():
    # "Ana" and "Lee" are too short for the surname/first-name strategies
    assert matcher.find_matches("Ana meeting with Lee", ["Ana Lee"]) == []


def test_no_match_for_different_name():
    assert matcher.find_matches("Session with Alice Brown", ["John Doe"]) == []


def test_blank_title_yields_nothing():
    assert matcher.find_matches("", ["John Doe"]) == []
    assert matcher.find_matches("   ", ["John Doe"], ["supervision"]) == []


def test_special_keyword_preempts_clients():
    result = matcher.find_matches(
        "Εποπτεία Ζωή Κουσουλού", ["Ζωή Κουσουλού", "Ζωή Άλλη"], ["Supervision", "Εποπτεία"]
    )
    assert result == ["Εποπτεία"]


def test_special_keyword_is_accent_insensitive():
    assert strategies("supervision meeting", ["John Doe"], ["Supervision"]) == [
        ("Supervision", MatchStrategy.SPECIAL_KEYWORD)
    ]


def test_multiple_clients_are_all_returned():
    names = ["Μαρία Παπαδοπούλου", "Μαρία Γεωργίου"]
    assert matcher.find_matches("Μαρία 10:00", names) == names


def test_matching_is_deterministic():
    names = ["Μαρία Παπαδοπούλου", "Μαρία Γεωργίου", "Ζωή Κουσουλού"]
    first = matcher.find_matches("Μαρία Κουσουλού Ζωή", names, ["Supervision"])
    second = matcher.find_matches("Μαρία Κουσουλού Ζωή", names, ["Supervision"])
    assert first == second


def test_blank_and_duplicate_client_names_are_skipped():
    assert matcher.find_matches("John Doe", ["", "  ", "John Doe", "John Doe"]) == ["John Doe"]


def test_contains_word_tolerates_punctuation():
    assert contains_word("ραντεβου (κουσουλου)", "κουσουλου")
    assert not contains_word("κουσουλουδα", "κουσουλου")


def test_classify_confidence_tiers():
    strong = MatchResult("Ζωή Κουσουλού", MatchStrategy.FULL_NAME, "ζωη κουσουλου")
    weak = MatchResult("Ζωή Κουσουλού", MatchStrategy.FIRST_NAME, "ζωη")
    other = MatchResult("Ζωή Άλλη", MatchStrategy.FIRST_NAME, "ζωη")

    assert classify([]) == Unmatched()
    assert classify([strong]) == Confident("Ζωή Κουσουλού")
    assert classify([weak]) == Ambiguous(("Ζωή Κουσουλού",))
    assert classify([strong, other]) == Ambiguous(("Ζωή Κουσουλού", "Ζωή Άλλη"))


def test_match_event_builds_candidate(make_event):
    event = make_event("Κουσουλού Ζωή")
    candidate = matcher.match_event(event, ["Ζωή Κουσουλού"])
    assert candidate.event is event
    assert candidate.client_names == ("Ζωή Κουσουλού",)
    assert candidate.confidence == Confident("Ζωή Κουσουλού")
