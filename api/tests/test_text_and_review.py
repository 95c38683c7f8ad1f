from coach_api.services.review_service import find_corrections_for_turn, user_turn_ratio
from coach_api.services.session_service import compute_adoption_score
from coach_api.utils.text_utils import contains_ignore_case, normalize_phrase, strip_code_fences


def test_normalize_phrase_keeps_punctuation():
    assert normalize_phrase("  I'd   like to...  ") == "I'd like to..."


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


def test_contains_ignore_case_never_matches_empty_needle():
    assert contains_ignore_case("Hello World", "WORLD")
    assert not contains_ignore_case("Hello World", "")


def test_corrections_attach_only_to_user_turns():
    corrections = [{"example": "I go"}, {"example": ""}]
    assert find_corrections_for_turn({"role": "user", "text": "Yesterday i GO home"}, corrections) == [{"example": "I go"}]
    assert find_corrections_for_turn({"role": "tutor", "text": "I go"}, corrections) == []


def test_user_turn_ratio():
    assert user_turn_ratio([]) == 0
    assert user_turn_ratio([{"role": "user"}, {"role": "tutor"}, {"role": "user"}]) == 67


def test_adoption_score():
    assert compute_adoption_score([], []) == 0.0
    assert compute_adoption_score(["a", "a"], ["b"]) == 0.5
    assert compute_adoption_score(["a"], ["a"]) == 1.0
