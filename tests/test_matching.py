"""Input matcher: prefix / exact / divergence and highlight segments."""

import pytest

from versescribe.services.matching import MatchState, Segment, highlight, match_state

VERSE = "태초에 하나님이 천지를 창조하시니라"


@pytest.mark.parametrize("cut", range(len(VERSE)))
def test_every_strict_prefix_is_pending(cut):
    assert match_state(VERSE[:cut], VERSE) is MatchState.PENDING


def test_full_text_matches():
    assert match_state(VERSE, VERSE) is MatchState.MATCH


def test_surrounding_whitespace_is_trimmed():
    assert match_state(f"  {VERSE}\n", VERSE) is MatchState.MATCH
    assert match_state("   ", VERSE) is MatchState.PENDING


def test_internal_spacing_is_significant():
    assert match_state("태초에  하나님이", VERSE) is MatchState.MISMATCH
    assert match_state(VERSE.replace(" ", ""), VERSE) is MatchState.MISMATCH


def test_punctuation_is_significant():
    target = "주 안에서 항상 기뻐하라, 내가 다시 말하노니 기뻐하라."
    assert match_state("주 안에서 항상 기뻐하라 내가", target) is MatchState.MISMATCH
    assert match_state(target[:-1], target) is MatchState.PENDING


def test_text_longer_than_target_is_mismatch():
    assert match_state(VERSE + " 아멘", VERSE) is MatchState.MISMATCH


def test_highlight_correct_prefix():
    assert highlight("태초에", VERSE) == [
        Segment("태초에", "affirmative"),
        Segment(VERSE[3:], "neutral"),
    ]


def test_highlight_wrong_prefix_marks_error():
    segments = highlight("태초의", VERSE)
    assert segments[0] == Segment("태초에", "error")
    assert segments[1].style == "neutral"


def test_highlight_empty_and_full():
    assert highlight("", VERSE) == [Segment(VERSE, "neutral")]
    assert highlight(VERSE, VERSE) == [Segment(VERSE, "affirmative")]
