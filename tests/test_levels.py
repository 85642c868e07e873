from __future__ import annotations

import pytest

from core.levels import LEVEL_KEYWORDS, InvalidLevelError, input_from_level, level_from_input


def test_keywords_round_trip_to_same_level() -> None:
    for keyword in LEVEL_KEYWORDS:
        level = level_from_input(keyword)
        assert level_from_input(input_from_level(level)) == level


def test_keywords_map_to_ordered_levels() -> None:
    assert [level_from_input(keyword) for keyword in LEVEL_KEYWORDS] == [1, 2, 3, 4]


def test_keywords_are_case_insensitive() -> None:
    assert level_from_input("HiLights") == 3
    assert level_from_input("NONE") == 4
    assert level_from_input("Messages") == 2


def test_digits_are_returned_without_range_check() -> None:
    assert level_from_input("2") == 2
    assert level_from_input("7") == 7


def test_unknown_input_decays_to_all() -> None:
    assert level_from_input("loud") == 1
    assert level_from_input("") == 1
    assert level_from_input("hilight") == 1


@pytest.mark.parametrize("level", [0, 5, -1, "1", True, 2.0])
def test_input_from_level_rejects_anything_but_1_to_4(level) -> None:
    with pytest.raises(InvalidLevelError):
        input_from_level(level)


def test_input_from_level_returns_keyword() -> None:
    assert input_from_level(1) == "all"
    assert input_from_level(4) == "none"
