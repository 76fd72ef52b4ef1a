import random

import pytest

from fehview.lists import Direction, jump, merge_sort, randomize, string_split


def _cmp(a, b):
    return (a > b) - (a < b)


def test_jump_empty_returns_none():
    assert jump([], 0, Direction.FORWARD, 1) is None


def test_jump_without_index_returns_start():
    assert jump(["a", "b", "c"], None, Direction.BACK, 5) == 0


def test_jump_forward_wraps_to_start():
    items = ["a", "b", "c"]
    assert jump(items, len(items) - 1, Direction.FORWARD, 1) == 0


def test_jump_back_wraps_to_end():
    items = ["a", "b", "c"]
    assert jump(items, 0, Direction.BACK, 1) == len(items) - 1


@pytest.mark.parametrize("start", [0, 1, 2, 3])
def test_jump_full_cycle_returns_to_start(start):
    items = list(range(4))
    assert jump(items, start, Direction.FORWARD, len(items)) == start
    assert jump(items, start, Direction.BACK, len(items)) == start


def test_jump_forward_then_back_is_identity():
    items = list(range(7))
    there = jump(items, 2, Direction.FORWARD, 3)
    assert jump(items, there, Direction.BACK, 3) == 2


def test_jump_zero_steps():
    assert jump([1, 2, 3], 1, Direction.FORWARD, 0) == 1


def test_randomize_is_permutation():
    items = list(range(20))
    shuffled = randomize(items, random.Random(1))
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_randomize_is_deterministic_for_seed():
    items = list(range(15))
    first = randomize(items, random.Random(42))
    second = randomize(items, random.Random(42))
    assert sorted(first) == items
    assert len(first) == 15
    assert first == second


@pytest.mark.parametrize("items", [[], ["only"]])
def test_randomize_short_lists_unchanged(items):
    assert randomize(items, random.Random(0)) == items


def test_merge_sort_matches_sorted():
    rng = random.Random(7)
    for length in range(12):
        values = [rng.randrange(10) for _ in range(length)]
        assert merge_sort(values, _cmp) == sorted(values)


def test_merge_sort_reverse_comparator():
    values = [3, 1, 4, 1, 5, 9, 2, 6]
    assert merge_sort(values, lambda a, b: _cmp(b, a)) == sorted(values, reverse=True)


def test_merge_sort_takes_right_on_tie():
    pairs = [(1, "a"), (1, "b")]
    result = merge_sort(pairs, lambda x, y: _cmp(x[0], y[0]))
    assert result == [(1, "b"), (1, "a")]


def test_merge_sort_does_not_modify_input():
    values = [5, 3, 1]
    merge_sort(values, _cmp)
    assert values == [5, 3, 1]


def test_string_split_basic():
    assert string_split("a,b,c", ",") == ["a", "b", "c"]


def test_string_split_drops_trailing_empty():
    assert string_split("a:b:", ":") == ["a", "b"]


def test_string_split_keeps_leading_and_inner_empty():
    assert string_split(",x,,y", ",") == ["", "x", "", "y"]


def test_string_split_empty_string():
    assert string_split("", ",") == []


def test_string_split_multichar_delimiter_roundtrip():
    pieces = ["one", "two", "three"]
    assert string_split("::".join(pieces), "::") == pieces


def test_string_split_no_delimiter_present():
    assert string_split("whole", ",") == ["whole"]


def test_string_split_empty_delimiter_rejected():
    with pytest.raises(ValueError):
        string_split("abc", "")