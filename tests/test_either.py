import pytest
from hypothesis import given, strategies as st

from genparsec.Either import Left, Right, is_left, is_right, left, match, right


@given(st.integers() | st.text())
def test_constructors_and_predicates(v):
    assert is_left(left(v)) and not is_right(left(v))
    assert is_right(right(v)) and not is_left(right(v))
    assert left(v) == Left(v)
    assert right(v) == Right(v)


def test_left_and_right_never_compare_equal():
    assert left(1) != right(1)


def test_match_calls_exactly_one_branch():
    calls = []

    def on_left(x):
        calls.append(("left", x))
        return "L"

    def on_right(x):
        calls.append(("right", x))
        return "R"

    assert match(left(1), on_left=on_left, on_right=on_right) == "L"
    assert match(right(2), on_left=on_left, on_right=on_right) == "R"
    assert calls == [("left", 1), ("right", 2)]


def test_match_passes_payload_unchanged():
    payload = ("value", object())
    assert match(right(payload), on_left=lambda e: None, on_right=lambda p: p) is payload


def test_match_rejects_non_either():
    with pytest.raises(TypeError):
        match(42, on_left=lambda e: e, on_right=lambda v: v)


def test_variants_are_immutable():
    r = right(1)
    with pytest.raises(AttributeError):
        r.right = 2
