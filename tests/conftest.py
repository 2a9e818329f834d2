# tests/conftest.py
import pytest

from genparsec.Either import Left, Right
from genparsec.Parsec import ParseResult, SourcePos, State


def assert_result_eq(res1: ParseResult, res2: ParseResult):
    """
    Deep comparison of two ParseResults.
    """
    if isinstance(res1, Right):
        assert isinstance(res2, Right), "Result mismatch: Right vs Left"
        value1, state1 = res1.right
        value2, state2 = res2.right
        assert value1 == value2
        assert state1.pos == state2.pos
        assert state1.input == state2.input
    else:
        assert isinstance(res1, Left)
        assert isinstance(res2, Left), "Result mismatch: Left vs Right"
        assert res1.left.message == res2.left.message
        assert res1.left.expected == res2.left.expected
        assert res1.left.pos == res2.left.pos


@pytest.fixture
def make_state():
    def _make(input_data, pos=None):
        return State(input_data, pos or SourcePos(1, 1, 0))

    return _make


@pytest.fixture(scope="session")
def result_eq():
    return assert_result_eq
