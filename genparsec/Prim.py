import logging
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

from .Either import match
from .Parsec import Parsec, ParseError, ParseResult, SourcePos, State, T

logger = logging.getLogger(__name__)


def pure(value: T) -> Parsec[T]:
    """Return a parser that succeeds with a value without consuming input."""
    return Parsec.pure(value)


def fail(msg: str, expected: Sequence[str] = ()) -> Parsec[Any]:
    """A parser that always fails with a message."""
    return Parsec.fail(msg, expected)


def succeed(value: T, state: State, consumed: Optional[str] = None) -> ParseResult[T]:
    return Parsec.succeed(value, state, consumed)


def failure(msg: str, expected: Iterable[str], pos: SourcePos) -> ParseResult[Any]:
    return Parsec.failure(msg, expected, pos)


def do() -> Parsec[Dict[str, Any]]:
    return Parsec.do()


def gen(f: Callable[[], Any]) -> Parsec[Any]:
    return Parsec.gen(f)


def generate(fn: Union[str, Callable[[], Any]]):
    """
    Decorator form of `gen`:

        @generate
        def assignment():
            name = yield identifier
            yield char('=')
            value = yield expression
            return (name, value)

    `@generate("label")` also names the parser.
    """
    if isinstance(fn, str):
        return lambda f: Parsec.gen(f).named(fn)
    return Parsec.gen(fn).named(fn.__name__)


def lazy(thunk: Callable[[], Parsec[T]]) -> Parsec[T]:
    """Defers building a parser until it runs. Needed for recursive grammars."""
    def parse(state: State) -> ParseResult[T]:
        return thunk()(state)
    return Parsec(parse)


def trace(label: str) -> Parsec[None]:
    """Logs the remaining input and position. Consumes nothing, always succeeds."""
    def parse(state: State) -> ParseResult[None]:
        logger.debug("%s: %r at %s", label, state.input[:30], state.pos)
        return Parsec.succeed(None, state)
    return Parsec(parse)


def run_parser(parser: Parsec[T], input_str: str) -> Tuple[Optional[T], Optional[ParseError]]:
    """Runs `parser` on `input_str`, returning (value, None) or (None, error)."""
    return match(parser.run(input_str),
                 on_left=lambda err: (None, err),
                 on_right=lambda ok: (ok[0], None))
