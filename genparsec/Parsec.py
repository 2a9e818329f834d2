import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Iterable, Optional, Sequence, Tuple, TypeVar, Union

from .Either import Left, Right, match

logger = logging.getLogger(__name__)

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')


class StateDesyncError(ValueError):
    """Raised when a state transition does not consume a prefix of the input."""


@dataclass(frozen=True)
class SourcePos:
    """Represents the current position in the input stream."""
    line: int = 1
    column: int = 1
    offset: int = 0

    def update(self, consumed: str) -> 'SourcePos':
        """Position after consuming `consumed` from here."""
        return update_pos(self, consumed)

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class State:
    """Parser state: the remaining input and where it starts."""
    input: str
    pos: SourcePos = field(default_factory=SourcePos)


@dataclass(frozen=True)
class ParseError:
    """A failure at a position, with what would have been accepted there."""
    message: str
    expected: Tuple[str, ...] = ()
    pos: SourcePos = field(default_factory=SourcePos)

    def __post_init__(self):
        # Accept any sequence, store a tuple
        object.__setattr__(self, 'expected', tuple(self.expected))

    def __str__(self) -> str:
        text = f"Parse error at {self.pos}: {self.message}"
        if self.expected:
            text += f" (expected {', '.join(self.expected)})"
        return text

    def render(self, source: str) -> str:
        """
        Formats the error with the offending source line and a caret under
        the failing column.
        """
        lines = source.split('\n')
        line_text = lines[self.pos.line - 1] if self.pos.line <= len(lines) else ""
        caret = " " * (self.pos.column - 1) + "^"
        return f"{self}\n{line_text}\n{caret}"


@dataclass(frozen=True)
class ParserOptions:
    """Per-parser settings. `name` is a diagnostic label only."""
    name: Optional[str] = None


ParseResult = Union[Right[Tuple[T, State]], Left[ParseError]]
# Right((value, next_state)) on success, Left(error) on failure


# --- Position & state tracking ---

def initial_state(input_str: str) -> State:
    return State(input_str, SourcePos(1, 1, 0))


def update_pos_char(pos: SourcePos, c: str) -> SourcePos:
    """Position after a single character."""
    if c == '\n':
        return SourcePos(pos.line + 1, 1, pos.offset + 1)
    return SourcePos(pos.line, pos.column + 1, pos.offset + 1)


def update_pos(pos: SourcePos, consumed: str) -> SourcePos:
    """
    Position after `consumed`. Equivalent to folding `update_pos_char` over
    the text, but counts newlines in one pass instead of per character.
    """
    if not consumed:
        return pos
    length = len(consumed)
    newlines = consumed.count('\n')
    if newlines == 0:
        return SourcePos(pos.line, pos.column + length, pos.offset + length)
    # Column restarts after the last newline
    column = length - consumed.rfind('\n')
    return SourcePos(pos.line + newlines, column, pos.offset + length)


def consume_string(state: State, consumed: Optional[str] = None) -> State:
    """
    The state after `consumed` has been taken off the front of the input.
    Input and position always move together.
    """
    if not consumed:
        return state
    if not state.input.startswith(consumed):
        raise StateDesyncError(
            f"Cannot consume {consumed!r} at {state.pos}: input does not start with it")
    return State(state.input[len(consumed):], update_pos(state.pos, consumed))


def update_state(old_state: State, new_state: State) -> State:
    """
    Re-anchors `new_state` on `old_state`: whatever `new_state` dropped from
    the front of `old_state.input` is consumed from `old_state`, so the
    position is derived from the old one rather than trusted.
    """
    consumed_len = len(old_state.input) - len(new_state.input)
    if consumed_len < 0 or not old_state.input.endswith(new_state.input):
        raise StateDesyncError(
            f"State at {new_state.pos} is not reachable from {old_state.pos} by consuming input")
    return consume_string(old_state, old_state.input[:consumed_len])


class Parsec(Generic[T]):
    """
    A parser: a function from State to ParseResult, plus options and an
    optional error-message override. Combinators never mutate a parser,
    they return new ones.
    """
    def __init__(self,
                 parse_fn: Callable[[State], ParseResult[T]],
                 options: Optional[ParserOptions] = None,
                 error_message: Optional[str] = None):
        self.parse_fn = parse_fn
        self.options = options or ParserOptions()
        self.error_message = error_message

    def __call__(self, state: State) -> ParseResult[T]:
        return self.parse_fn(state)

    def __repr__(self) -> str:
        if self.options.name:
            return f"<Parsec {self.options.name}>"
        return "<Parsec>"

    def __iter__(self):
        # Lets a gen body write `value = yield from parser`
        value = yield self
        return value

    def _overridden(self, result: ParseResult[Any]) -> ParseResult[Any]:
        if self.error_message is not None and isinstance(result, Left):
            err = result.left
            return Parsec.failure(self.error_message, err.expected, err.pos)
        return result

    # --- Result constructors ---

    @staticmethod
    def succeed(value: T, state: State, consumed: Optional[str] = None) -> ParseResult[T]:
        """Success with `value`, resuming after `consumed`."""
        return Right((value, consume_string(state, consumed)))

    @staticmethod
    def failure(message: str, expected: Iterable[str], pos: SourcePos) -> ParseResult[Any]:
        return Left(ParseError(message, tuple(expected), pos))

    @staticmethod
    def fail(message: str, expected: Sequence[str] = ()) -> 'Parsec[Any]':
        """A parser that always fails where it is run, consuming nothing."""
        def parse(state: State) -> ParseResult[Any]:
            return Parsec.failure(message, expected, state.pos)
        return Parsec(parse)

    @staticmethod
    def pure(value: T) -> 'Parsec[T]':
        """A parser that succeeds with `value` without consuming input."""
        def parse(state: State) -> ParseResult[T]:
            return Right((value, state))
        return Parsec(parse)

    @staticmethod
    def do() -> 'Parsec[Dict[str, Any]]':
        """The empty record to start a chain of `bind` calls from."""
        return Parsec.pure({})

    # --- Running ---

    def run(self, input_str: str) -> ParseResult[T]:
        result = self(initial_state(input_str))
        if isinstance(result, Left) and self.error_message is not None:
            logger.debug("%r failed at %s, reporting %r instead of %r",
                         self, result.left.pos, self.error_message, result.left.message)
            return self._overridden(result)
        return result

    # --- Error annotation ---

    def error(self, message: str) -> 'Parsec[T]':
        """
        Replaces the message of any failure with `message`. The position and
        the expected list of the original failure are kept.
        """
        def parse(state: State) -> ParseResult[T]:
            result = self(state)
            if isinstance(result, Left):
                return Parsec.failure(message, result.left.expected, result.left.pos)
            return result
        return Parsec(parse, self.options, message)

    def error2(self, on_error: Callable[[ParseError], str]) -> 'Parsec[T]':
        """Like `error`, with the message computed from the original failure."""
        def parse(state: State) -> ParseResult[T]:
            result = self(state)
            if isinstance(result, Left):
                err = result.left
                return Parsec.failure(on_error(err), err.expected, err.pos)
            return result
        return Parsec(parse, self.options)

    error_with = error2

    def named(self, name: str) -> 'Parsec[T]':
        return Parsec(self.parse_fn, ParserOptions(name=name), self.error_message)

    # --- Combinators ---

    # Functor map (<$>)
    def map(self, f: Callable[[T], U]) -> 'Parsec[U]':
        def parse(state: State) -> ParseResult[U]:
            result = self._overridden(self(state))
            return match(result,
                         on_left=Left,
                         on_right=lambda ok: Right((f(ok[0]), ok[1])))
        return Parsec(parse, self.options)

    # Monadic bind (>>=)
    def flat_map(self, f: Callable[[T], 'Parsec[U]']) -> 'Parsec[U]':
        def parse(state: State) -> ParseResult[U]:
            result = self._overridden(self(state))
            if isinstance(result, Left):
                return result
            value, new_state = result.right
            return f(value)(new_state)
        return Parsec(parse, self.options)

    # Also available as >>
    def __rshift__(self, f: Callable[[T], 'Parsec[U]']) -> 'Parsec[U]':
        return self.flat_map(f)

    # Sequence, keeping both values (&)
    def zip(self, other: 'Parsec[U]') -> 'Parsec[Tuple[T, U]]':
        def parse(state: State) -> ParseResult[Tuple[T, U]]:
            result_a = self(state)
            if isinstance(result_a, Left):
                return result_a
            a, rest_a = result_a.right
            result_b = other(rest_a)
            if isinstance(result_b, Left):
                return result_b
            b, rest_b = result_b.right
            return Right(((a, b), rest_b))
        return Parsec(parse)

    def __and__(self, other: 'Parsec[U]') -> 'Parsec[Tuple[T, U]]':
        return self.zip(other)

    def bind(self, key: str,
             other: Union['Parsec[Any]', Callable[[Any], 'Parsec[Any]']]) -> 'Parsec[Dict[str, Any]]':
        """
        Runs this parser for a record (a mapping), then `other` for a field
        value, and returns a new record with the value stored under `key`.
        `other` is a parser, or a function from the record so far to one.
        """
        if isinstance(other, Parsec):
            next_parser = lambda _: other
        elif callable(other):
            next_parser = other
        else:
            raise TypeError(f"bind expects a Parsec or a callable, got {type(other).__name__}")

        def parse(state: State) -> ParseResult[Dict[str, Any]]:
            result = self._overridden(self(state))
            if isinstance(result, Left):
                return result
            record, new_state = result.right
            field_parser = next_parser(record)
            if not isinstance(field_parser, Parsec):
                raise TypeError(f"bind field {key!r}: expected a Parsec, got {type(field_parser).__name__}")
            field_result = field_parser(new_state)
            if isinstance(field_result, Left):
                return field_result
            value, final_state = field_result.right
            return Right(({**record, key: value}, final_state))
        return Parsec(parse, self.options)

    def transform(self, f: Callable[[T, State], Tuple[U, State]]) -> 'Parsec[U]':
        """
        Maps over the value and the state together. The state `f` returns may
        only drop input from the front; its position is recomputed from the
        state this parser produced.
        """
        def parse(state: State) -> ParseResult[U]:
            result = self._overridden(self(state))
            if isinstance(result, Left):
                return result
            value, new_state = result.right
            new_value, transformed = f(value, new_state)
            return Right((new_value, update_state(new_state, transformed)))
        return Parsec(parse, self.options)

    # --- Sequential composition ---

    @staticmethod
    def gen(f: Callable[[], Any]) -> 'Parsec[Any]':
        """
        Builds a parser from a generator function. Each `yield parser` runs
        that parser from the current state and sends its value back in; the
        generator's return value is the result. A returned Parsec is run
        from the final state instead. The first failure ends the parse.

        `f` is called on every run, so the parser can be reused.
        """
        def finish(value: Any, state: State) -> ParseResult[Any]:
            if isinstance(value, Parsec):
                return value(state)
            return Right((value, state))

        def parse(state: State) -> ParseResult[Any]:
            steps = f()
            try:
                item = next(steps)
            except StopIteration as stop:
                return finish(stop.value, state)
            # Unrolled flat_map chain, one iteration per yielded parser
            while True:
                if not isinstance(item, Parsec):
                    steps.close()
                    raise TypeError(f"Expected a Parsec to be yielded, got {type(item).__name__}")
                result = item._overridden(item(state))
                if isinstance(result, Left):
                    steps.close()
                    return result
                value, state = result.right
                try:
                    item = steps.send(value)
                except StopIteration as stop:
                    return finish(stop.value, state)
        return Parsec(parse)
