from typing import Callable

from .Parsec import Parsec, ParseResult, State

# Reference recognizers. Each one reports what it took with
# Parsec.succeed, so input and position stay in step.


def satisfy(f: Callable[[str], bool], description: str = "character") -> Parsec[str]:
    """Succeeds for any character where f returns True. Returns the parsed character."""
    def parse(state: State) -> ParseResult[str]:
        if not state.input:
            return Parsec.failure("unexpected end of input", [description], state.pos)
        token = state.input[0]
        if f(token):
            return Parsec.succeed(token, state, token)
        return Parsec.failure(f"unexpected {token!r}", [description], state.pos)
    return Parsec(parse).named(description)


def char(c: str) -> Parsec[str]:
    """Parses a single character c and returns it."""
    return satisfy(lambda x: x == c, repr(c))


def any_char() -> Parsec[str]:
    return satisfy(lambda _: True, "any character")


def string(s: str) -> Parsec[str]:
    """Parses the exact string s and returns it."""
    def parse(state: State) -> ParseResult[str]:
        if state.input.startswith(s):
            return Parsec.succeed(s, state, s)
        found = state.input[:len(s)]
        message = f"unexpected {found!r}" if found else "unexpected end of input"
        return Parsec.failure(message, [repr(s)], state.pos)
    return Parsec(parse).named(repr(s))
