import logging

# Core
from .Either import Either, Left, Right, left, right, is_left, is_right, match
from .Parsec import (
    Parsec, State, ParseError, SourcePos, ParserOptions, ParseResult, StateDesyncError,
    initial_state, update_pos, update_pos_char, consume_string, update_state,
)
from .Prim import (
    run_parser, pure, fail, succeed, failure, do, gen, generate, lazy, trace,
)

# Reference primitives
from .Char import satisfy, char, string, any_char

logging.getLogger(__name__).addHandler(logging.NullHandler())
