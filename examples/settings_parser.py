"""
Parses a small `name = value` settings format, one setting per line:

    width = 80
    title = "Report"

Blank lines are allowed between settings. Values are integers or
double-quoted strings.
"""
import sys

from genparsec.Parsec import Parsec
from genparsec.Prim import do, fail, generate, run_parser
from genparsec.Char import char, satisfy


def span(pred, description):
    """Consumes the longest run of characters matching `pred` (maybe empty)."""
    def parse(state):
        n = 0
        while n < len(state.input) and pred(state.input[n]):
            n += 1
        return Parsec.succeed(state.input[:n], state, state.input[:n])
    return Parsec(parse).named(description)


blanks = span(lambda c: c in " \t", "blanks")
blank_lines = span(str.isspace, "blank lines")


@generate("identifier")
def identifier():
    first = yield satisfy(lambda c: c.isalpha() or c == '_', "identifier")
    rest = yield span(lambda c: c.isalnum() or c == '_', "identifier")
    return first + rest


@generate("value")
def value():
    first = yield satisfy(lambda c: c == '"' or c.isdigit(), "value")
    if first == '"':
        body = yield span(lambda c: c not in '"\n', "string body")
        yield char('"').error("unterminated string")
        return body
    rest = yield span(str.isdigit, "digits")
    return int(first + rest)


def lexeme(p):
    return p.flat_map(lambda v: blanks.map(lambda _: v))


setting = (do()
           .bind("name", lexeme(identifier))
           .bind("eq", lexeme(char('=')).error("expected '=' after setting name"))
           .bind("value", lexeme(value)))


@generate("settings")
def settings():
    result = {}
    yield blank_lines
    while True:
        # The core has no alternation, so look at the remaining input directly
        rest = yield Parsec(lambda state: Parsec.succeed(state.input, state))
        if not rest:
            return result
        entry = yield setting
        if entry["name"] in result:
            return fail(f"duplicate setting {entry['name']!r}")
        result[entry["name"]] = entry["value"]
        yield blank_lines


if __name__ == "__main__":
    if len(sys.argv) < 2:
        source = sys.stdin.read()
    else:
        with open(sys.argv[1]) as f:
            source = f.read()
    parsed, err = run_parser(settings, source)
    if err:
        print(err.render(source))
        sys.exit(1)
    for name, val in parsed.items():
        print(f"{name} = {val!r}")
