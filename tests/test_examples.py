import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "examples"))

from settings_parser import settings  # noqa: E402
from genparsec.Parsec import SourcePos  # noqa: E402
from genparsec.Prim import run_parser  # noqa: E402


def test_settings_parse():
    source = 'width = 80\n\ntitle = "Report"\n'
    assert run_parser(settings, source)[0] == {"width": 80, "title": "Report"}


def test_settings_error_position():
    res, err = run_parser(settings, "width = 80\nheight 5\n")
    assert res is None
    assert err.message == "expected '=' after setting name"
    assert err.pos == SourcePos(2, 8, 18)


def test_settings_unterminated_string():
    res, err = run_parser(settings, 'title = "Report\n')
    assert err.message == "unterminated string"
    assert err.pos.line == 1
