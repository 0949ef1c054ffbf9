"""Test :mod:`mpsparse.lines`."""

# ruff: noqa: S101

import pytest

from mpsparse.document import Location
from mpsparse.errors import PREVIEW_LENGTH, ParseError
from mpsparse.lines import LineKind, Span, classify, is_indented


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("* comment", LineKind.COMMENT),
        ("*", LineKind.COMMENT),
        ("", LineKind.BLANK),
        ("  \t ", LineKind.BLANK),
        ("    MARKER                 'MARKER'                 'INTEND'", LineKind.MARKER),
        ("    X1        R1        1", LineKind.DATA),
        ("ROWS", LineKind.DATA),
    ],
)
def test_classify(line: str, kind: LineKind) -> None:
    """Comments only start in the first column."""
    assert classify(line) is kind


def test_indented() -> None:
    """Headers start in the first column, records do not."""
    assert is_indented(" N  COST")
    assert is_indented("\tX1 R1 1")
    assert not is_indented("ROWS")
    assert not is_indented("")


def test_crlf() -> None:
    """LF and CRLF terminators may be mixed."""
    span = Span("NAME\r\nROWS\n N  COST\r\n")
    assert span.peek() == "NAME"
    span = span.advance()
    assert (span.peek(), span.line) == ("ROWS", 2)
    span = span.advance()
    assert span.peek() == " N  COST"
    span = span.advance()
    assert span.at_end
    assert span.peek() is None


def test_missing_final_terminator() -> None:
    """The last line need not end with a newline."""
    span = Span("ENDATA")
    assert span.peek() == "ENDATA"
    assert span.advance().at_end


def test_skip_noise() -> None:
    """Comment and blank lines are skipped without losing count."""
    span = Span("* header\n\n   \nROWS\n").skip_noise()
    assert span.peek() == "ROWS"
    assert span.line == 4


def test_advance_is_pure() -> None:
    """Lookahead never consumes input."""
    span = Span("ROWS\n E  R1\n")
    span.advance()
    assert span.peek() == "ROWS"


def test_location() -> None:
    """Columns are 1-based and count leading whitespace."""
    assert Span("   X1 R1 1\n", located=True).location() == Location(1, 4)
    assert Span("   X1 R1 1\n").location() is None


def test_error() -> None:
    """Errors point at the next line and carry a bounded preview."""
    span = Span("ROWS\n" + "x" * 1000).advance()
    error = span.error("boom")
    assert isinstance(error, ParseError)
    assert error.line == 2
    assert len(error.preview) == PREVIEW_LENGTH
    assert str(error).startswith("boom at line 2: 'xxx")
