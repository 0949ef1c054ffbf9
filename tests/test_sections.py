"""Test :mod:`mpsparse.sections`."""

# ruff: noqa: S101

import pytest

from mpsparse import sections
from mpsparse.document import (
    ConeConstraint,
    ConeMember,
    ConeType,
    DataLine,
    ObjectiveSense,
    QuadraticConstraint,
    QuadraticTerm,
    RowDefinition,
    RowType,
    RowValuePair,
    SosMember,
    SosSet,
    SosType,
)
from mpsparse.errors import ParseError
from mpsparse.lines import Span


def test_rows_boundary() -> None:
    """ROWS stops right before the next header."""
    records, rest = sections.rows(Span("ROWS\n E R1\nCOLUMNS\n    X1 R1 1\n"))
    assert records == (RowDefinition(RowType.EQUALITY, "R1"),)
    assert rest.peek() == "COLUMNS"
    assert rest.line == 3


def test_rows_skip_noise() -> None:
    """Comments and blank lines may sit between records."""
    text = "* rows follow\nROWS\n N  COST\n\n* limit\n L  LIM1\nCOLUMNS\n"
    records, rest = sections.rows(Span(text))
    assert [row.row_name for row in records] == ["COST", "LIM1"]
    assert rest.peek() == "COLUMNS"


def test_rows_missing() -> None:
    """ROWS is mandatory."""
    with pytest.raises(ParseError, match="expected ROWS section") as info:
        sections.rows(Span("* nothing\nCOLUMNS\n"))
    assert info.value.line == 2


def test_rows_unexpected_argument() -> None:
    """Headers without arguments reject trailing words."""
    with pytest.raises(ParseError, match="unexpected text after ROWS"):
        sections.rows(Span("ROWS  extra\n"))


def test_record_error_line() -> None:
    """Record errors report the line they occurred on."""
    with pytest.raises(ParseError, match="invalid row type") as info:
        sections.rows(Span("ROWS\n N  COST\n X  R1\n"))
    assert info.value.line == 3
    assert info.value.preview.startswith(" X  R1")


def test_malformed_record() -> None:
    """A line neither mode understands aborts the section."""
    with pytest.raises(ParseError, match="malformed RHS line") as info:
        sections.rhs(Span("RHS\n    RHS1 R1\n"))
    assert info.value.line == 2


def test_optional_section_absent() -> None:
    """Absent optional sections consume nothing."""
    span = Span("BOUNDS\n")
    records, rest = sections.rhs(span)
    assert records is None
    assert rest == span


def test_optional_section_empty() -> None:
    """A bare header yields an empty tuple, not ``None``."""
    records, rest = sections.ranges(Span("RANGES\nENDATA\n"))
    assert records == ()
    assert rest.peek() == "ENDATA"


@pytest.mark.parametrize(
    ("text", "name"),
    [
        ("NAME          TESTPROB\n", "TESTPROB"),
        ("NAME example\n", "example"),
        ("NAME          my model\n", "my model"),
        ("NAME\n", ""),
    ],
)
def test_name(text: str, name: str) -> None:
    """The name follows a fixed run or a single space."""
    found, rest = sections.name(Span(text))
    assert found == name
    assert rest.at_end


def test_name_missing() -> None:
    """Every file starts with NAME."""
    with pytest.raises(ParseError, match="expected NAME section"):
        sections.name(Span("ROWS\n"))


@pytest.mark.parametrize(
    "text",
    ["OBJSENSE MAX\nROWS\n", "OBJSENSE\n    MAXIMIZE\nROWS\n", "OBJSENSE\n  max\nROWS\n"],
)
def test_objective_sense(text: str) -> None:
    """The value may be inline or on the next line."""
    sense, rest = sections.objective_sense(Span(text))
    assert sense is ObjectiveSense.MAXIMIZE
    assert rest.peek() == "ROWS"


def test_objective_sense_invalid() -> None:
    """Only MIN and MAX spellings are accepted."""
    with pytest.raises(ParseError, match="invalid objective sense 'UP'"):
        sections.objective_sense(Span("OBJSENSE\n    UP\nROWS\n"))


def test_objective_name() -> None:
    """OBJNAME takes exactly one value."""
    found, rest = sections.objective_name(Span("OBJNAME\n    cost\nROWS\n"))
    assert found == "cost"
    assert rest.peek() == "ROWS"
    with pytest.raises(ParseError, match="exactly one value"):
        sections.objective_name(Span("OBJNAME\n    a\n    b\nROWS\n"))


@pytest.fixture
def marked_columns() -> str:
    """COLUMNS with one block of integer columns."""
    return """COLUMNS
    MARKER                 'MARKER'                 'INTORG'
    X1        R1        1
    X1        R2        2
    MARKER                 'MARKER'                 'INTEND'
    X2        R1        1
RHS
"""


def test_columns_markers(marked_columns: str) -> None:
    """Marker lines delimit integer columns and carry no data."""
    lines, integer, rest = sections.columns(Span(marked_columns))
    assert lines == (
        DataLine("X1", RowValuePair("R1", 1.0)),
        DataLine("X1", RowValuePair("R2", 2.0)),
        DataLine("X2", RowValuePair("R1", 1.0)),
    )
    assert integer == ("X1",)
    assert rest.peek() == "RHS"


def test_columns_unknown_marker() -> None:
    """Only INTORG and INTEND markers exist."""
    text = "COLUMNS\n    MARKER  'MARKER'  'SOSORG'\n"
    with pytest.raises(ParseError, match="unknown marker") as info:
        sections.columns(Span(text))
    assert info.value.line == 2


def test_special_ordered_sets() -> None:
    """Set headers delimit members; unnamed sets are numbered."""
    text = """SOS
 S1 SOS s1 2
    x1:1
    x2:2
 S2 SOS
    x3  3
ENDATA
"""
    sets, rest = sections.special_ordered_sets(Span(text))
    assert sets == (
        SosSet(SosType.S1, "s1", (SosMember("x1", 1.0), SosMember("x2", 2.0)), 2),
        SosSet(SosType.S2, "SOS2", (SosMember("x3", 3.0),)),
    )
    assert rest.peek() == "ENDATA"


def test_sos_set_named_like_its_type() -> None:
    """Members prefixed with a set called S1 stay members."""
    text = """SOS
 S1 SOS       S1        1
    S1        x1:1
    S1        x2:2
 S2 SOS       S2
    S2        x3:3
ENDATA
"""
    sets, rest = sections.special_ordered_sets(Span(text))
    assert sets == (
        SosSet(SosType.S1, "S1", (SosMember("x1", 1.0), SosMember("x2", 2.0)), 1),
        SosSet(SosType.S2, "S2", (SosMember("x3", 3.0),)),
    )
    assert rest.peek() == "ENDATA"


def test_sos_member_first() -> None:
    """Members need a set to belong to."""
    with pytest.raises(ParseError, match="SOS member before"):
        sections.special_ordered_sets(Span("SOS\n    x1:1\n"))


def test_quadratic_objective() -> None:
    """QMATRIX terms follow QUADOBJ terms unchanged."""
    text = "QUADOBJ\n    x1  x1  2\n    x1  x2  1\nQMATRIX\n    x2  x1  1\nENDATA\n"
    terms, rest = sections.quadratic_objective(Span(text))
    assert terms == (
        QuadraticTerm("x1", "x1", 2.0),
        QuadraticTerm("x1", "x2", 1.0),
        QuadraticTerm("x2", "x1", 1.0),
    )
    assert rest.peek() == "ENDATA"


def test_qsection() -> None:
    """QSECTION may name the objective row."""
    terms, rest = sections.quadratic_objective(Span("QSECTION  obj\n    x1  x1  2\n"), "obj")
    assert terms == (QuadraticTerm("x1", "x1", 2.0),)
    assert rest.at_end


def test_qsection_for_constraint_row() -> None:
    """QSECTION naming another row is a quadratic constraint."""
    span = Span("QSECTION  c1\n    x  x  5\nENDATA\n")
    terms, rest = sections.quadratic_objective(span, "obj")
    assert terms is None
    assert rest == span
    blocks, rest = sections.quadratic_constraints(rest, "obj")
    assert blocks == (QuadraticConstraint("c1", (QuadraticTerm("x", "x", 5.0),)),)
    assert rest.peek() == "ENDATA"


def test_qsection_objective_out_of_order() -> None:
    """Objective terms cannot follow quadratic constraints."""
    text = "QCMATRIX   c1\n    x  x  1\nQSECTION  obj\n    x  x  2\n"
    with pytest.raises(ParseError, match="out of order") as info:
        sections.quadratic_constraints(Span(text), "obj")
    assert info.value.line == 3


def test_quadratic_constraints() -> None:
    """QCMATRIX blocks repeat, one per row."""
    text = "QCMATRIX   q1\n    x1  x1  1\nQCMATRIX   q2\n    x2  x2  3\nENDATA\n"
    blocks, rest = sections.quadratic_constraints(Span(text))
    assert blocks == (
        QuadraticConstraint("q1", (QuadraticTerm("x1", "x1", 1.0),)),
        QuadraticConstraint("q2", (QuadraticTerm("x2", "x2", 3.0),)),
    )
    assert rest.peek() == "ENDATA"


def test_quadratic_constraint_needs_row() -> None:
    """QCMATRIX names exactly one row."""
    with pytest.raises(ParseError, match="exactly one row name") as info:
        sections.quadratic_constraints(Span("* q\nQCMATRIX\n    x1  x1  1\n"))
    assert info.value.line == 2


def test_cone_constraints() -> None:
    """CSECTION carries a name, an optional value and a cone type."""
    text = "CSECTION   k1  0.0  QUAD\n    t\n    x1\nCSECTION   k2  RQUAD\n    y\n"
    cones, rest = sections.cone_constraints(Span(text))
    assert cones == (
        ConeConstraint(
            "k1", ConeType.QUAD, (ConeMember("t"), ConeMember("x1")), value=0.0
        ),
        ConeConstraint("k2", ConeType.RQUAD, (ConeMember("y"),)),
    )
    assert rest.at_end


@pytest.mark.parametrize(
    "header", ["CSECTION   k1  0.0  CONE", "CSECTION   k1", "CSECTION   k1  zero  QUAD"]
)
def test_cone_constraint_invalid(header: str) -> None:
    """Malformed CSECTION headers are rejected."""
    with pytest.raises(ParseError, match="CSECTION"):
        sections.cone_constraints(Span(f"{header}\n    x1\n"))


def test_endata_missing() -> None:
    """ENDATA is mandatory."""
    with pytest.raises(ParseError, match="expected ENDATA section"):
        sections.endata(Span("* trailing comment\n"))


