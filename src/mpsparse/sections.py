"""One parser per MPS section.

Each parser takes a :class:`~mpsparse.lines.Span` positioned anywhere before
its header, skips comment and blank lines, and returns what it read together
with the span that follows.  MPS has no end-of-section marker: a section ends
at the first line that does not start with whitespace, and that line is left
unconsumed for the next parser.  Optional sections return ``None`` and the
unchanged span when their header is absent.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TypeVar

from mpsparse.document import (
    BoundDefinition,
    BranchPriority,
    ConeConstraint,
    ConeType,
    DataLine,
    IndicatorLine,
    LazyConstraintLine,
    Location,
    ObjectiveSense,
    QuadraticConstraint,
    QuadraticTerm,
    RowDefinition,
    SosMember,
    SosSet,
    SosType,
)
from mpsparse.errors import ParseError
from mpsparse.fields import (
    parse_bound_line,
    parse_branch_line,
    parse_cone_member,
    parse_data_line,
    parse_indicator_line,
    parse_integer,
    parse_lazy_line,
    parse_number,
    parse_quadratic_term,
    parse_row_line,
    parse_sos_member,
    tokenize,
)
from mpsparse.lines import MARKER, LineKind, Span, classify, is_indented

logger = logging.getLogger(__name__)

Record = TypeVar("Record")
RecordParser = Callable[[str, Location | None], Record | None]

INTEGER_START = "'INTORG'"
INTEGER_END = "'INTEND'"


def read_header(span: Span, keyword: str) -> tuple[list[str], Span] | None:
    """Consume a ``keyword`` header line.

    Returns:
        the words following the keyword and the span after the header, or
        ``None`` (nothing consumed) when the next line is another header
    """
    span = span.skip_noise()
    line = span.peek()
    if line is None or is_indented(line):
        return None
    words = line.split()
    if words[0] != keyword:
        return None
    return words[1:], span.advance()


def expect_header(span: Span, keyword: str, *, arguments: bool = False) -> tuple[list[str], Span]:
    """Consume a mandatory header, optionally allowing words after it."""
    header = read_header(span, keyword)
    if header is None:
        raise span.skip_noise().error(f"expected {keyword} section")
    words, rest = header
    if words and not arguments:
        raise span.skip_noise().error(f"unexpected text after {keyword}")
    return words, rest


def read_record(span: Span, keyword: str, parser: RecordParser[Record]) -> Record:
    """Parse the next line with ``parser`` or fail with context."""
    line = span.peek() or ""
    try:
        record = parser(line, span.location())
    except ParseError as exc:
        if not exc.line:
            exc.line, exc.preview = span.line, span.preview()
        raise
    if record is None:
        raise span.error(f"malformed {keyword} line")
    return record


def read_records(
    span: Span, keyword: str, parser: RecordParser[Record]
) -> tuple[list[Record], Span]:
    """Collect indented records until the next header or the end of input."""
    records: list[Record] = []
    while (line := span.peek()) is not None:
        if classify(line) in {LineKind.COMMENT, LineKind.BLANK}:
            span = span.advance()
            continue
        if not is_indented(line):
            break
        records.append(read_record(span, keyword, parser))
        span = span.advance()
    logger.debug("read %d %s records", len(records), keyword)
    return records, span


def read_section(
    span: Span, keyword: str, parser: RecordParser[Record]
) -> tuple[tuple[Record, ...] | None, Span]:
    """Optional header-plus-records section."""
    if read_header(span, keyword) is None:
        return None, span
    _, span = expect_header(span, keyword)
    records, span = read_records(span, keyword, parser)
    return tuple(records), span


# NAME and single-value sections ------------------------------------------------


def name(span: Span) -> tuple[str, Span]:
    """``NAME`` followed by a 10 character run and the free text name."""
    span = span.skip_noise()
    if read_header(span, "NAME") is None:
        raise span.error("expected NAME section")
    line = span.peek() or ""
    fixed = line[4:14]
    if len(line) > 14 and not fixed.strip():
        return line[14:].strip(), span.advance()
    return line[4:].strip(), span.advance()


def _single_value(span: Span, keyword: str) -> tuple[str | None, Span]:
    """Value of OBJSENSE, OBJNAME or REFROW, inline or on the next line."""
    header = read_header(span, keyword)
    if header is None:
        return None, span
    words, span = header
    if words:
        return words[0], span
    records, rest = read_records(span, keyword, lambda line, _: tokenize(line)[:1] or None)
    if len(records) != 1:
        raise span.error(f"{keyword} takes exactly one value, found {len(records)}")
    return records[0][0], rest


def objective_sense(span: Span) -> tuple[ObjectiveSense | None, Span]:
    """Optional OBJSENSE: ``MIN``, ``MAX`` or their long spellings."""
    keyword, rest = _single_value(span, "OBJSENSE")
    if keyword is None:
        return None, span
    sense = ObjectiveSense.from_keyword(keyword)
    if sense is None:
        raise span.skip_noise().error(f"invalid objective sense {keyword!r}")
    return sense, rest


def objective_name(span: Span) -> tuple[str | None, Span]:
    """Optional OBJNAME naming the objective row."""
    return _single_value(span, "OBJNAME")


def reference_row(span: Span) -> tuple[str | None, Span]:
    """Optional REFROW naming the row that weights SOS members."""
    return _single_value(span, "REFROW")


# Core sections -----------------------------------------------------------------


def rows(span: Span) -> tuple[tuple[RowDefinition, ...], Span]:
    """Mandatory ROWS."""
    _, span = expect_header(span, "ROWS")
    records, span = read_records(span, "ROWS", parse_row_line)
    return tuple(records), span


def user_cuts(span: Span) -> tuple[tuple[RowDefinition, ...] | None, Span]:
    """Optional USERCUTS, laid out like ROWS."""
    return read_section(span, "USERCUTS", parse_row_line)


def _column_record(line: str, location: Location | None) -> DataLine | str | None:
    if classify(line) is not LineKind.MARKER:
        return parse_data_line(line, location)
    words = line.split()
    kind = words[words.index(MARKER) + 1] if words[-1] != MARKER else ""
    if kind not in {INTEGER_START, INTEGER_END}:
        msg = f"unknown marker {kind or MARKER!r}"
        raise ParseError(msg)
    return kind


def columns(span: Span) -> tuple[tuple[DataLine, ...], tuple[str, ...], Span]:
    """Mandatory COLUMNS.

    Marker lines carry no coefficients; they only delimit blocks of integer
    columns, whose names are returned alongside the data lines.
    """
    _, span = expect_header(span, "COLUMNS")
    records, span = read_records(span, "COLUMNS", _column_record)
    lines: list[DataLine] = []
    integer: dict[str, None] = {}
    inside = False
    for record in records:
        if isinstance(record, str):
            inside = record == INTEGER_START
            continue
        lines.append(record)
        if inside:
            integer.setdefault(record.name)
    return tuple(lines), tuple(integer), span


def rhs(span: Span) -> tuple[tuple[DataLine, ...] | None, Span]:
    """Optional RHS."""
    return read_section(span, "RHS", parse_data_line)


def ranges(span: Span) -> tuple[tuple[DataLine, ...] | None, Span]:
    """Optional RANGES."""
    return read_section(span, "RANGES", parse_data_line)


def bounds(span: Span) -> tuple[tuple[BoundDefinition, ...] | None, Span]:
    """Optional BOUNDS."""
    return read_section(span, "BOUNDS", parse_bound_line)


# CPLEX extensions --------------------------------------------------------------


def _is_sos_header(words: list[str]) -> bool:
    """``S1``/``S2`` start a header unless the line is a ``<set> <col>:<weight>`` member."""
    if not words or words[0] not in {kind.value for kind in SosType}:
        return False
    return words[1:2] == ["SOS"] or not any(":" in word for word in words[1:])


def _sos_record(line: str, location: Location | None) -> SosSet | SosMember | None:
    words = tokenize(line)
    if not _is_sos_header(words):
        return parse_sos_member(line, location)
    rest = words[1:]
    if rest[:1] == ["SOS"]:
        rest = rest[1:]
    if len(rest) > 2:
        return None
    priority = None
    if len(rest) == 2:
        priority = parse_integer(rest[1])
        if priority is None:
            return None
    return SosSet(SosType(words[0]), rest[0] if rest else "", (), priority, location)


def special_ordered_sets(span: Span) -> tuple[tuple[SosSet, ...] | None, Span]:
    """Optional SOS.

    A set header line `` S1 SOS <name> [<priority>]`` starts a set and ends
    the members of the previous one.  Sets without a name are numbered.
    """
    records, rest = read_section(span, "SOS", _sos_record)
    if records is None:
        return None, span
    headers: list[SosSet] = []
    members: list[list[SosMember]] = []
    for record in records:
        if isinstance(record, SosSet):
            headers.append(record)
            members.append([])
        elif not headers:
            raise span.skip_noise().error("SOS member before any S1/S2 set header")
        else:
            members[-1].append(record)
    return tuple(
        replace(header, set_name=header.set_name or f"SOS{index}", members=tuple(group))
        for index, (header, group) in enumerate(zip(headers, members, strict=True), start=1)
    ), rest


def quadratic_objective(
    span: Span, objective_row: str | None = None
) -> tuple[tuple[QuadraticTerm, ...] | None, Span]:
    """Optional QUADOBJ or QSECTION, then optional QMATRIX.

    QUADOBJ and QSECTION list the upper triangle only while QMATRIX lists
    the full matrix.  Terms are concatenated as written, never mirrored or
    deduplicated.  A QSECTION naming any row but ``objective_row`` holds a
    quadratic constraint and is left for :func:`quadratic_constraints`.
    """
    terms = None
    if read_header(span, "QUADOBJ") is not None:
        _, span = expect_header(span, "QUADOBJ")
        records, span = read_records(span, "QUADOBJ", parse_quadratic_term)
        terms = tuple(records)
    elif (header := read_header(span, "QSECTION")) is not None and header[0] in (
        [],
        [objective_row],
    ):
        _, span = header
        records, span = read_records(span, "QSECTION", parse_quadratic_term)
        terms = tuple(records)
    matrix, span = read_section(span, "QMATRIX", parse_quadratic_term)
    if matrix is not None:
        terms = (*(terms or ()), *matrix)
    return terms, span


def _constraint_keyword(span: Span) -> str | None:
    for keyword in ("QCMATRIX", "QSECTION"):
        if read_header(span, keyword) is not None:
            return keyword
    return None


def quadratic_constraints(
    span: Span, objective_row: str | None = None
) -> tuple[tuple[QuadraticConstraint, ...] | None, Span]:
    """Zero or more ``QCMATRIX <row>`` or ``QSECTION <row>`` blocks."""
    blocks: list[QuadraticConstraint] = []
    while (keyword := _constraint_keyword(span)) is not None:
        start = span.skip_noise()
        words, span = expect_header(start, keyword, arguments=True)
        if len(words) != 1:
            raise start.error(f"{keyword} requires exactly one row name")
        if words[0] == objective_row:
            raise start.error(f"quadratic objective terms for {objective_row} out of order")
        terms, span = read_records(span, keyword, parse_quadratic_term)
        blocks.append(QuadraticConstraint(words[0], tuple(terms), start.location()))
    return (tuple(blocks) if blocks else None), span


def cone_constraints(span: Span) -> tuple[tuple[ConeConstraint, ...] | None, Span]:
    """Zero or more ``CSECTION <name> [<value>] <QUAD|RQUAD>`` blocks."""
    cones: list[ConeConstraint] = []
    while read_header(span, "CSECTION") is not None:
        start = span.skip_noise()
        words, span = expect_header(start, "CSECTION", arguments=True)
        if len(words) not in {2, 3} or words[-1] not in {kind.value for kind in ConeType}:
            raise start.error("CSECTION requires a cone name and a QUAD or RQUAD type")
        value = None
        if len(words) == 3:
            value = parse_number(words[1])
            if value is None:
                raise start.error(f"invalid CSECTION value {words[1]!r}")
        members, span = read_records(span, "CSECTION", parse_cone_member)
        cones.append(
            ConeConstraint(
                words[0],
                ConeType(words[-1]),
                tuple(members),
                value=value,
                location=start.location(),
            )
        )
    return (tuple(cones) if cones else None), span


def indicators(span: Span) -> tuple[tuple[IndicatorLine, ...] | None, Span]:
    """Optional INDICATORS."""
    return read_section(span, "INDICATORS", parse_indicator_line)


def lazy_constraints(span: Span) -> tuple[tuple[LazyConstraintLine, ...] | None, Span]:
    """Optional LAZYCONS."""
    return read_section(span, "LAZYCONS", parse_lazy_line)


def branch_priorities(span: Span) -> tuple[tuple[BranchPriority, ...] | None, Span]:
    """Optional BRANCH."""
    return read_section(span, "BRANCH", parse_branch_line)


def endata(span: Span) -> Span:
    """Mandatory ENDATA; whatever follows it is left alone."""
    _, span = expect_header(span, "ENDATA")
    return span
