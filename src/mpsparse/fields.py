"""Extract records from single MPS data lines.

Every record parser first tries the historical fixed-column layout and falls
back to whitespace tokenization when the line does not fit it.  Both modes
return ``None`` when they cannot make sense of a line; the fallback is an
``or`` chain, never an exception handler.  Only definite errors, such as an
unknown row type indicator, raise :class:`~mpsparse.errors.ParseError`.

Fixed-column zones are counted from the character after the leading
indicator space::

    [0,2)  [3,11)  [13,21)  [23,35)  [38,46)  [48,60)
    type   name 1  name 2   value 1  name 3   value 2
"""

import re

from mpsparse.document import (
    BoundDefinition,
    BoundType,
    BranchDirection,
    BranchPriority,
    ConeMember,
    DataLine,
    IndicatorLine,
    LazyConstraintLine,
    Location,
    QuadraticTerm,
    RowDefinition,
    RowType,
    RowValuePair,
    SosMember,
)
from mpsparse.errors import ParseError, UnsupportedFeatureError

ZONES = (0, 2), (3, 11), (13, 21), (23, 35), (38, 46), (48, 60)
_GAPS = (2, 3), (11, 13), (21, 23), (35, 38), (46, 48)
_END = ZONES[-1][1]

_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?inf(?:inity)?",
    re.IGNORECASE,
)
_INLINE_COMMENT = re.compile(r"(?: {2,}|\t)\$")
_DIRECTIONS = frozenset(direction.value for direction in BranchDirection)


def parse_number(text: str) -> float | None:
    """Parse a floating point literal, independent of locale.

    >>> parse_number(".4"), parse_number("-1."), parse_number("+2.5e-3")
    (0.4, -1.0, 0.0025)
    >>> parse_number("1,5") is None
    True
    """
    text = text.strip()
    if not _NUMBER.fullmatch(text):
        return None
    return float(text)


def parse_integer(text: str) -> int | None:
    """Parse a decimal integer such as a priority.

    >>> parse_integer("10"), parse_integer("x")
    (10, None)
    """
    text = text.strip()
    return int(text) if re.fullmatch(r"[+-]?\d+", text) else None


def strip_inline_comment(line: str) -> str:
    """Drop a ``$`` comment preceded by two spaces or a tab.

    A lone space before ``$`` is kept so that identifiers containing ``$``
    survive.

    >>> strip_inline_comment("    X1  R1  1.0  $ note")
    '    X1  R1  1.0'
    >>> strip_inline_comment("    X$1 R1  1.0")
    '    X$1 R1  1.0'
    """
    match = _INLINE_COMMENT.search(line)
    return line if match is None else line[: match.start()].rstrip()


def tokenize(line: str) -> list[str]:
    """Whitespace tokens of a line without its inline comment."""
    return strip_inline_comment(line).split()


def _zone(content: str, index: int) -> str:
    start, stop = ZONES[index]
    return content[start:stop].strip()


def _aligned(content: str, gaps: int = len(_GAPS), end: int = _END) -> bool:
    """Check that separator gaps and the text past the last zone are blank.

    Tabs never line up with character zones, so they fail the check too.
    """
    if "\t" in content:
        return False
    if any(content[start:stop].strip() for start, stop in _GAPS[:gaps]):
        return False
    return not content[end:].strip()


# ROWS ------------------------------------------------------------------------


def _row_type(indicator: str) -> RowType:
    try:
        return RowType(indicator)
    except ValueError:
        msg = f"invalid row type {indicator!r}"
        raise ParseError(msg) from None


def strict_row_line(line: str, location: Location | None = None) -> RowDefinition | None:
    """Fixed-column ROWS record: type in zone 0, name in zone 1."""
    content = line[1:]
    indicator, name = _zone(content, 0), _zone(content, 1)
    if len(indicator) != 1 or indicator not in "ELGN" or not name:
        return None
    if not _aligned(content, 1, ZONES[1][1]):
        return None
    return RowDefinition(RowType(indicator), name, location)


def flexible_row_line(line: str, location: Location | None = None) -> RowDefinition | None:
    """Whitespace separated ROWS record: ``<type> <name>``."""
    tokens = tokenize(line)
    if len(tokens) != 2:
        return None
    indicator, name = tokens
    return RowDefinition(_row_type(indicator), name, location)


def parse_row_line(line: str, location: Location | None = None) -> RowDefinition | None:
    """Parse one line of ROWS or USERCUTS.

    >>> parse_row_line(" N  COST")
    RowDefinition(row_type=<RowType.FREE: 'N'>, row_name='COST')
    """
    return strict_row_line(line, location) or flexible_row_line(line, location)


# COLUMNS, RHS, RANGES --------------------------------------------------------


def strict_data_line(line: str, location: Location | None = None) -> DataLine | None:
    """Fixed-column wide line with one or two (row, value) pairs."""
    content = line[1:]
    if _zone(content, 0) or not _aligned(content):
        return None
    name, row = _zone(content, 1), _zone(content, 2)
    value = parse_number(_zone(content, 3))
    if not name or not row or value is None:
        return None
    second_row, second_text = _zone(content, 4), _zone(content, 5)
    if not second_row and not second_text:
        return DataLine(name, RowValuePair(row, value), None, location)
    second_value = parse_number(second_text)
    if not second_row or second_value is None:
        return None
    return DataLine(
        name,
        RowValuePair(row, value),
        RowValuePair(second_row, second_value),
        location,
    )


def flexible_data_line(line: str, location: Location | None = None) -> DataLine | None:
    """Whitespace separated wide line: ``<name> <row> <value> [<row> <value>]``."""
    tokens = tokenize(line)
    if len(tokens) not in {3, 5}:
        return None
    name, row, text, *rest = tokens
    value = parse_number(text)
    if value is None:
        return None
    second = None
    if rest:
        second_value = parse_number(rest[1])
        if second_value is None:
            return None
        second = RowValuePair(rest[0], second_value)
    return DataLine(name, RowValuePair(row, value), second, location)


def parse_data_line(line: str, location: Location | None = None) -> DataLine | None:
    """Parse one line of COLUMNS, RHS or RANGES.

    >>> line = parse_data_line("    XONE      COST                 1   LIM1                 1")
    >>> line.name, line.second_pair
    ('XONE', RowValuePair(row_name='LIM1', value=1.0))
    """
    return strict_data_line(line, location) or flexible_data_line(line, location)


# BOUNDS ----------------------------------------------------------------------


def bound_type(code: str) -> BoundType:
    """Map a two letter code to a :class:`BoundType`.

    Raises:
        UnsupportedFeatureError: for ``BV``, ``LI``, ``UI`` and ``SC``
        ParseError: for anything that is not a bound type at all
    """
    try:
        result = BoundType(code)
    except ValueError:
        msg = f"invalid bound type {code!r}"
        raise ParseError(msg) from None
    if not result.implemented:
        msg = f"bound type {code} ({result.name}) is not implemented"
        raise UnsupportedFeatureError(msg)
    return result


def strict_bound_line(
    line: str, kind: BoundType, location: Location | None = None
) -> BoundDefinition | None:
    """Fixed-column BOUNDS record; FR and PL may stop before the value zone."""
    content = line[1:]
    if _zone(content, 0) != kind.value or not _aligned(content, 3, ZONES[3][1]):
        return None
    set_name, column = _zone(content, 1), _zone(content, 2)
    if not set_name or not column:
        return None
    text = _zone(content, 3)
    if not text:
        if kind.requires_value:
            return None
        return BoundDefinition(kind, set_name, column, None, location)
    value = parse_number(text)
    if value is None:
        return None
    return BoundDefinition(kind, set_name, column, value, location)


def flexible_bound_line(
    line: str, kind: BoundType, location: Location | None = None
) -> BoundDefinition | None:
    """Whitespace separated BOUNDS record: ``<type> <set> <column> [<value>]``."""
    tokens = tokenize(line)
    if len(tokens) == 3 and not kind.requires_value:
        return BoundDefinition(kind, tokens[1], tokens[2], None, location)
    if len(tokens) != 4:
        return None
    value = parse_number(tokens[3])
    if value is None:
        return None
    return BoundDefinition(kind, tokens[1], tokens[2], value, location)


def parse_bound_line(line: str, location: Location | None = None) -> BoundDefinition | None:
    """Parse one line of BOUNDS.

    >>> parse_bound_line(" FR BND1      X1")
    BoundDefinition(bound_type=<BoundType.FREE: 'FR'>, bound_set_name='BND1', column_name='X1', value=None)
    """  # noqa: E501
    tokens = line.split()
    if not tokens:
        return None
    kind = bound_type(tokens[0])
    return strict_bound_line(line, kind, location) or flexible_bound_line(
        line, kind, location
    )


# CPLEX extensions --------------------------------------------------------------


def parse_quadratic_term(line: str, location: Location | None = None) -> QuadraticTerm | None:
    """``<column> <column> <coefficient>`` of QUADOBJ, QSECTION, QMATRIX, QCMATRIX."""
    tokens = tokenize(line)
    if len(tokens) != 3:
        return None
    coefficient = parse_number(tokens[2])
    if coefficient is None:
        return None
    return QuadraticTerm(tokens[0], tokens[1], coefficient, location)


def parse_sos_member(line: str, location: Location | None = None) -> SosMember | None:
    """SOS member as ``<column>:<weight>`` or ``[<set>] <column> <weight>``.

    >>> parse_sos_member("    x1:5")
    SosMember(column_name='x1', weight=5.0)
    >>> parse_sos_member("    s1  x2  10")
    SosMember(column_name='x2', weight=10.0)
    """
    tokens = tokenize(line)
    if not tokens or len(tokens) > 3:
        return None
    if ":" in tokens[-1]:
        column, _, text = tokens[-1].rpartition(":")
    elif len(tokens) >= 2:
        column, text = tokens[-2], tokens[-1]
    else:
        return None
    weight = parse_number(text)
    if not column or weight is None:
        return None
    return SosMember(column, weight, location)


def parse_indicator_line(line: str, location: Location | None = None) -> IndicatorLine | None:
    """``IF <row> <column> <0|1>``."""
    tokens = tokenize(line)
    if len(tokens) != 4 or tokens[0] != "IF" or tokens[3] not in {"0", "1"}:
        return None
    return IndicatorLine(tokens[1], tokens[2], int(tokens[3]), location)


def parse_lazy_line(line: str, location: Location | None = None) -> LazyConstraintLine | None:
    """``[<row type>] <row> [<priority>]``."""
    tokens = tokenize(line)
    if len(tokens) >= 2 and tokens[0] in {"E", "L", "G", "N"}:
        tokens = tokens[1:]
    if len(tokens) == 1:
        return LazyConstraintLine(tokens[0], None, location)
    if len(tokens) != 2:
        return None
    priority = parse_integer(tokens[1])
    if priority is None:
        return None
    return LazyConstraintLine(tokens[0], priority, location)


def parse_branch_line(line: str, location: Location | None = None) -> BranchPriority | None:
    """``[<UP|DN|RD|CB>] <column> <priority>``.

    >>> parse_branch_line(" UP x1  10")
    BranchPriority(column_name='x1', priority=10, direction=<BranchDirection.UP: 'UP'>)
    """
    tokens = tokenize(line)
    if len(tokens) == 2:
        tokens = ["", *tokens]
    if len(tokens) != 3:
        return None
    code, column, text = tokens
    priority = parse_integer(text)
    if priority is None or code not in _DIRECTIONS:
        return None
    return BranchPriority(column, priority, BranchDirection(code), location)


def parse_cone_member(line: str, location: Location | None = None) -> ConeMember | None:
    """``<column> [<coefficient>]`` of CSECTION."""
    tokens = tokenize(line)
    if len(tokens) == 1:
        return ConeMember(tokens[0], None, location)
    if len(tokens) != 2:
        return None
    coefficient = parse_number(tokens[1])
    if coefficient is None:
        return None
    return ConeMember(tokens[0], coefficient, location)
