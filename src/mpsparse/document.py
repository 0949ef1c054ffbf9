"""Typed, immutable representation of one MPS file.

Every record is a frozen dataclass and every ordered collection a
:class:`tuple`, so a :class:`Document` cannot change once
:func:`mpsparse.parse.parse` returns it.  Records optionally carry a
:class:`Location`; it is excluded from comparisons so that located and
unlocated parses of the same text are equal.
"""

from dataclasses import dataclass, field
from enum import Enum


class RowType(Enum):
    """Row type indicators of the ROWS section."""

    EQUALITY = "E"
    LESS_OR_EQUAL = "L"
    GREATER_OR_EQUAL = "G"
    FREE = "N"


class BoundType(Enum):
    """Bound type indicators of the BOUNDS section.

    ======  ===================  ===========================
    code    member               meaning
    ======  ===================  ===========================
    ``LO``  ``LOWER``            ``l <= x``
    ``UP``  ``UPPER``            ``x <= u``
    ``FX``  ``FIXED``            ``x == v``
    ``FR``  ``FREE``             ``-inf <= x <= inf``
    ``MI``  ``MINUS_INFINITY``   ``-inf <= x``
    ``PL``  ``PLUS_INFINITY``    ``x <= inf``
    ``BV``  ``BINARY``           ``x in {0, 1}``
    ``LI``  ``LOWER_INTEGER``    ``l <= x``, integer
    ``UI``  ``UPPER_INTEGER``    ``x <= u``, integer
    ``SC``  ``SEMI_CONTINUOUS``  ``x == 0 or l <= x <= u``
    ======  ===================  ===========================

    The last four are recognized but not implemented.
    """

    LOWER = "LO"
    UPPER = "UP"
    FIXED = "FX"
    FREE = "FR"
    MINUS_INFINITY = "MI"
    PLUS_INFINITY = "PL"
    BINARY = "BV"
    LOWER_INTEGER = "LI"
    UPPER_INTEGER = "UI"
    SEMI_CONTINUOUS = "SC"

    @property
    def implemented(self) -> bool:
        """Whether bounds of this type can be parsed."""
        return self not in _UNIMPLEMENTED_BOUNDS

    @property
    def requires_value(self) -> bool:
        """Whether a BOUNDS line of this type must carry a value.

        >>> BoundType.FREE.requires_value
        False
        >>> BoundType.UPPER.requires_value
        True
        """
        return self not in {BoundType.FREE, BoundType.PLUS_INFINITY}


_UNIMPLEMENTED_BOUNDS = frozenset(
    {
        BoundType.BINARY,
        BoundType.LOWER_INTEGER,
        BoundType.UPPER_INTEGER,
        BoundType.SEMI_CONTINUOUS,
    }
)


class ObjectiveSense(Enum):
    """Optimization direction given by OBJSENSE."""

    MINIMIZE = "MIN"
    MAXIMIZE = "MAX"

    @classmethod
    def from_keyword(cls, keyword: str) -> "ObjectiveSense | None":
        """Map ``MIN``, ``MINIMIZE``, ``MAX`` or ``MAXIMIZE`` to a sense.

        >>> ObjectiveSense.from_keyword("MAXIMIZE")
        <ObjectiveSense.MAXIMIZE: 'MAX'>
        """
        return _SENSES.get(keyword.upper())


_SENSES = {
    "MIN": ObjectiveSense.MINIMIZE,
    "MINIMIZE": ObjectiveSense.MINIMIZE,
    "MAX": ObjectiveSense.MAXIMIZE,
    "MAXIMIZE": ObjectiveSense.MAXIMIZE,
}


class SosType(Enum):
    """Special ordered set kinds."""

    S1 = "S1"  # at most one member non-zero
    S2 = "S2"  # at most two adjacent members non-zero


class ConeType(Enum):
    """Cone kinds of CSECTION."""

    QUAD = "QUAD"
    RQUAD = "RQUAD"


class BranchDirection(Enum):
    """Preferred branch of a BRANCH entry."""

    UP = "UP"
    DOWN = "DN"
    ROUNDING = "RD"
    CLOSEST_BOUND = "CB"
    AUTO = ""


@dataclass(frozen=True, slots=True)
class Location:
    """1-based line and column of a record in the input text."""

    line: int
    column: int = 1


@dataclass(frozen=True, slots=True)
class RowDefinition:
    """One line of ROWS (or USERCUTS)."""

    row_type: RowType
    row_name: str
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class RowValuePair:
    """A row name with the number attached to it on a data line."""

    row_name: str
    value: float


@dataclass(frozen=True, slots=True)
class DataLine:
    """One record of COLUMNS, RHS or RANGES.

    ``name`` is the column name in COLUMNS and the set name in RHS and
    RANGES.  A physical line may carry a second (row, value) pair.
    """

    name: str
    first_pair: RowValuePair
    second_pair: RowValuePair | None = None
    location: Location | None = field(default=None, compare=False, repr=False)

    @property
    def pairs(self) -> tuple[RowValuePair, ...]:
        """Pairs actually present on the line."""
        if self.second_pair is None:
            return (self.first_pair,)
        return (self.first_pair, self.second_pair)


@dataclass(frozen=True, slots=True)
class BoundDefinition:
    """One line of BOUNDS; ``value`` is ``None`` for valueless FR/PL lines."""

    bound_type: BoundType
    bound_set_name: str
    column_name: str
    value: float | None = None
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class SosMember:
    column_name: str
    weight: float
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class SosSet:
    """A special ordered set and its weighted members."""

    sos_type: SosType
    set_name: str
    members: tuple[SosMember, ...] = ()
    priority: int | None = None
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class QuadraticTerm:
    """``coefficient * column1 * column2``."""

    column1: str
    column2: str
    coefficient: float
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class QuadraticConstraint:
    row_name: str
    terms: tuple[QuadraticTerm, ...] = ()
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class ConeMember:
    column_name: str
    coefficient: float | None = None
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class ConeConstraint:
    """A CSECTION block; ``value`` is the optional number on its header."""

    cone_name: str
    cone_type: ConeType
    members: tuple[ConeMember, ...] = ()
    value: float | None = None
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class IndicatorLine:
    """Row ``row_name`` is enforced when ``column_name == trigger_value``."""

    row_name: str
    column_name: str
    trigger_value: int
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class LazyConstraintLine:
    row_name: str
    priority: int | None = None
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class BranchPriority:
    column_name: str
    priority: int
    direction: BranchDirection = BranchDirection.AUTO
    location: Location | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Document:
    """Everything :func:`mpsparse.parse.parse` read from one MPS text.

    Optional sections that are absent from the input are ``None``; present
    but empty sections are empty tuples.
    """

    name: str
    rows: tuple[RowDefinition, ...]
    columns: tuple[DataLine, ...]
    objective_sense: ObjectiveSense | None = None
    objective_name: str | None = None
    reference_row: str | None = None
    rhs: tuple[DataLine, ...] | None = None
    ranges: tuple[DataLine, ...] | None = None
    bounds: tuple[BoundDefinition, ...] | None = None
    user_cuts: tuple[RowDefinition, ...] | None = None
    special_ordered_sets: tuple[SosSet, ...] | None = None
    quadratic_objective: tuple[QuadraticTerm, ...] | None = None
    quadratic_constraints: tuple[QuadraticConstraint, ...] | None = None
    cone_constraints: tuple[ConeConstraint, ...] | None = None
    indicators: tuple[IndicatorLine, ...] | None = None
    lazy_constraints: tuple[LazyConstraintLine, ...] | None = None
    branch_priorities: tuple[BranchPriority, ...] | None = None
    integer_columns: tuple[str, ...] = ()

    @property
    def column_names(self) -> tuple[str, ...]:
        """Distinct column names in order of first appearance."""
        return tuple(dict.fromkeys(line.name for line in self.columns))
