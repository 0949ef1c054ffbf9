"""Integrity-checked lookup tables derived from a parsed document.

:func:`build_model` turns a :class:`~mpsparse.document.Document` into maps
keyed by owned strings.  Building is a single pass that stops at the first
duplicate declaration or dangling reference; a :class:`Model` is therefore
always complete and consistent.
"""

import logging
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import numpy as np
import pandas as pd
from scipy import sparse

from mpsparse.document import (
    BoundDefinition,
    BoundType,
    DataLine,
    Document,
    ObjectiveSense,
    RowDefinition,
    RowType,
)
from mpsparse.errors import (
    DuplicateEntryError,
    RowTypeConflictError,
    UnspecifiedColumnError,
    UnspecifiedRowError,
)
from mpsparse.sparse import CscBuilder

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class FrozenMap(Mapping[K, V], Generic[K, V]):
    """Read-only mapping filled once by a ``from_*`` constructor."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[K, V] | None = None) -> None:
        """Copy ``data`` so later changes to it do not leak in."""
        self._data: dict[K, V] = dict(data or {})

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


def _insert(section: str, data: dict[K, V], key: K, value: V) -> None:
    if key in data:
        raise DuplicateEntryError(section, key, value, data[key])  # type: ignore[arg-type]
    data[key] = value


class RowTypeMap(FrozenMap[str, RowType]):
    """Row name to row type, in ROWS order."""

    __slots__ = ()

    @classmethod
    def from_rows(cls, rows: Iterable[RowDefinition]) -> "RowTypeMap":
        """Index ROWS; a repeated row name is a conflict even with the same type."""
        types: dict[str, RowType] = {}
        for row in rows:
            previous = types.get(row.row_name)
            if previous is not None:
                raise RowTypeConflictError(row.row_name, row.row_type.name, previous.name)
            types[row.row_name] = row.row_type
        return cls(types)

    def require(self, row_name: str) -> RowType:
        """Type of ``row_name``, which must have been declared."""
        try:
            return self[row_name]
        except KeyError:
            raise UnspecifiedRowError(row_name) from None


class RowColumnValueMap(FrozenMap[tuple[str, str], float]):
    """``(row, column)`` to coefficient, one entry per pair."""

    __slots__ = ()

    @classmethod
    def from_lines(
        cls, lines: Iterable[DataLine], row_types: RowTypeMap
    ) -> "RowColumnValueMap":
        """Index COLUMNS; both pairs of a line are checked independently."""
        values: dict[tuple[str, str], float] = {}
        for line in lines:
            for pair in line.pairs:
                row_types.require(pair.row_name)
                _insert("COLUMNS", values, (pair.row_name, line.name), pair.value)
        return cls(values)


class SetValueMap(FrozenMap[tuple[str, str], float]):
    """``(set, row)`` to value for RHS and RANGES."""

    __slots__ = ()

    @classmethod
    def from_lines(
        cls, section: str, lines: Iterable[DataLine], row_types: RowTypeMap
    ) -> "SetValueMap":
        """Index RHS or RANGES lines, whose rows must all be declared."""
        values: dict[tuple[str, str], float] = {}
        for line in lines:
            for pair in line.pairs:
                row_types.require(pair.row_name)
                _insert(section, values, (line.name, pair.row_name), pair.value)
        return cls(values)

    @property
    def set_names(self) -> tuple[str, ...]:
        """Distinct set names in order of first appearance."""
        return tuple(dict.fromkeys(set_name for set_name, _ in self))


class RhsMap(SetValueMap):
    __slots__ = ()


class RangesMap(SetValueMap):
    __slots__ = ()


class BoundsMap(FrozenMap[tuple[str, str, BoundType], float | None]):
    """``(bound set, column, bound type)`` to value.

    The bound type is part of the key so that one set may give a column both
    a lower and an upper bound.
    """

    __slots__ = ()

    @classmethod
    def from_lines(
        cls, lines: Iterable[BoundDefinition], columns: Collection[str]
    ) -> "BoundsMap":
        """Index BOUNDS; every bounded column must appear in COLUMNS."""
        values: dict[tuple[str, str, BoundType], float | None] = {}
        for line in lines:
            if line.column_name not in columns:
                raise UnspecifiedColumnError(
                    line.bound_set_name, line.bound_type.name, line.column_name
                )
            key = (line.bound_set_name, line.column_name, line.bound_type)
            _insert("BOUNDS", values, key, line.value)
        return cls(values)

    @property
    def set_names(self) -> tuple[str, ...]:
        """Distinct bound set names in order of first appearance."""
        return tuple(dict.fromkeys(set_name for set_name, _, _ in self))


def range_limits(row_type: RowType, rhs: float, value: float) -> tuple[float, float]:
    """Lower and upper limit of a row with right-hand side ``rhs`` and range ``value``.

    =========  ========  ==============  ==============
    row type   sign      lower           upper
    =========  ========  ==============  ==============
    ``L``      any       ``rhs - |R|``   ``rhs``
    ``G``      any       ``rhs``         ``rhs + |R|``
    ``E``      ``+``     ``rhs``         ``rhs + |R|``
    ``E``      ``-``     ``rhs - |R|``   ``rhs``
    ``E``      ``0``     ``rhs``         ``rhs``
    =========  ========  ==============  ==============

    >>> range_limits(RowType.LESS_OR_EQUAL, 10.0, -4.0)
    (6.0, 10.0)
    >>> range_limits(RowType.EQUALITY, 10.0, -4.0)
    (6.0, 10.0)
    >>> range_limits(RowType.EQUALITY, 10.0, 4.0)
    (10.0, 14.0)
    """
    magnitude = abs(value)
    if row_type is RowType.LESS_OR_EQUAL:
        return rhs - magnitude, rhs
    if row_type is RowType.GREATER_OR_EQUAL:
        return rhs, rhs + magnitude
    if row_type is RowType.EQUALITY:
        if value > 0:
            return rhs, rhs + magnitude
        if value < 0:
            return rhs - magnitude, rhs
        return rhs, rhs
    msg = "free rows have no limits"
    raise ValueError(msg)


def _unranged_limits(row_type: RowType, rhs: float) -> tuple[float, float]:
    if row_type is RowType.LESS_OR_EQUAL:
        return -np.inf, rhs
    if row_type is RowType.GREATER_OR_EQUAL:
        return rhs, np.inf
    return rhs, rhs


def _select(available: tuple[str, ...], requested: str | None, section: str) -> str | None:
    """Pick the requested set, or the first one as MPS readers conventionally do."""
    if requested is None:
        return available[0] if available else None
    if requested not in available:
        msg = f"no {section} set named {requested!r}"
        raise KeyError(msg)
    return requested


@dataclass(frozen=True, slots=True)
class Model:
    """Validated view of one MPS problem, independent of the input text."""

    name: str
    row_types: RowTypeMap
    values: RowColumnValueMap
    columns: tuple[str, ...]
    rhs: RhsMap = field(default_factory=RhsMap)
    ranges: RangesMap = field(default_factory=RangesMap)
    bounds: BoundsMap = field(default_factory=BoundsMap)
    objective_sense: ObjectiveSense | None = None
    objective_name: str | None = None
    integer_columns: frozenset[str] = frozenset()

    @property
    def objective_row(self) -> str | None:
        """OBJNAME if given, else the first free row."""
        if self.objective_name is not None:
            return self.objective_name
        return next((row for row, kind in self.row_types.items() if kind is RowType.FREE), None)

    @property
    def constraint_rows(self) -> tuple[str, ...]:
        """Rows that are not free, in ROWS order."""
        return tuple(row for row, kind in self.row_types.items() if kind is not RowType.FREE)

    def coefficient_matrix(self) -> sparse.csc_array:
        """All rows by all columns, in declaration order."""
        rows = {row: i for i, row in enumerate(self.row_types)}
        cols = {col: j for j, col in enumerate(self.columns)}
        return CscBuilder.from_triplets(
            ((rows[row], cols[col], value) for (row, col), value in self.values.items()),
            shape=(len(rows), len(cols)),
        )

    def objective(self) -> pd.Series:
        """Objective row coefficients by column, zero where absent."""
        row = self.objective_row
        return pd.Series(
            [self.values.get((row, col), 0.0) for col in self.columns] if row else 0.0,
            index=pd.Index(self.columns, name="column"),
            dtype=float,
            name=row,
        )

    def row_limits(self, rhs_set: str | None = None, range_set: str | None = None) -> pd.DataFrame:
        """Lower and upper activity limits of every constraint row.

        Rows without an RHS entry have a right-hand side of zero.  Rows
        with a RANGES entry follow :func:`range_limits`.

        Args:
            rhs_set: RHS set to use (defaults to the first one)
            range_set: RANGES set to use (defaults to the first one)

        Returns:
            frame indexed by row name with ``lower`` and ``upper`` columns
        """
        rhs_name = _select(self.rhs.set_names, rhs_set, "RHS")
        range_name = _select(self.ranges.set_names, range_set, "RANGES")
        rows = self.constraint_rows
        limits = np.zeros((len(rows), 2))
        for i, row in enumerate(rows):
            b = self.rhs.get((rhs_name, row), 0.0) if rhs_name else 0.0
            r = self.ranges.get((range_name, row)) if range_name else None
            row_type = self.row_types[row]
            limits[i] = _unranged_limits(row_type, b) if r is None else range_limits(row_type, b, r)
        return pd.DataFrame(limits, index=pd.Index(rows, name="row"), columns=["lower", "upper"])

    def column_bounds(self, bound_set: str | None = None) -> pd.DataFrame:
        """Lower and upper bound of every column, ``[0, inf)`` unless BOUNDS says otherwise.

        Bounds are applied in file order, so a later ``FR`` overrides an
        earlier ``LO`` of the same column.
        """
        name = _select(self.bounds.set_names, bound_set, "BOUNDS")
        cols = {col: j for j, col in enumerate(self.columns)}
        tmp = np.zeros((len(cols), 2))
        tmp[:, 1] = np.inf
        for (set_name, col, kind), value in self.bounds.items():
            if set_name != name:
                continue
            j = cols[col]
            if kind is BoundType.LOWER:
                tmp[j, 0] = value
            elif kind is BoundType.UPPER:
                tmp[j, 1] = value
            elif kind is BoundType.FIXED:
                tmp[j] = value
            elif kind is BoundType.FREE:
                tmp[j] = -np.inf, np.inf
            elif kind is BoundType.MINUS_INFINITY:
                tmp[j, 0] = -np.inf
            elif kind is BoundType.PLUS_INFINITY:
                tmp[j, 1] = np.inf
        return pd.DataFrame(
            tmp, index=pd.Index(self.columns, name="column"), columns=["lower", "upper"]
        )


def build_model(document: Document) -> Model:
    """Validate a document and index it by name.

    Raises:
        RowTypeConflictError: a row is declared twice in ROWS
        UnspecifiedRowError: COLUMNS, RHS or RANGES names an undeclared row
        UnspecifiedColumnError: BOUNDS names a column absent from COLUMNS
        DuplicateEntryError: a key receives a second value
    """
    row_types = RowTypeMap.from_rows(document.rows)
    values = RowColumnValueMap.from_lines(document.columns, row_types)
    rhs = RhsMap.from_lines("RHS", document.rhs or (), row_types)
    columns = document.column_names
    bounds = BoundsMap.from_lines(document.bounds or (), frozenset(columns))
    ranges = RangesMap.from_lines("RANGES", document.ranges or (), row_types)
    logger.debug(
        "built model %s: %d rows, %d columns, %d coefficients",
        document.name,
        len(row_types),
        len(columns),
        len(values),
    )
    return Model(
        name=document.name,
        row_types=row_types,
        values=values,
        columns=columns,
        rhs=rhs,
        ranges=ranges,
        bounds=bounds,
        objective_sense=document.objective_sense,
        objective_name=document.objective_name,
        integer_columns=frozenset(document.integer_columns),
    )
