"""Exceptions raised while parsing MPS text or building a model from it."""

from dataclasses import dataclass

PREVIEW_LENGTH = 200


class MpsError(Exception):
    """Base class of every error raised by :mod:`mpsparse`."""


class ParseError(MpsError, ValueError):
    """Malformed MPS text.

    Carries the 1-based ``line`` at which parsing stopped and a ``preview`` of
    the unconsumed input, capped at :data:`PREVIEW_LENGTH` characters so that
    diagnostics never echo a whole file.
    """

    def __init__(self, message: str, *, line: int = 0, preview: str = "") -> None:
        """Store diagnostics next to the message."""
        self.message = message
        self.line = line
        self.preview = preview[:PREVIEW_LENGTH]
        super().__init__(message)

    def __str__(self) -> str:
        """Render message, line number and preview."""
        if not self.line:
            return self.message
        return f"{self.message} at line {self.line}: {self.preview!r}"


class UnsupportedFeatureError(ParseError, NotImplementedError):
    """Recognized construct that this package does not implement yet.

    Raised for the ``BV``, ``LI``, ``UI`` and ``SC`` bound types.  Callers
    should treat it as a capability gap rather than as malformed input.
    """


class ModelError(MpsError, ValueError):
    """A parsed document violates referential or uniqueness constraints."""


@dataclass(eq=False)
class RowTypeConflictError(ModelError):
    """A row name is declared more than once in ROWS."""

    row_name: str
    found: str
    previous: str

    def __str__(self) -> str:
        """Name the row and both types."""
        return (
            f"conflicting row type information for {self.row_name}: "
            f"found {self.found} and {self.previous}"
        )


@dataclass(eq=False)
class UnspecifiedRowError(ModelError):
    """A COLUMNS, RHS or RANGES entry names a row that ROWS never declared."""

    row_name: str

    def __str__(self) -> str:
        """Name the dangling row."""
        return f"referenced row of unspecified type: {self.row_name}"


@dataclass(eq=False)
class UnspecifiedColumnError(ModelError):
    """A BOUNDS entry names a column that COLUMNS never declared."""

    bound_set_name: str
    bound_type: str
    column_name: str

    def __str__(self) -> str:
        """Name the bound set, its type and the dangling column."""
        return (
            f"specified bound {self.bound_set_name!r} of type {self.bound_type} "
            f"for unspecified column {self.column_name!r}"
        )


@dataclass(eq=False)
class DuplicateEntryError(ModelError):
    """The same key receives a second value within one section."""

    section: str
    key: tuple[str, ...]
    found: object
    previous: object

    def __str__(self) -> str:
        """Name the section, the key and both values."""
        return (
            f"duplicate entry in {self.section} for {self.key!r}: "
            f"found {self.found!r} and {self.previous!r}"
        )
