"""Incremental assembly of scipy sparse arrays."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from scipy import sparse


@dataclass(slots=True)
class CscBuilder:
    """Build CSC sparse array incrementally.

    :class:`scipy.sparse.csc_array` is made up of three :class:`numpy.array`
    which are not optimized for appending.  Simple python :class:`list` perform
    better.  Entries must arrive in non-decreasing column order.

    >>> builder = CscBuilder()
    >>> builder.insert(1, 0, 2.0)
    >>> builder.insert(0, 2, 3.0)
    >>> builder.build((2, 3)).toarray().tolist()
    [[0.0, 0.0, 3.0], [2.0, 0.0, 0.0]]
    """

    indptr: list[int] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    data: list[float] = field(default_factory=list)

    def insert(self, row: int, col: int, value: float) -> None:
        """Insert `value` at `(row, col)`."""
        if col < len(self.indptr) - 1:
            msg = f"column {col} arrived after column {len(self.indptr) - 1}"
            raise ValueError(msg)
        while col >= len(self.indptr):
            self.indptr.append(len(self.indices))
        self.indices.append(row)
        self.data.append(value)

    def build(self, shape: tuple[int, int]) -> sparse.csc_array:
        """Close the remaining columns and hand over to scipy."""
        m, n = shape
        assert len(self.indptr) <= n  # noqa: S101
        indptr = self.indptr + [len(self.indices)] * (n + 1 - len(self.indptr))
        return sparse.csc_array((self.data, self.indices, indptr), shape=(m, n))

    @classmethod
    def from_triplets(
        cls, triplets: Iterable[tuple[int, int, float]], shape: tuple[int, int]
    ) -> sparse.csc_array:
        """Sort ``(row, col, value)`` triplets by column and build."""
        builder = cls()
        for row, col, value in sorted(triplets, key=lambda t: (t[1], t[0])):
            builder.insert(row, col, value)
        return builder.build(shape)
