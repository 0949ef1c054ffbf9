"""Assemble a :class:`~mpsparse.document.Document` from MPS text."""

import logging

from mpsparse import sections
from mpsparse.document import Document, RowType
from mpsparse.lines import Span

logger = logging.getLogger(__name__)


def parse(text: str, *, located: bool = False) -> Document:
    """Parse fixed or free MPS text, including the CPLEX extension sections.

    Sections are read in the one order the format allows::

        NAME [OBJSENSE] [OBJNAME] [REFROW] ROWS [USERCUTS] COLUMNS [RHS]
        [RANGES] [BOUNDS] [SOS] [QUADOBJ|QSECTION] [QMATRIX]
        [QCMATRIX <row>|QSECTION <row>]* [CSECTION]* [INDICATORS]
        [LAZYCONS] [BRANCH] ENDATA

    A QSECTION naming the objective row (OBJNAME, else the first free row)
    or no row at all holds objective terms; any other QSECTION is a
    quadratic constraint.

    Comment and blank lines may appear anywhere, LF and CRLF terminators may
    be mixed, and anything after ENDATA is ignored.

    Args:
        text: complete MPS file contents
        located: record the line and column of every record in its
            ``location`` attribute

    Returns:
        the parsed document

    Raises:
        ParseError: on the first malformed or misplaced line
        UnsupportedFeatureError: on BV, LI, UI and SC bounds

    >>> document = parse("NAME x\\nROWS\\n N  obj\\nCOLUMNS\\n    x1  obj  1\\nENDATA\\n")
    >>> document.name, len(document.rows), document.columns[0].first_pair.value
    ('x', 1, 1.0)
    """
    span = Span(text, located=located)
    name, span = sections.name(span)
    objective_sense, span = sections.objective_sense(span)
    objective_name, span = sections.objective_name(span)
    reference_row, span = sections.reference_row(span)
    rows, span = sections.rows(span)
    user_cuts, span = sections.user_cuts(span)
    columns, integer_columns, span = sections.columns(span)
    rhs, span = sections.rhs(span)
    ranges, span = sections.ranges(span)
    bounds, span = sections.bounds(span)
    special_ordered_sets, span = sections.special_ordered_sets(span)
    objective_row = objective_name or next(
        (row.row_name for row in rows if row.row_type is RowType.FREE), None
    )
    quadratic_objective, span = sections.quadratic_objective(span, objective_row)
    quadratic_constraints, span = sections.quadratic_constraints(span, objective_row)
    cone_constraints, span = sections.cone_constraints(span)
    indicators, span = sections.indicators(span)
    lazy_constraints, span = sections.lazy_constraints(span)
    branch_priorities, span = sections.branch_priorities(span)
    span = sections.endata(span)
    if not span.skip_noise().at_end:
        logger.debug("ignoring text after ENDATA at line %d", span.line)

    document = Document(
        name=name,
        rows=rows,
        columns=columns,
        objective_sense=objective_sense,
        objective_name=objective_name,
        reference_row=reference_row,
        rhs=rhs,
        ranges=ranges,
        bounds=bounds,
        user_cuts=user_cuts,
        special_ordered_sets=special_ordered_sets,
        quadratic_objective=quadratic_objective,
        quadratic_constraints=quadratic_constraints,
        cone_constraints=cone_constraints,
        indicators=indicators,
        lazy_constraints=lazy_constraints,
        branch_priorities=branch_priorities,
        integer_columns=integer_columns,
    )
    logger.debug(
        "parsed %s: %d rows, %d column lines",
        document.name,
        len(document.rows),
        len(document.columns),
    )
    return document
