"""
Resolver Module
===============
Walks the dependency order, replaces every reference in a formula with the
value already computed for that cell, and evaluates the result.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from .cells import CellGrid, CellValue
from .dependency_graph import DependencyGraph
from .errors import CyclicReference, SheetError, UndefinedReference
from .postfix import Literal, Reference, Token, evaluate, format_tokens

logger = logging.getLogger(__name__)


@dataclass
class ResolutionReport:
    resolved: int = 0
    errors: int = 0
    cyclic: int = 0
    skipped: int = 0


def substitute(tokens: Sequence[Token], grid: CellGrid) -> List[Token]:
    """Replace each :class:`Reference` with a :class:`Literal` of its value.

    Raises:
        UndefinedReference: at the first reference whose cell is unset,
            empty or an error. Remaining tokens are not examined.
    """
    resolved = []
    for token in tokens:
        if isinstance(token, Reference):
            value = grid.get(token.coord)
            if value is None or not value.is_integer:
                raise UndefinedReference(f"{token.address} has no integer value")
            token = Literal(value.value)
        resolved.append(token)
    return resolved


def resolve(graph: DependencyGraph, grid: CellGrid) -> ResolutionReport:
    """Compute every formula in *graph*, writing results into *grid*."""
    report = ResolutionReport()
    plan = graph.topological_order()

    if plan.cyclic:
        logger.warning(f"Found {len(plan.cyclic)} cells in or behind circular "
                       f"references: {', '.join(sorted(graph.to_addresses(plan.cyclic)))}")
    for node_id in plan.cyclic:
        grid.set_id(node_id, CellValue.error(CyclicReference.kind))
        report.cyclic += 1

    for node_id in plan.order:
        record = graph.record(node_id)
        address = graph.addresses.address(node_id)
        if not record.defined:
            # Placeholder for a cell that is referenced but has no formula
            report.skipped += 1
            continue
        try:
            tokens = substitute(record.tokens, grid)
            logger.debug(f"{address}: {record.formula!r} -> {format_tokens(tokens)!r}")
            value = CellValue.integer(evaluate(tokens))
        except SheetError as e:
            logger.debug(f"{address}: {e.kind.value} ({e})")
            value = CellValue.error(e.kind)
        grid.set_id(node_id, value)
        if value.is_error:
            report.errors += 1
        else:
            report.resolved += 1
    return report
