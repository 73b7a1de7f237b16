"""
Dependency Graph Module
=======================
Records which cells reference which, and produces a cycle-safe evaluation
order.

Edges point *downstream*: if ``B0`` contains ``A0`` then the record for
``A0`` lists ``B0``, because ``B0`` must be computed after ``A0``. The order
is the reverse post-order of a depth-first search over those edges.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .cells import AddressTable
from .postfix import Reference, Token, tokenize

logger = logging.getLogger(__name__)

# DFS colours
WHITE, GREY, BLACK = 0, 1, 2


def contains_letter(text: str) -> bool:
    """A cell is a formula iff its text has at least one alphabetic char."""
    return any(ch.isalpha() for ch in text)


@dataclass
class DependencyRecord:
    """Formula and downstream dependents of one cell.

    A record may be created as a placeholder (``defined=False``) when another
    formula references the cell before its own content is known.
    """
    formula: str = ""
    tokens: List[Token] = field(default_factory=list)
    downstream: Set[int] = field(default_factory=set)
    defined: bool = False


@dataclass
class GraphOrder:
    """Result of :meth:`DependencyGraph.topological_order`.

    ``order`` lists node ids so that every node follows everything it
    depends on. ``cyclic`` holds the ids that sit on a cycle or are only
    reachable through one; they are excluded from ``order``.
    """
    order: List[int]
    cyclic: Set[int]


class DependencyGraph:
    def __init__(self, addresses: Optional[AddressTable] = None):
        self.addresses = addresses if addresses is not None else AddressTable()
        self._records: Dict[int, DependencyRecord] = {}
        self._upstream: Dict[int, List[int]] = {}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _record(self, node_id: int) -> DependencyRecord:
        record = self._records.get(node_id)
        if record is None:
            record = self._records[node_id] = DependencyRecord()
        return record

    def add_formula(self, coord, text: str) -> int:
        """Register *text* as the formula of *coord* and record its edges.

        Returns the interned id of *coord*. Submitting a second formula for
        the same cell replaces the first one and its edges.
        """
        node_id = self.addresses.intern(coord)
        self._drop_upstream_edges(node_id)
        record = self._record(node_id)
        record.formula = text
        record.tokens = tokenize(text)
        record.defined = True

        upstream = []
        for token in record.tokens:
            if isinstance(token, Reference):
                ref_id = self.addresses.intern(token.coord)
                self._record(ref_id).downstream.add(node_id)
                upstream.append(ref_id)
        self._upstream[node_id] = upstream
        return node_id

    def discard_formula(self, coord):
        """Forget the formula of *coord*, keeping it as a placeholder."""
        node_id = self.addresses.lookup(coord)
        if node_id is None or node_id not in self._records:
            return
        self._drop_upstream_edges(node_id)
        record = self._records[node_id]
        record.formula = ""
        record.tokens = []
        record.defined = False

    def _drop_upstream_edges(self, node_id: int):
        for ref_id in self._upstream.pop(node_id, []):
            self._records[ref_id].downstream.discard(node_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, coord) -> bool:
        node_id = self.addresses.lookup(coord)
        return node_id is not None and node_id in self._records

    def __len__(self):
        return len(self._records)

    def record(self, node_id: int) -> DependencyRecord:
        return self._records[node_id]

    def record_for(self, coord) -> Optional[DependencyRecord]:
        node_id = self.addresses.lookup(coord)
        if node_id is None:
            return None
        return self._records.get(node_id)

    def node_ids(self) -> List[int]:
        return list(self._records)

    def upstream(self, node_id: int) -> List[int]:
        return list(self._upstream.get(node_id, []))

    def formula(self, coord) -> Optional[str]:
        record = self.record_for(coord)
        return record.formula if record is not None else None

    def downstream(self, coord) -> Set[str]:
        """Addresses of the cells whose formula references *coord*."""
        record = self.record_for(coord)
        if record is None:
            return set()
        return {self.addresses.address(d) for d in record.downstream}

    def to_addresses(self, node_ids: Iterable[int]) -> List[str]:
        return [self.addresses.address(n) for n in node_ids]

    def describe(self) -> List[str]:
        """One line per record: formula and downstream dependents."""
        lines = []
        for node_id, record in self._records.items():
            deps = ", ".join(sorted(self.to_addresses(record.downstream)))
            lines.append(f"{self.addresses.address(node_id)} formula: "
                         f"{record.formula!r} -> [{deps}]")
        return lines

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def topological_order(self) -> GraphOrder:
        """Depth-first search with three colours over downstream edges.

        The traversal keeps an explicit stack of ``(node, child iterator)``
        frames so chain length is not bounded by the recursion limit. A
        back edge to a GREY node marks every node on the stack from that
        node to the top as cyclic; every node downstream of a cyclic node is
        then marked as well.
        """
        colour: Dict[int, int] = {}
        finished: List[int] = []
        cyclic: Set[int] = set()

        for start in self._records:
            if colour.get(start, WHITE) != WHITE:
                continue
            colour[start] = GREY
            stack = [(start, iter(sorted(self._records[start].downstream)))]
            path = [start]
            while stack:
                node, children = stack[-1]
                for child in children:
                    state = colour.get(child, WHITE)
                    if state == WHITE:
                        colour[child] = GREY
                        stack.append((child, iter(sorted(self._records[child].downstream))))
                        path.append(child)
                        break
                    if state == GREY:
                        cycle = path[path.index(child):]
                        logger.debug(f"Cycle detected: "
                                     f"{' -> '.join(self.to_addresses(cycle + [child]))}")
                        cyclic.update(cycle)
                else:
                    stack.pop()
                    path.pop()
                    colour[node] = BLACK
                    finished.append(node)

        cyclic = self._close_downstream(cyclic)
        order = [n for n in reversed(finished) if n not in cyclic]
        return GraphOrder(order=order, cyclic=cyclic)

    def _close_downstream(self, seeds: Set[int]) -> Set[int]:
        closed = set(seeds)
        queue = deque(sorted(seeds))
        while queue:
            node = queue.popleft()
            for child in self._records[node].downstream:
                if child not in closed:
                    closed.add(child)
                    queue.append(child)
        return closed

    def clear(self):
        self._records.clear()
        self._upstream.clear()
        self.addresses.clear()
