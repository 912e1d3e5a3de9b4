# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import ast
import dace
import numbers
import sympy as sp

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from dace import data, nodes, subsets, symbolic
from dace.frontend.python.astutils import unparse
from dace.properties import CodeBlock
from dace.sdfg import utils as sdutil
from dace.sdfg.state import LoopRegion, SDFGState
from dace.symbolic import pystr_to_symbolic

from loopdep.analysis.affine_index import UNRESOLVED
from loopdep.analysis.loop_nest import LoopNest
from loopdep.analysis.memory_access import AccessKind, RawAccess
from loopdep.host.loop_host import LoopHost


class NotInnermostLoopException(Exception):
    pass


@dataclass(frozen=True)
class LoopHeader:
    """
    Normal form of a loop header: the loop variable starts at ``start``,
    advances by ``step`` and runs while it compares to ``end`` by
    ``comparison``. ``end`` is None if the condition is not understood.
    """

    start: sp.Expr
    step: int
    end: Optional[sp.Expr] = None
    comparison: Optional[str] = None


_COMPARISONS = {
    sp.StrictLessThan: "<",
    sp.LessThan: "<=",
    sp.StrictGreaterThan: ">",
    sp.GreaterThan: ">=",
}

_FLIPPED = {"<": ">", "<=": ">=", ">": "<", ">=": "<="}


class SDFGLoopHost(LoopHost):
    """
    Loop host for the LoopRegions of an SDFG. Loop variables are normalized
    to zero-based iteration counters: a loop variable i with start s and
    step st is replaced by s + st * i in all index expressions, so that i
    ranges over [0, trip count - 1].
    """

    def __init__(self, sdfg: dace.SDFG) -> None:
        self._sdfg = sdfg
        self._constants = {}
        for k, v in sdfg.constants.items():
            # Array constants cannot appear in loop headers or scalar indices
            if isinstance(v, bool) or not isinstance(v, numbers.Number):
                continue
            self._constants[k] = pystr_to_symbolic(str(v))

        self._headers: Dict[LoopRegion, Optional[LoopHeader]] = {}

    @property
    def sdfg(self) -> dace.SDFG:
        return self._sdfg

    @staticmethod
    def is_innermost(loop: LoopRegion) -> bool:
        for region in loop.all_control_flow_regions():
            if region is not loop and isinstance(region, LoopRegion):
                return False
        return True

    def label(self, loop: LoopRegion) -> str:
        return loop.label

    def enclosing_loops(self, loop: LoopRegion) -> List[LoopRegion]:
        loops = []
        region = loop
        while region is not None and not isinstance(region, dace.SDFG):
            if isinstance(region, LoopRegion):
                loops.append(region)
            region = region.parent_graph
        return list(reversed(loops))

    def induction_variable(self, loop: LoopRegion) -> str:
        return loop.loop_variable

    def trip_count(self, loop: LoopRegion) -> Optional[int]:
        header = self.header(loop)
        if header is None or header.end is None:
            return None
        if not self._is_normalizable(loop, header):
            return None

        span = sp.simplify(header.end - header.start)
        if not span.is_Integer:
            return None
        return _count_iterations(int(span), header.step, header.comparison)

    def memory_accesses(self, loop: LoopRegion, nest: LoopNest) -> List[RawAccess]:
        if not SDFGLoopHost.is_innermost(loop):
            raise NotInnermostLoopException(loop.label)

        loops = [level.loop for level in nest.levels]
        accesses = []
        for state in loop.all_states():
            for edge in state.edges():
                memlet = edge.data
                if memlet.is_empty():
                    continue

                # Accesses of nested SDFGs and library nodes are not visible
                opaque = isinstance(
                    edge.src, (nodes.NestedSDFG, nodes.LibraryNode)
                ) or isinstance(edge.dst, (nodes.NestedSDFG, nodes.LibraryNode))

                if isinstance(edge.src, nodes.AccessNode):
                    accesses.append(
                        self._access(
                            state, edge.src, memlet, AccessKind.READ, loops, opaque
                        )
                    )
                if isinstance(edge.dst, nodes.AccessNode):
                    accesses.append(
                        self._access(
                            state, edge.dst, memlet, AccessKind.WRITE, loops, opaque
                        )
                    )

        return accesses

    def header(self, loop: LoopRegion) -> Optional[LoopHeader]:
        if loop not in self._headers:
            try:
                self._headers[loop] = self._parse_header(loop)
            except (SyntaxError, TypeError, ValueError, sp.SympifyError):
                self._headers[loop] = None
        return self._headers[loop]

    def normalize(self, expr: sp.Expr, loops: List[LoopRegion]) -> sp.Expr:
        """
        Rewrites the loop variables of ``loops`` (outermost first) in
        ``expr`` as iteration counters.
        """
        expr = _substitute(expr, self._constants)
        for loop in reversed(loops):
            header = self.header(loop)
            if header is None or not self._is_normalizable(loop, header):
                continue

            itervar = loop.loop_variable
            expr = _substitute(
                expr, {itervar: header.start + header.step * sp.Symbol(itervar)}
            )
        return expr

    def _parse_header(self, loop: LoopRegion) -> Optional[LoopHeader]:
        itervar = loop.loop_variable
        if not itervar or loop.inverted:
            return None

        start = _assigned_value(loop.init_statement, itervar)
        update = _assigned_value(loop.update_statement, itervar)
        if start is None or update is None:
            return None
        start = _substitute(start, self._constants)
        update = _substitute(update, self._constants)

        step = sp.expand(update - _symbol(update, itervar))
        if not step.is_Integer or step == 0:
            return None

        end, comparison = None, None
        if loop.loop_condition is not None:
            condition = pystr_to_symbolic(loop.loop_condition.as_string)
            condition = _substitute(condition, self._constants)
            end, comparison = _loop_end(condition, itervar)

        return LoopHeader(start=start, step=int(step), end=end, comparison=comparison)

    def _is_normalizable(self, loop: LoopRegion, header: LoopHeader) -> bool:
        # The start may only depend on enclosing loop variables
        outer = {
            enclosing.loop_variable
            for enclosing in self.enclosing_loops(loop)
            if enclosing is not loop
        }
        return all(
            getattr(symbol, "name", None) in outer
            for symbol in header.start.free_symbols
        )

    def _access(
        self,
        state: SDFGState,
        node: nodes.AccessNode,
        memlet: dace.Memlet,
        kind: AccessKind,
        loops: List[LoopRegion],
        opaque: bool,
    ) -> RawAccess:
        name = node.data
        if name not in self._sdfg.arrays:
            return RawAccess(target=name, kind=kind, opaque=True)

        desc = self._sdfg.arrays[name]
        rank = len(desc.shape)
        if isinstance(desc, (data.View, data.Reference)):
            alias_of = None
            if isinstance(desc, data.View):
                viewed = sdutil.get_view_node(state, node)
                if isinstance(viewed, nodes.AccessNode):
                    alias_of = viewed.data
            return RawAccess(
                target=name, kind=kind, opaque=True, rank=rank, alias_of=alias_of
            )

        subset = memlet.subset if memlet.data == name else memlet.other_subset
        if opaque or subset is None:
            return RawAccess(target=name, kind=kind, opaque=True, rank=rank)

        indices = tuple(
            self._index(index, loops) for index in _subset_indices(subset)
        )
        return RawAccess(target=name, kind=kind, indices=indices, rank=rank)

    def _index(self, index: Any, loops: List[LoopRegion]) -> Any:
        if index is UNRESOLVED:
            return UNRESOLVED
        if isinstance(index, symbolic.SymExpr):
            index = index.expr
        if isinstance(index, int):
            index = sp.Integer(index)
        if not isinstance(index, sp.Basic):
            return UNRESOLVED
        return self.normalize(index, loops)


def _subset_indices(subset: subsets.Subset) -> List[Any]:
    if isinstance(subset, subsets.Indices):
        return list(subset.indices)

    # Ranges of more than one element are not a single index
    return [
        begin if begin == end else UNRESOLVED for begin, end, _ in subset.ranges
    ]


def _count_iterations(span: int, step: int, comparison: Optional[str]) -> Optional[int]:
    if step < 0:
        span, step = -span, -step
        comparison = _FLIPPED.get(comparison)

    if comparison == "<":
        count = -(-span // step)
    elif comparison == "<=":
        count = span // step + 1
    else:
        return None
    return max(0, count)


def _assigned_value(code: Optional[CodeBlock], itervar: str) -> Optional[sp.Expr]:
    if code is None:
        return None

    body = ast.parse(code.as_string).body
    if len(body) != 1:
        return None

    stmt = body[0]
    if isinstance(stmt, ast.Assign):
        if len(stmt.targets) != 1:
            return None
        target = stmt.targets[0]
        value = pystr_to_symbolic(unparse(stmt.value))
    elif isinstance(stmt, ast.AugAssign) and isinstance(stmt.op, (ast.Add, ast.Sub)):
        target = stmt.target
        value = pystr_to_symbolic(unparse(stmt.value))
        if isinstance(stmt.op, ast.Sub):
            value = -value
        value = symbolic.symbol(itervar) + value
    else:
        return None

    if not isinstance(target, ast.Name) or target.id != itervar:
        return None
    return value


def _loop_end(condition: Any, itervar: str) -> Tuple[Optional[sp.Expr], Optional[str]]:
    """
    Brings a loop condition into the form ``itervar <comparison> end``.
    """
    comparison = _COMPARISONS.get(type(condition))
    if comparison is None:
        return None, None

    difference = sp.expand(condition.lhs - condition.rhs)
    itersym = _symbol(difference, itervar)
    coefficient = difference.coeff(itersym)
    rest = sp.expand(difference - coefficient * itersym)
    if itersym in rest.free_symbols:
        return None, None

    if coefficient == 1:
        return -rest, comparison
    elif coefficient == -1:
        return rest, _FLIPPED[comparison]
    return None, None


def _symbol(expr: sp.Expr, name: str) -> sp.Symbol:
    for symbol in expr.free_symbols:
        if getattr(symbol, "name", None) == name:
            return symbol
    return sp.Symbol(name)


def _substitute(expr: sp.Basic, mapping: Dict[str, sp.Expr]) -> sp.Basic:
    replacements = {
        symbol: mapping[symbol.name]
        for symbol in expr.free_symbols
        if getattr(symbol, "name", None) in mapping
    }
    if not replacements:
        return expr
    return expr.subs(replacements, simultaneous=True)
