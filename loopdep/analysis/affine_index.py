# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from __future__ import annotations

import numbers
import sympy as sp

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple, TYPE_CHECKING

from dace.symbolic import pystr_to_symbolic
from sympy.polys.polyerrors import BasePolynomialError

if TYPE_CHECKING:
    from loopdep.analysis.loop_nest import LoopNest


class _Unresolved:
    def __repr__(self) -> str:
        return "UNRESOLVED"


# Marker for index expressions the host could not reduce to an affine form.
UNRESOLVED = _Unresolved()


class _UnresolvedExpression(Exception):
    pass


@dataclass(frozen=True)
class Recurrence:
    """
    Scalar-evolution style recurrence {start,+,step}<level>: the value is
    ``start`` on the first iteration of ``level`` and grows by ``step`` on
    every following iteration. ``start`` is a raw index expression itself,
    nested recurrences describe multi-level forms.
    """

    start: Any
    step: int
    level: str

    def __post_init__(self) -> None:
        if isinstance(self.step, bool) or not isinstance(self.step, int):
            raise ValueError(f"Recurrence step must be an integer, got {self.step}")

    def as_expression(self) -> sp.Expr:
        return _to_sympy(self.start) + self.step * sp.Symbol(self.level)

    def __str__(self) -> str:
        return f"{{{self.start},+,{self.step}}}<{self.level}>"


@dataclass(frozen=True)
class AffineIndex:
    """
    Index of one array dimension: ``constant + sum(coefficients[l] * var_l)``
    where ``var_l`` is the iteration counter of loop level ``l`` (outermost
    first). Unknown indices carry no coefficients.
    """

    known: bool
    constant: int = 0
    coefficients: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not self.known and self.coefficients:
            raise ValueError("Unknown index expressions carry no coefficients")

    @staticmethod
    def unknown() -> AffineIndex:
        return AffineIndex(known=False)

    @staticmethod
    def constant_index(value: int, depth: int) -> AffineIndex:
        return AffineIndex(known=True, constant=value, coefficients=(0,) * depth)

    @property
    def depth(self) -> int:
        return len(self.coefficients)

    @property
    def innermost(self) -> int:
        if not self.coefficients:
            return 0
        return self.coefficients[-1]

    @property
    def outer(self) -> Tuple[int, ...]:
        return self.coefficients[:-1]

    def is_constant(self) -> bool:
        return self.known and not any(self.coefficients)

    def format(self, nest: LoopNest) -> str:
        if not self.known:
            return "UnknownExpr"

        terms = [str(self.constant)]
        for level, coefficient in enumerate(self.coefficients):
            terms.append(f"var_{level}{nest.bounds(level)} * {coefficient}")
        return " + ".join(terms)

    @staticmethod
    def from_expression(
        expression: Any, induction_variables: Sequence[str]
    ) -> AffineIndex:
        """
        Decomposes a raw index expression into its affine form over the
        given induction variables (outermost first). Anything that is not an
        integer-coefficient linear combination of the induction variables
        yields an unknown index.
        """
        if expression is None or expression is UNRESOLVED:
            return AffineIndex.unknown()

        try:
            expr = _to_sympy(expression)
            if not isinstance(expr, sp.Expr):
                return AffineIndex.unknown()
            expr = sp.expand(expr)
        except (
            _UnresolvedExpression,
            sp.SympifyError,
            SyntaxError,
            TypeError,
            ValueError,
        ):
            return AffineIndex.unknown()

        # Later levels shadow earlier ones with the same name
        positions: Dict[str, int] = {}
        for level, name in enumerate(induction_variables):
            positions[name] = level

        generators = {}
        for symbol in expr.free_symbols:
            name = getattr(symbol, "name", None)
            if name not in positions:
                return AffineIndex.unknown()
            generators[name] = symbol

        coefficients = [0] * len(induction_variables)
        if not generators:
            if not expr.is_Integer:
                return AffineIndex.unknown()
            return AffineIndex(
                known=True, constant=int(expr), coefficients=tuple(coefficients)
            )

        try:
            poly = sp.Poly(expr, *generators.values())
        except BasePolynomialError:
            return AffineIndex.unknown()
        if poly.total_degree() > 1:
            return AffineIndex.unknown()

        constant = poly.coeff_monomial(1)
        if not constant.is_Integer:
            return AffineIndex.unknown()
        for name, symbol in generators.items():
            coefficient = poly.coeff_monomial(symbol)
            if not coefficient.is_Integer:
                return AffineIndex.unknown()
            coefficients[positions[name]] = int(coefficient)

        return AffineIndex(
            known=True, constant=int(constant), coefficients=tuple(coefficients)
        )


def _to_sympy(expression: Any) -> sp.Expr:
    if expression is None or expression is UNRESOLVED:
        raise _UnresolvedExpression()
    if isinstance(expression, Recurrence):
        return expression.as_expression()
    if isinstance(expression, bool):
        raise TypeError("Boolean index expression")
    if isinstance(expression, numbers.Integral):
        return sp.Integer(int(expression))
    if isinstance(expression, str):
        return pystr_to_symbolic(expression)
    if isinstance(expression, sp.Basic):
        return expression

    raise TypeError(f"Unsupported index expression {expression!r}")
