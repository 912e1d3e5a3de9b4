# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from typing import List, Optional, Tuple

from loopdep.analysis.affine_index import AffineIndex
from loopdep.analysis.bounds import Bounds
from loopdep.analysis.dependence.verdict import AccessPair, DependenceVerdict
from loopdep.analysis.loop_nest import LoopNest


def banerjee_test(pair: AccessPair) -> DependenceVerdict:
    """
    Checks whether first - second can be zero on every dimension. A
    dimension whose difference interval excludes zero separates the accesses.
    """
    for first, second in pair.known_dimensions():
        interval = difference_interval(first, second, pair.nest)
        if interval is None:
            continue

        lower, upper = interval
        if upper < 0 or lower > 0:
            return DependenceVerdict.INDEPENDENT

    return DependenceVerdict.INCONCLUSIVE


def difference_interval(
    first: AffineIndex, second: AffineIndex, nest: LoopNest
) -> Optional[Tuple[int, int]]:
    """
    Interval of first - second over the loop nest, where the outer levels
    take the same value in both accesses and the innermost level does not.
    Returns None if a level with non-zero coefficient has unknown bounds.
    """
    lower = upper = first.constant - second.constant
    for bounds, coefficient in _linear_difference(first, second, nest):
        if coefficient == 0:
            continue
        if not bounds.known:
            return None

        delta_lower, delta_upper = bounds.scaled(coefficient)
        lower += delta_lower
        upper += delta_upper

    return lower, upper


def _linear_difference(
    first: AffineIndex, second: AffineIndex, nest: LoopNest
) -> List[Tuple[Bounds, int]]:
    terms = [
        (nest.bounds(level), a - b)
        for level, (a, b) in enumerate(zip(first.outer, second.outer))
    ]
    if nest.depth > 0:
        innermost = nest.bounds(nest.depth - 1)
        terms.append((innermost, first.innermost))
        terms.append((innermost, -second.innermost))
    return terms
