# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import math

from functools import reduce
from typing import List

from loopdep.analysis.affine_index import AffineIndex
from loopdep.analysis.dependence.verdict import AccessPair, DependenceVerdict


def gcd_test(pair: AccessPair) -> DependenceVerdict:
    """
    GCD test. Both accesses share the outer iterations, while the innermost
    level runs independently on each side. A dimension is separated if
    its dependence equation has no integer solution.
    """
    for first, second in pair.known_dimensions():
        g = reduce(math.gcd, _coefficients(first, second), 0)
        if g != 0 and (second.constant - first.constant) % g != 0:
            return DependenceVerdict.INDEPENDENT

    return DependenceVerdict.INCONCLUSIVE


def _coefficients(first: AffineIndex, second: AffineIndex) -> List[int]:
    coefficients = [a - b for a, b in zip(first.outer, second.outer) if a != b]
    if first.innermost != 0:
        coefficients.append(first.innermost)
    if second.innermost != 0:
        coefficients.append(second.innermost)
    return coefficients
