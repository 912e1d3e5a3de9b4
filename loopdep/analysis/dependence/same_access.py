# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis.dependence.verdict import AccessPair, DependenceVerdict


def same_access_test(pair: AccessPair) -> DependenceVerdict:
    """
    Identical accesses touch the same element only within one iteration,
    provided the innermost level moves the access on some dimension.
    """
    dimensions = list(pair.known_dimensions())
    if not dimensions or len(dimensions) != len(pair.first.dimensions):
        return DependenceVerdict.INCONCLUSIVE

    moves = False
    for first, second in dimensions:
        if first != second:
            return DependenceVerdict.INCONCLUSIVE
        if first.innermost != 0:
            moves = True

    if not moves:
        return DependenceVerdict.INCONCLUSIVE
    return DependenceVerdict.INDEPENDENT
