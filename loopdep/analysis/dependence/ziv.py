# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis.dependence.verdict import AccessPair, DependenceVerdict


def ziv_test(pair: AccessPair) -> DependenceVerdict:
    """
    Zero index variable test: a dimension that does not depend on any loop
    level in either access separates the accesses if the constants differ.
    """
    for first, second in pair.known_dimensions():
        if not first.is_constant() or not second.is_constant():
            continue
        if first.constant != second.constant:
            return DependenceVerdict.INDEPENDENT

    return DependenceVerdict.INCONCLUSIVE
