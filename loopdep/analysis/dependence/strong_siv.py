# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis.dependence.verdict import AccessPair, DependenceVerdict


def strong_siv_test(pair: AccessPair) -> DependenceVerdict:
    """
    Strong single index variable test. In a nest

        for i_1 ... for i_n:
            <L_1(i_1, ..., i_n-1) + a * i_n + c1, L_2(i_1, ..., i_n-1) + a * i_n' + c2>

    with L_1 = L_2, the accesses meet only at the distance
    d = i_n' - i_n = (c1 - c2) / a. The dimension is separated if d is not an
    integer or |d| exceeds the iteration range of i_n.
    """
    innermost = pair.nest.innermost
    for first, second in pair.known_dimensions():
        # A target loop without enclosing levels has no outer combination
        if first.outer != second.outer:
            continue

        coefficient = first.innermost
        if coefficient == 0 or coefficient != second.innermost:
            continue

        difference = first.constant - second.constant
        if difference % coefficient != 0:
            return DependenceVerdict.INDEPENDENT

        distance = abs(difference // coefficient)
        if innermost.bounds.known and distance > innermost.bounds.span:
            return DependenceVerdict.INDEPENDENT

    return DependenceVerdict.INCONCLUSIVE
