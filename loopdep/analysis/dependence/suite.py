# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from typing import Dict, List, Optional, Sequence, Tuple

from loopdep.analysis.dependence.banerjee import banerjee_test
from loopdep.analysis.dependence.gcd import gcd_test
from loopdep.analysis.dependence.same_access import same_access_test
from loopdep.analysis.dependence.strong_siv import strong_siv_test
from loopdep.analysis.dependence.verdict import (
    AccessPair,
    DependenceTest,
    DependenceVerdict,
)
from loopdep.analysis.dependence.ziv import ziv_test

DEPENDENCE_TESTS: Dict[str, DependenceTest] = {
    "banerjee": banerjee_test,
    "strong_siv": strong_siv_test,
    "same_access": same_access_test,
    "gcd": gcd_test,
    "ziv": ziv_test,
}


class DependenceTestSuite:
    """
    Combines independence tests by logical OR: a pair is independent as soon
    as one test proves it.
    """

    def __init__(self, tests: Optional[Sequence[str]] = None) -> None:
        if tests is None:
            tests = list(DEPENDENCE_TESTS)

        self._tests: List[Tuple[str, DependenceTest]] = []
        for name in tests:
            if name not in DEPENDENCE_TESTS:
                raise ValueError(f"Unknown dependence test: {name}")
            self._tests.append((name, DEPENDENCE_TESTS[name]))

    @property
    def tests(self) -> List[str]:
        return [name for name, _ in self._tests]

    def prove(self, pair: AccessPair) -> Optional[str]:
        """Returns the name of the first test proving independence, if any."""
        if not pair.same_shape:
            return None

        for name, test in self._tests:
            if test(pair) == DependenceVerdict.INDEPENDENT:
                return name
        return None

    def run(self, pair: AccessPair) -> DependenceVerdict:
        if self.prove(pair) is None:
            return DependenceVerdict.INCONCLUSIVE
        return DependenceVerdict.INDEPENDENT
