# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis.dependence.verdict import (
    AccessPair,
    DependenceTest,
    DependenceVerdict,
)
from loopdep.analysis.dependence.banerjee import banerjee_test, difference_interval
from loopdep.analysis.dependence.gcd import gcd_test
from loopdep.analysis.dependence.same_access import same_access_test
from loopdep.analysis.dependence.strong_siv import strong_siv_test
from loopdep.analysis.dependence.ziv import ziv_test
from loopdep.analysis.dependence.suite import DEPENDENCE_TESTS, DependenceTestSuite
