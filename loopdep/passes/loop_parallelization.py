# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import dace

from typing import Any, Dict, Optional, Sequence

from dace import properties
from dace.sdfg.state import LoopRegion
from dace.transformation import pass_pipeline as ppl

from loopdep.analysis.dependence import DEPENDENCE_TESTS
from loopdep.analysis.parallelization import LoopVerdict, ParallelizationAnalysis
from loopdep.host.sdfg_host import SDFGLoopHost


@properties.make_properties
class LoopParallelization(ppl.Pass):
    """
    Decides for every innermost loop of an SDFG whether its iterations can
    be executed in parallel. Loops nested in other loops are analyzed with
    the enclosing iterations fixed.
    """

    CATEGORY: str = "Analysis"

    tests = properties.ListProperty(
        element_type=str,
        default=list(DEPENDENCE_TESTS),
        desc="Dependence tests to apply, in order",
    )
    verbose = properties.Property(
        dtype=bool, default=False, desc="Print the analysis trace of every loop"
    )

    def __init__(
        self, tests: Optional[Sequence[str]] = None, verbose: Optional[bool] = None
    ) -> None:
        super().__init__()
        if tests is None:
            self.tests = list(DEPENDENCE_TESTS)
        else:
            self.tests = list(tests)

        if verbose is None:
            self.verbose = dace.Config.get_bool("debugprint")
        else:
            self.verbose = verbose

    def modifies(self) -> ppl.Modifies:
        return ppl.Modifies.Nothing

    def should_reapply(self, modified: ppl.Modifies) -> bool:
        return False

    def apply_pass(
        self, sdfg: dace.SDFG, pipeline_results: Dict[str, Any]
    ) -> Optional[Dict[LoopRegion, LoopVerdict]]:
        loops = [
            region
            for region in sdfg.all_control_flow_regions(recursive=True)
            if isinstance(region, LoopRegion)
        ]
        if not loops:
            return None

        hosts: Dict[dace.SDFG, SDFGLoopHost] = {}
        results = {}
        for loop in loops:
            if not SDFGLoopHost.is_innermost(loop):
                continue

            # Loops of nested SDFGs are analyzed within their own SDFG
            if loop.sdfg not in hosts:
                hosts[loop.sdfg] = SDFGLoopHost(loop.sdfg)

            analysis = ParallelizationAnalysis(hosts[loop.sdfg], tests=self.tests)
            verdict = analysis.analyze(loop)
            if self.verbose:
                for line in verdict.trace:
                    print(line)

            results[loop] = verdict

        return results
