# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

from loopdep.analysis.dependence import AccessPair, DependenceTestSuite
from loopdep.analysis.loop_nest import LoopBoundExtractor, LoopNest
from loopdep.analysis.memory_access import MemoryAccess, RawAccess, pad_dimensions
from loopdep.analysis.object_identity import ObjectIdentityResolver
from loopdep.host.loop_host import LoopHost


@dataclass
class LoopVerdict:
    """
    Result of analyzing one target loop. ``conflicts`` lists the access
    pairs no dependence test could separate.
    """

    loop: Any
    parallelizable: bool
    nest: LoopNest
    accesses: List[MemoryAccess] = field(default_factory=list)
    reason: Optional[str] = None
    conflicts: List[Tuple[MemoryAccess, MemoryAccess]] = field(default_factory=list)
    trace: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.parallelizable


class ParallelizationAnalysis:
    """
    Decides whether the iterations of an innermost loop may run in parallel.
    Every pair of accesses to the same container, at least one of them a
    write, must be proven independent. Writes are also paired with
    themselves, a write to the same element in every iteration is a
    dependence. Opaque accesses make the loop sequential.
    """

    def __init__(self, host: LoopHost, tests: Optional[Sequence[str]] = None) -> None:
        self._host = host
        self._suite = DependenceTestSuite(tests)

    @property
    def suite(self) -> DependenceTestSuite:
        return self._suite

    def analyze(self, loop: Any) -> LoopVerdict:
        trace = [f"Analysing loop: {self._host.label(loop)}"]

        nest = LoopBoundExtractor(self._host).extract(loop)
        trace.extend(nest.format())

        accesses = ParallelizationAnalysis.build_accesses(
            self._host.memory_accesses(loop, nest), nest
        )
        for access in accesses:
            trace.extend(access.format(nest))

        conflicts = []
        if any(access.opaque for access in accesses):
            parallelizable = False
            reason = "opaque access"
        else:
            conflicts = self.conflicts(accesses, nest)
            parallelizable = not conflicts
            reason = None if parallelizable else "dependence"

        for first, second in conflicts:
            if len(first.dimensions) != len(second.dimensions):
                trace.append(f"Shape mismatch in: {first.target}")
            trace.append(
                f"Possible dependence: {first.kind.value} {first.target} / "
                f"{second.kind.value} {second.target}"
            )

        if parallelizable:
            trace.append("Loop is safe to be parallelized")
        else:
            trace.append("Loop is not safe to be parallelized")
        trace.append("==============================")

        return LoopVerdict(
            loop=loop,
            parallelizable=parallelizable,
            nest=nest,
            accesses=accesses,
            reason=reason,
            conflicts=conflicts,
            trace=trace,
        )

    def conflicts(
        self, accesses: List[MemoryAccess], nest: LoopNest
    ) -> List[Tuple[MemoryAccess, MemoryAccess]]:
        groups: Dict[Hashable, List[MemoryAccess]] = defaultdict(list)
        for access in accesses:
            groups[access.target].append(access)

        conflicts = []
        for group in groups.values():
            for i, first in enumerate(group):
                # Includes the pair of an access with itself
                for second in group[i:]:
                    if not first.is_write and not second.is_write:
                        continue

                    pair = AccessPair(first=first, second=second, nest=nest)
                    if self._suite.prove(pair) is None:
                        conflicts.append((first, second))

        return conflicts

    @staticmethod
    def build_accesses(
        raw_accesses: Sequence[RawAccess], nest: LoopNest
    ) -> List[MemoryAccess]:
        """
        Resolves the container identities of the raw accesses and decomposes
        their index expressions over the loop nest.
        """
        identities = ObjectIdentityResolver(raw_accesses).resolve()

        ranks: Dict[Hashable, int] = {}
        for raw in raw_accesses:
            identity = identities[raw.target]
            if raw.opaque or identity is None:
                continue
            rank = raw.rank if raw.rank is not None else len(raw.indices)
            ranks[identity] = max(ranks.get(identity, 0), rank)

        accesses = []
        for raw in raw_accesses:
            identity = identities[raw.target]
            if raw.opaque or identity is None:
                accesses.append(
                    MemoryAccess(
                        target=raw.target if identity is None else identity,
                        kind=raw.kind,
                        opaque=True,
                    )
                )
                continue

            indices = pad_dimensions(raw.indices, ranks[identity])
            accesses.append(
                MemoryAccess(
                    target=identity,
                    kind=raw.kind,
                    dimensions=tuple(nest.index(index) for index in indices),
                )
            )

        return accesses
