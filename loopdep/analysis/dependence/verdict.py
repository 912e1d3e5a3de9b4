# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Tuple

from loopdep.analysis.affine_index import AffineIndex
from loopdep.analysis.loop_nest import LoopNest
from loopdep.analysis.memory_access import MemoryAccess


class DependenceVerdict(Enum):
    """
    Outcome of a dependence test. Tests only ever prove independence, a
    failed proof is inconclusive and never a proven dependence.
    """

    INDEPENDENT = "independent"
    INCONCLUSIVE = "inconclusive"

    def __bool__(self) -> bool:
        return self is DependenceVerdict.INDEPENDENT


@dataclass(frozen=True)
class AccessPair:
    """Two accesses to the same container within one loop nest."""

    first: MemoryAccess
    second: MemoryAccess
    nest: LoopNest

    def __post_init__(self) -> None:
        for access in (self.first, self.second):
            for index in access.dimensions:
                if index.known and index.depth != self.nest.depth:
                    raise ValueError(
                        f"Index of {access.target} spans {index.depth} loop levels, "
                        f"the loop nest has {self.nest.depth}"
                    )

    @property
    def same_shape(self) -> bool:
        return len(self.first.dimensions) == len(self.second.dimensions)

    def known_dimensions(self) -> Iterator[Tuple[AffineIndex, AffineIndex]]:
        """
        Yields the dimension pairs where both indices are known. Nothing is
        yielded for pairs of different shape.
        """
        if not self.same_shape:
            return

        for first, second in zip(self.first.dimensions, self.second.dimensions):
            if not first.known or not second.known:
                continue
            yield first, second


DependenceTest = Callable[[AccessPair], DependenceVerdict]
