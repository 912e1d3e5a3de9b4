# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from __future__ import annotations

import warnings

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, TYPE_CHECKING

from loopdep.analysis.affine_index import AffineIndex
from loopdep.analysis.bounds import Bounds

if TYPE_CHECKING:
    from loopdep.host.loop_host import LoopHost


class TripCountUnavailableException(Exception):
    pass


@dataclass(frozen=True)
class LoopLevel:
    name: str
    bounds: Bounds
    loop: Any = field(default=None, compare=False, repr=False)


class LoopNest:
    """
    The loop levels enclosing a target loop, outermost first and ending with
    the target loop itself. Affine indices refer to the levels by position.
    """

    def __init__(self, levels: Sequence[LoopLevel]) -> None:
        self._levels: Tuple[LoopLevel, ...] = tuple(levels)

    @property
    def levels(self) -> Tuple[LoopLevel, ...]:
        return self._levels

    @property
    def depth(self) -> int:
        return len(self._levels)

    @property
    def names(self) -> List[str]:
        return [level.name for level in self._levels]

    @property
    def innermost(self) -> Optional[LoopLevel]:
        if not self._levels:
            return None
        return self._levels[-1]

    def bounds(self, level: int) -> Bounds:
        return self._levels[level].bounds

    def index(self, expression: Any) -> AffineIndex:
        return AffineIndex.from_expression(expression, self.names)

    def format(self) -> List[str]:
        lines = []
        padding = ""
        for level, loop_level in enumerate(self._levels):
            lines.append(
                f"{padding}Loop induction variable: var_{level}({loop_level.name})"
            )
            lines.append(f"{padding}Loop bounds: {loop_level.bounds}")
            padding += "  "
        return lines

    def __len__(self) -> int:
        return len(self._levels)

    def __repr__(self) -> str:
        levels = ", ".join(f"{level.name}{level.bounds}" for level in self._levels)
        return f"LoopNest({levels})"


class LoopBoundExtractor:
    """
    Builds the loop-nest context of a target loop from the host. Levels whose
    trip count is not a constant get unknown bounds.
    """

    def __init__(self, host: LoopHost) -> None:
        self._host = host

    def extract(self, loop: Any) -> LoopNest:
        loops = list(self._host.enclosing_loops(loop))
        names = [self._host.induction_variable(level) for level in loops]

        try:
            bounds = [
                Bounds.from_trip_count(self._host.trip_count(level)) for level in loops
            ]
        except TripCountUnavailableException as e:
            warnings.warn(
                f"Trip counts unavailable for {self._host.label(loop)}: {e}. "
                "Assuming unknown bounds."
            )
            bounds = [Bounds.unknown() for _ in loops]

        return LoopNest(
            [
                LoopLevel(name=name, bounds=bound, loop=level)
                for name, bound, level in zip(names, bounds, loops)
            ]
        )
