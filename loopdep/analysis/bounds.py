# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Bounds:
    """
    Iteration range of a single loop level. Known bounds are inclusive and
    refer to the zero-based iteration counter of the level, i.e., a loop with
    trip count N has bounds [0, N - 1].
    """

    known: bool = True
    lower: int = 0
    upper: int = 0

    def __post_init__(self) -> None:
        if self.known and self.lower > self.upper + 1:
            raise ValueError(f"Invalid bounds [{self.lower}, {self.upper}]")

    @staticmethod
    def unknown() -> "Bounds":
        return Bounds(known=False)

    @staticmethod
    def from_trip_count(trip_count: Optional[int]) -> "Bounds":
        if trip_count is None or trip_count < 0:
            return Bounds.unknown()

        return Bounds(known=True, lower=0, upper=trip_count - 1)

    @property
    def span(self) -> Optional[int]:
        """Largest distance between two iterations of the level."""
        if not self.known:
            return None
        return self.upper - self.lower

    def scaled(self, coefficient: int) -> Tuple[int, int]:
        """
        Returns the minimum and maximum of ``coefficient * x`` for x in the
        bounds.
        """
        assert self.known
        at_lower = coefficient * self.lower
        at_upper = coefficient * self.upper
        return min(at_lower, at_upper), max(at_lower, at_upper)

    def __str__(self) -> str:
        if not self.known:
            return f"[ {self.lower}, unknown ]"
        return f"[ {self.lower}, {self.upper} ]"
