# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from loopdep.analysis.affine_index import AffineIndex

if TYPE_CHECKING:
    from loopdep.analysis.loop_nest import LoopNest


class AccessKind(Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class RawAccess:
    """
    A memory access as reported by the host, before its index expressions
    are decomposed. ``alias_of`` names the container ``target`` is another
    name for. ``rank`` is the declared dimensionality of the container, if
    the host knows it.
    """

    target: Hashable
    kind: AccessKind
    indices: Tuple[Any, ...] = ()
    opaque: bool = False
    rank: Optional[int] = None
    alias_of: Optional[Hashable] = None


@dataclass(frozen=True)
class MemoryAccess:
    """
    A read or write of ``target`` with one affine index per dimension.
    Opaque accesses touch memory whose identity or shape is not known.
    """

    target: Hashable
    kind: AccessKind
    dimensions: Tuple[AffineIndex, ...] = ()
    opaque: bool = False

    @property
    def is_write(self) -> bool:
        return self.kind == AccessKind.WRITE

    @property
    def is_read(self) -> bool:
        return self.kind == AccessKind.READ

    def format(self, nest: LoopNest) -> List[str]:
        if self.is_write:
            lines = [f"Store in: {self.target}"]
        else:
            lines = [f"Load in: {self.target}"]
        if self.opaque:
            lines.append("Opaque access")
            return lines

        for dimension in self.dimensions:
            lines.append(f"Array index access: {dimension.format(nest)}")
        return lines


def pad_dimensions(indices: Sequence[Any], rank: Optional[int]) -> List[Any]:
    """
    Pads missing leading dimensions with constant zero indices so that every
    access to a container of the given rank has the same dimensionality.
    Surplus indices are kept, the mismatch is detected when pairs are tested.
    """
    indices = list(indices)
    if rank is None or len(indices) >= rank:
        return indices

    return [0] * (rank - len(indices)) + indices
