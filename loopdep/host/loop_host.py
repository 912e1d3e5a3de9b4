# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from loopdep.analysis.loop_nest import LoopNest
from loopdep.analysis.memory_access import RawAccess


class LoopHost(ABC):
    """
    The compiler infrastructure owning the loops. A host knows the structure
    of loop nests and extracts the memory accesses of loop bodies.
    """

    @abstractmethod
    def enclosing_loops(self, loop: Any) -> List[Any]:
        """
        Returns the loops enclosing ``loop``, outermost first and including
        ``loop`` itself.
        """
        pass

    @abstractmethod
    def induction_variable(self, loop: Any) -> str:
        pass

    @abstractmethod
    def trip_count(self, loop: Any) -> Optional[int]:
        """
        Returns the number of iterations of ``loop`` if it is a constant.
        Raises TripCountUnavailableException if the host cannot analyze
        trip counts at all.
        """
        pass

    @abstractmethod
    def memory_accesses(self, loop: Any, nest: LoopNest) -> List[RawAccess]:
        """
        Returns the accesses of the body of ``loop``. Index expressions must
        be affine in the iteration counters of ``nest``, or unresolved.
        Accesses whose container or shape cannot be determined are opaque.
        """
        pass

    def label(self, loop: Any) -> str:
        return str(loop)
