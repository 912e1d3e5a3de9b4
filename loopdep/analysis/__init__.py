# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis.bounds import Bounds
from loopdep.analysis.affine_index import AffineIndex, Recurrence, UNRESOLVED
from loopdep.analysis.memory_access import (
    AccessKind,
    MemoryAccess,
    RawAccess,
    pad_dimensions,
)
from loopdep.analysis.loop_nest import (
    LoopBoundExtractor,
    LoopLevel,
    LoopNest,
    TripCountUnavailableException,
)
from loopdep.analysis.object_identity import ObjectIdentityResolver
from loopdep.analysis.dependence import (
    AccessPair,
    DependenceTestSuite,
    DependenceVerdict,
)
from loopdep.analysis.parallelization import LoopVerdict, ParallelizationAnalysis
