# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.passes.loop_parallelization import LoopParallelization
