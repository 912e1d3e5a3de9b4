# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.host.loop_host import LoopHost
from loopdep.host.sdfg_host import NotInnermostLoopException, SDFGLoopHost
