# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.generators.random_loop_nest import (
    has_cross_iteration_collision,
    random_loop_nest,
    render_c,
)
