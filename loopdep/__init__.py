# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep import analysis
from loopdep import host
from loopdep import passes
from loopdep import generators
