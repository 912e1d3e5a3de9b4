# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
#!/usr/bin/env python
from setuptools import find_packages, setup

setup(
    name="loopdep",
    version="0.1.0",
    description="Loop dependence analysis and parallelization decisions for SDFGs",
    author="SPCL @ ETH Zurich",
    python_requires=">=3.8",
    packages=find_packages(exclude=["*.tests", "*.tests.*", "tests.*", "tests"]),
    install_requires=[
        "dace>=1.0.0",
        "sympy>=1.9",
        "numpy>=1.23.0",
        "networkx>=3.1.0",
    ],
    extras_require={
        "dev": ["black==22.10.0", "pytest>=7.2.0", "pytest-cov>=4.1.0"],
    },
    classifiers=[
        "Topic :: Utilities",
    ],
)
