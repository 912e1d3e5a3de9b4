# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis import (
    AccessKind,
    AccessPair,
    AffineIndex,
    Bounds,
    DependenceVerdict,
    LoopLevel,
    LoopNest,
    MemoryAccess,
)
from loopdep.analysis.dependence import same_access_test

NEST = LoopNest(
    [
        LoopLevel(name="i", bounds=Bounds.from_trip_count(10)),
        LoopLevel(name="j", bounds=Bounds.from_trip_count(10)),
    ]
)


def _pair(first, second):
    return AccessPair(
        first=MemoryAccess(target="a", kind=AccessKind.WRITE, dimensions=first),
        second=MemoryAccess(target="a", kind=AccessKind.READ, dimensions=second),
        nest=NEST,
    )


def test_identical_accesses():
    # a[i][j] vs a[i][j]
    dims = (
        AffineIndex(known=True, constant=0, coefficients=(1, 0)),
        AffineIndex(known=True, constant=0, coefficients=(0, 1)),
    )
    assert same_access_test(_pair(dims, dims)) == DependenceVerdict.INDEPENDENT


def test_loop_invariant_access():
    # a[i] is the same element for every iteration of j
    dims = (AffineIndex(known=True, constant=0, coefficients=(1, 0)),)
    assert same_access_test(_pair(dims, dims)) == DependenceVerdict.INCONCLUSIVE


def test_different_accesses():
    first = (AffineIndex(known=True, constant=0, coefficients=(0, 1)),)
    second = (AffineIndex(known=True, constant=1, coefficients=(0, 1)),)
    assert same_access_test(_pair(first, second)) == DependenceVerdict.INCONCLUSIVE


def test_unknown_dimension():
    # a[j][?] vs a[j][?] may still touch the same element in different iterations
    dims = (
        AffineIndex(known=True, constant=0, coefficients=(0, 1)),
        AffineIndex.unknown(),
    )
    assert same_access_test(_pair(dims, dims)) == DependenceVerdict.INCONCLUSIVE


def test_shape_mismatch():
    first = (AffineIndex(known=True, constant=0, coefficients=(0, 1)),)
    second = first + (AffineIndex.constant_index(0, 2),)
    assert same_access_test(_pair(first, second)) == DependenceVerdict.INCONCLUSIVE


if __name__ == "__main__":
    test_identical_accesses()
    test_loop_invariant_access()
    test_different_accesses()
    test_unknown_dimension()
    test_shape_mismatch()
