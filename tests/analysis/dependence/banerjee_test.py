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
from loopdep.analysis.dependence import banerjee_test, difference_interval


def _nest(*trip_counts):
    return LoopNest(
        [
            LoopLevel(name=f"i{k}", bounds=Bounds.from_trip_count(n))
            for k, n in enumerate(trip_counts)
        ]
    )


def _pair(first, second, nest):
    return AccessPair(
        first=MemoryAccess(target="a", kind=AccessKind.WRITE, dimensions=(first,)),
        second=MemoryAccess(target="a", kind=AccessKind.READ, dimensions=(second,)),
        nest=nest,
    )


def test_interval_contains_zero():
    # o + i vs o - i' over o in [0, 9], i in [0, 4]
    nest = _nest(10, 5)
    first = AffineIndex(known=True, constant=0, coefficients=(1, 1))
    second = AffineIndex(known=True, constant=0, coefficients=(1, -1))

    assert difference_interval(first, second, nest) == (0, 8)
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INCONCLUSIVE


def test_interval_above_zero():
    nest = _nest(10, 5)
    first = AffineIndex(known=True, constant=1, coefficients=(1, 1))
    second = AffineIndex(known=True, constant=0, coefficients=(1, -1))

    assert difference_interval(first, second, nest) == (1, 9)
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INDEPENDENT


def test_interval_below_zero():
    # 3 * o + i vs 3 * o + i' + 100
    nest = _nest(10, 5)
    first = AffineIndex(known=True, constant=0, coefficients=(3, 1))
    second = AffineIndex(known=True, constant=100, coefficients=(3, 1))

    assert difference_interval(first, second, nest) == (-104, -96)
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INDEPENDENT


def test_outer_difference_uses_bounds():
    # 2 * o + i vs o + i' + 20: (o - 20) + (i - i') over o in [0, 9]
    nest = _nest(10, 5)
    first = AffineIndex(known=True, constant=0, coefficients=(2, 1))
    second = AffineIndex(known=True, constant=20, coefficients=(1, 1))

    assert difference_interval(first, second, nest) == (-24, -7)
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INDEPENDENT


def test_unknown_bounds():
    nest = LoopNest(
        [
            LoopLevel(name="o", bounds=Bounds.unknown()),
            LoopLevel(name="i", bounds=Bounds.from_trip_count(5)),
        ]
    )
    first = AffineIndex(known=True, constant=100, coefficients=(2, 1))
    second = AffineIndex(known=True, constant=0, coefficients=(1, 1))
    assert difference_interval(first, second, nest) is None
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INCONCLUSIVE

    # Levels with equal coefficients do not need bounds
    second = AffineIndex(known=True, constant=0, coefficients=(2, 1))
    assert difference_interval(first, second, nest) == (96, 104)
    assert banerjee_test(_pair(first, second, nest)) == DependenceVerdict.INDEPENDENT


if __name__ == "__main__":
    test_interval_contains_zero()
    test_interval_above_zero()
    test_interval_below_zero()
    test_outer_difference_uses_bounds()
    test_unknown_bounds()
