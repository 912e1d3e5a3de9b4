# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import pytest

from loopdep.analysis import (
    AccessKind,
    AffineIndex,
    Bounds,
    LoopLevel,
    LoopNest,
    MemoryAccess,
)
from loopdep.generators import (
    has_cross_iteration_collision,
    random_loop_nest,
    render_c,
)


def _access(kind, constant, coefficients):
    return MemoryAccess(
        target="a",
        kind=kind,
        dimensions=(AffineIndex(True, constant, coefficients),),
    )


def test_random_loop_nest():
    nest, accesses = random_loop_nest(seed=42)

    assert nest.names == ["i1", "i2", "i3", "i4", "i5"]
    for level in nest.levels:
        assert level.bounds.known
        assert 5 <= level.bounds.upper + 1 <= 1000

    write, read = accesses
    assert write.is_write and read.is_read
    for access in accesses:
        assert access.target == "a"
        (index,) = access.dimensions
        assert 1 <= index.constant <= 100
        assert index.depth == 5
        assert all(c == 0 or 1 <= c <= 100 for c in index.coefficients)


def test_seed_is_reproducible():
    first = random_loop_nest(depth=3, seed=7)
    second = random_loop_nest(depth=3, seed=7)
    assert repr(first[0]) == repr(second[0])
    assert first[1] == second[1]


def test_invalid_depth():
    with pytest.raises(ValueError):
        random_loop_nest(depth=0)


def test_render_c():
    nest = LoopNest(
        [
            LoopLevel(name="i1", bounds=Bounds.from_trip_count(10)),
            LoopLevel(name="i2", bounds=Bounds.from_trip_count(5)),
        ]
    )
    write = _access(AccessKind.WRITE, 0, (3, 1))
    read = _access(AccessKind.READ, 100, (3, 0))

    assert render_c(nest, [write, read]) == "\n".join(
        [
            "void func() {",
            "  int a[1000000];",
            "  for (int i1=0; i1<10;++i1)",
            "      for (int i2=0; i2<5;++i2)",
            "          a[0+3*i1+1*i2]=a[100+3*i1];",
            "}",
        ]
    )


def test_collision_oracle():
    nest = LoopNest([LoopLevel(name="i", bounds=Bounds.from_trip_count(10))])
    write = _access(AccessKind.WRITE, 0, (1,))

    assert has_cross_iteration_collision(
        nest, write, _access(AccessKind.READ, -1, (1,))
    )
    assert not has_cross_iteration_collision(
        nest, write, _access(AccessKind.READ, -10, (1,))
    )
    # Same iteration only
    assert not has_cross_iteration_collision(nest, write, write)
    # Every iteration writes a[0]
    invariant = _access(AccessKind.WRITE, 0, (0,))
    assert has_cross_iteration_collision(nest, invariant, invariant)


def test_collision_oracle_shares_outer_iterations():
    # a[10 * i + j] vs a[10 * i + j + 10], the same element one outer
    # iteration later
    nest = LoopNest(
        [
            LoopLevel(name="i", bounds=Bounds.from_trip_count(4)),
            LoopLevel(name="j", bounds=Bounds.from_trip_count(3)),
        ]
    )
    write = _access(AccessKind.WRITE, 0, (10, 1))
    assert not has_cross_iteration_collision(
        nest, write, _access(AccessKind.READ, 0, (10, 1))
    )
    assert not has_cross_iteration_collision(
        nest, write, _access(AccessKind.READ, 10, (10, 1))
    )
    # a[0] is written at (0, 0) and read at every (0, j)
    assert has_cross_iteration_collision(
        nest, write, _access(AccessKind.READ, 0, (1, 0))
    )


def test_collision_oracle_needs_bounds():
    nest = LoopNest([LoopLevel(name="i", bounds=Bounds.unknown())])
    write = _access(AccessKind.WRITE, 0, (1,))
    with pytest.raises(ValueError):
        has_cross_iteration_collision(nest, write, write)


if __name__ == "__main__":
    test_random_loop_nest()
    test_seed_is_reproducible()
    test_invalid_depth()
    test_render_c()
    test_collision_oracle()
    test_collision_oracle_shares_outer_iterations()
    test_collision_oracle_needs_bounds()
