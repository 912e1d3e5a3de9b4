# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import itertools
import numpy as np

from typing import List, Sequence, Tuple, Union

from loopdep.analysis.affine_index import AffineIndex
from loopdep.analysis.bounds import Bounds
from loopdep.analysis.loop_nest import LoopLevel, LoopNest
from loopdep.analysis.memory_access import AccessKind, MemoryAccess


def random_loop_nest(
    depth: int = 5,
    trip_counts: Tuple[int, int] = (5, 1000),
    constants: Tuple[int, int] = (1, 100),
    coefficients: Tuple[int, int] = (1, 100),
    density: float = 0.75,
    seed: Union[int, np.random.Generator, None] = None,
) -> Tuple[LoopNest, List[MemoryAccess]]:
    """
    Generates a perfect loop nest ``for i1 ... for i<depth>: a[w] = a[r]``
    where w and r are random affine expressions over all loop levels.
    Each level appears in an expression with probability ``density``.

    :param trip_counts: Inclusive range of the trip count of each level.
    :param constants: Inclusive range of the constant terms.
    :param coefficients: Inclusive range of the non-zero coefficients.
    :param seed: Seed or numpy generator.
    :return: The loop nest and the write and read access to ``a``.
    """
    if depth < 1:
        raise ValueError("A loop nest needs at least one level")

    rng = np.random.default_rng(seed)
    levels = []
    for k in range(depth):
        trip_count = int(rng.integers(trip_counts[0], trip_counts[1], endpoint=True))
        levels.append(
            LoopLevel(name=f"i{k + 1}", bounds=Bounds.from_trip_count(trip_count))
        )
    nest = LoopNest(levels)

    accesses = []
    for kind in (AccessKind.WRITE, AccessKind.READ):
        constant = int(rng.integers(constants[0], constants[1], endpoint=True))
        coefs = []
        for _ in range(depth):
            if rng.random() < density:
                coefs.append(
                    int(rng.integers(coefficients[0], coefficients[1], endpoint=True))
                )
            else:
                coefs.append(0)

        index = AffineIndex(known=True, constant=constant, coefficients=tuple(coefs))
        accesses.append(MemoryAccess(target="a", kind=kind, dimensions=(index,)))

    return nest, accesses


def render_c(
    nest: LoopNest,
    accesses: Sequence[MemoryAccess],
    name: str = "func",
    size: int = 1000000,
) -> str:
    """
    Prints the loop nest as C source, one assignment from the read to the
    write access.
    """
    write = next(access for access in accesses if access.is_write)
    read = next(access for access in accesses if access.is_read)

    lines = [f"void {name}() {{", f"  int {write.target}[{size}];"]
    indent = "  "
    for level in nest.levels:
        if not level.bounds.known:
            raise ValueError(f"Loop {level.name} has unknown bounds")

        trip_count = level.bounds.upper + 1
        lines.append(
            f"{indent}for (int {level.name}=0; {level.name}<{trip_count};"
            f"++{level.name})"
        )
        indent += "    "

    lines.append(
        f"{indent}{_render_access(write, nest)}={_render_access(read, nest)};"
    )
    lines.append("}")
    return "\n".join(lines)


def has_cross_iteration_collision(
    nest: LoopNest, first: MemoryAccess, second: MemoryAccess
) -> bool:
    """
    Brute-force search for two different iterations of the innermost loop,
    under the same outer iterations, in which ``first`` and ``second`` touch
    the same element. Unknown dimensions are assumed to always collide.
    """
    if nest.depth == 0:
        raise ValueError("Empty loop nest")
    if any(not level.bounds.known for level in nest.levels):
        raise ValueError("Collision search needs known bounds")
    if len(first.dimensions) != len(second.dimensions):
        return True

    inner_bounds = nest.innermost.bounds
    inner = np.arange(inner_bounds.lower, inner_bounds.upper + 1, dtype=np.int64)
    off_diagonal = inner[:, None] != inner[None, :]

    outer_ranges = [
        range(nest.bounds(level).lower, nest.bounds(level).upper + 1)
        for level in range(nest.depth - 1)
    ]
    for outer in itertools.product(*outer_ranges):
        collides = off_diagonal.copy()
        for a, b in zip(first.dimensions, second.dimensions):
            if not a.known or not b.known:
                continue

            values_a = _evaluate(a, outer, inner)
            values_b = _evaluate(b, outer, inner)
            collides &= values_a[:, None] == values_b[None, :]

        if collides.any():
            return True

    return False


def _evaluate(
    index: AffineIndex, outer: Sequence[int], inner: np.ndarray
) -> np.ndarray:
    base = index.constant + sum(c * o for c, o in zip(index.outer, outer))
    return base + index.innermost * inner


def _render_access(access: MemoryAccess, nest: LoopNest) -> str:
    subscripts = "".join(
        f"[{_render_index(index, nest)}]" for index in access.dimensions
    )
    return f"{access.target}{subscripts}"


def _render_index(index: AffineIndex, nest: LoopNest) -> str:
    if not index.known:
        raise ValueError("Cannot render an unknown index")

    expression = str(index.constant)
    for name, coefficient in zip(nest.names, index.coefficients):
        if coefficient != 0:
            expression += f"+{coefficient}*{name}"
    return expression
