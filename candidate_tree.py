from __future__ import annotations

import itertools
import math
from copy import copy
from typing import Any, Callable, Generic, Iterable, Protocol, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Shrink(Protocol[T]):
    def __call__(self, value: T) -> Iterable[T]:
        ...


def shrink_target(low, high):
    # zero if it is in range, otherwise the bound nearest to it
    target = 0
    if low > 0:
        target = low
    if high < 0:
        target = high
    return target


def shrink_int(low: int, high: int) -> Shrink[int]:
    target = shrink_target(low, high)
    def shrinker(value: int) -> Iterable[int]:
        # the target first, then ever closer to value by halving the distance,
        # e.g. 100 towards 0 gives 0, 50, 75, 88, 94, 97, 99
        if value == target:
            return
        direction = 1 if value > target else -1
        distance = abs(value - target)
        while distance != 0:
            yield value - direction * distance
            distance = distance // 2
    return shrinker


def shrink_float(low: float, high: float) -> Shrink[float]:
    target = float(shrink_target(low, high))
    def shrinker(value: float) -> Iterable[float]:
        if value == target or math.isnan(value):
            return
        yield target
        lower, upper = min(target, value), max(target, value)
        truncated = float(math.trunc(value))
        if lower < truncated < upper:
            yield truncated
        step = (value - target) / 2
        while True:
            candidate = value - step
            if candidate == value:
                # the remaining distance is below float resolution
                break
            if candidate != truncated:
                yield candidate
            step = step / 2
    return shrinker


class CandidateTree(Generic[T]):
    """A value together with its lazily produced shrink candidates.

    `candidates` can be iterated as often as needed: each access hands out
    a fresh copy of a memoizing tee, so children are computed at most once
    and only when somebody asks for them.
    """

    def __init__(self, value: T, candidates: Iterable[CandidateTree[T]]) -> None:
        self._value = value
        (self._candidates,) = itertools.tee(candidates, 1)

    @property
    def value(self) -> T:
        return self._value

    @property
    def candidates(self) -> Iterable[CandidateTree[T]]:
        return copy(self._candidates)

    def __repr__(self) -> str:
        return f"CandidateTree(value={self._value!r})"


def tree_constant(value: T) -> CandidateTree[T]:
    return CandidateTree(value, tuple())


def tree_from_shrink(value: T, shrink: Shrink[T]) -> CandidateTree[T]:
    return CandidateTree(
        value = value,
        candidates = (
            tree_from_shrink(v, shrink)
            for v in shrink(value)
        )
    )


def tree_map(f: Callable[[T], U], tree: CandidateTree[T]) -> CandidateTree[U]:
    value = f(tree.value)
    candidates = (tree_map(f, candidate) for candidate in tree.candidates)
    return CandidateTree(
        value = value,
        candidates = candidates
    )


def _copy_and_set(trees: Sequence[T], i: int, tree: T) -> list[T]:
    result = list(trees)
    result[i] = tree
    return result


def tree_mapN(f: Callable[..., U], trees: Iterable[CandidateTree[Any]]) -> CandidateTree[U]:
    trees = list(trees)
    value = f(*[tree.value for tree in trees])

    # one position at a time, all others held fixed
    candidates = (
        tree_mapN(f, _copy_and_set(trees, i, candidate))
        for i in range(len(trees))
        for candidate in trees[i].candidates
    )

    return CandidateTree(
        value = value,
        candidates = candidates
    )


def tree_bind(
    f: Callable[[T], CandidateTree[U]],
    tree: CandidateTree[T],
    skip: tuple[type[Exception], ...] = ()
) -> CandidateTree[U]:
    """Upstream candidates first, each with `f` re-run on the smaller value,
    then the candidates of the downstream tree for the current value.

    An upstream candidate for which `f` raises one of `skip` is left out.
    """
    tree_u = f(tree.value)

    def upstream() -> Iterable[CandidateTree[U]]:
        for candidate in tree.candidates:
            try:
                smaller = tree_bind(f, candidate, skip)
            except skip:
                continue
            yield smaller

    return CandidateTree(
        value = tree_u.value,
        candidates = itertools.chain(
            upstream(),
            tree_u.candidates
        )
    )


def tree_list(
    length: CandidateTree[int],
    elements: Sequence[CandidateTree[T]]
) -> CandidateTree[list[T]]:
    """Tree for a list whose length was drawn as `length`.

    Removals come first: for every shorter length the length tree offers,
    drop a contiguous run of elements at each start position. After that
    each element shrinks on its own, like `tree_mapN`. Lengths outside
    `[0, len(elements))` are skipped so a list never grows while shrinking.
    """
    elements = list(elements)
    n = len(elements)

    def removals() -> Iterable[CandidateTree[list[T]]]:
        for shorter in length.candidates:
            remove = n - shorter.value
            if not 0 < remove <= n:
                continue
            for start in range(n - remove + 1):
                yield tree_list(shorter, elements[:start] + elements[start + remove:])

    element_shrinks = (
        tree_list(length, _copy_and_set(elements, i, candidate))
        for i in range(n)
        for candidate in elements[i].candidates
    )

    return CandidateTree(
        value = [element.value for element in elements],
        candidates = itertools.chain(removals(), element_shrinks)
    )
