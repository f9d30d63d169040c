from __future__ import annotations

import math
import random
from typing import (Any, Callable, Generic, Iterable, Mapping, Optional,
                    TypeVar)

from candidate_tree import (CandidateTree, shrink_float, shrink_int,
                            tree_bind, tree_constant, tree_from_shrink,
                            tree_list, tree_map, tree_mapN)
from random_source import RandomSource

T = TypeVar("T")
U = TypeVar("U")

Size = int


class GenerationError(Exception):
    pass


class Random(Generic[T]):
    def __init__(self, generator: Callable[[Size, RandomSource], T]):
        self._generator = generator

    def generate(self, size: Size, source: RandomSource) -> T:
        return self._generator(size, source)


def random_constant(value: T) -> Random[T]:
    return Random(lambda size, source: value)

def random_int_between(low: int, high: int) -> Random[int]:
    def generator(size: Size, source: RandomSource) -> int:
        if low > high:
            raise GenerationError(f"int_between: empty range {low=} {high=}")
        return source.next_in_range(low, high)
    return Random(generator)

def random_float_between(low: float, high: float) -> Random[float]:
    def generator(size: Size, source: RandomSource) -> float:
        if not (math.isfinite(low) and math.isfinite(high)):
            raise GenerationError(f"float_between: bounds must be finite {low=} {high=}")
        if low > high:
            raise GenerationError(f"float_between: empty range {low=} {high=}")
        r = source.next_float()
        # interpolate rather than low + (high - low) * r, which overflows for wide ranges
        return min(max(low * (1 - r) + high * r, low), high)
    return Random(generator)

def random_map(func: Callable[[T], U], gen: Random[T]) -> Random[U]:
    return Random(lambda size, source: func(gen.generate(size, source)))

def random_mapN(func: Callable[[list[Any]], T], gens: Iterable[Random[Any]]) -> Random[T]:
    gens = tuple(gens)
    def generator(size: Size, source: RandomSource) -> T:
        results = []
        for gen in gens:
            left, source = source.split()
            results.append(gen.generate(size, left))
        return func(results)
    return Random(generator)


Gen = Random[CandidateTree[T]]

def constant(value: T) -> Gen[T]:
    return random_constant(tree_constant(value))

def int_between(low: int, high: int) -> Gen[int]:
    return random_map(lambda v: tree_from_shrink(v, shrink_int(low, high)), random_int_between(low, high))

def float_between(low: float, high: float) -> Gen[float]:
    return random_map(lambda v: tree_from_shrink(v, shrink_float(low, high)), random_float_between(low, high))

def map(func: Callable[[T], U], gen: Gen[T]) -> Gen[U]:
    return random_map(lambda tree: tree_map(func, tree), gen)

def mapN(func: Callable[..., T], gens: Iterable[Gen[Any]]) -> Gen[T]:
    return random_mapN(lambda trees: tree_mapN(func, trees), gens)

def bind(func: Callable[[T], Gen[U]], gen: Gen[T]) -> Gen[U]:
    def generator(size: Size, source: RandomSource) -> CandidateTree[U]:
        left, right = source.split()
        # every upstream candidate regenerates the downstream tree from the same
        # seed, so shrinking the upstream value keeps the downstream draws
        def inner_bind(value: T) -> CandidateTree[U]:
            return func(value).generate(size, RandomSource(right.seed))
        # an upstream shrink the downstream generator cannot satisfy is dropped
        return tree_bind(inner_bind, gen.generate(size, left), skip=(GenerationError,))
    return Random(generator)

def sized(func: Callable[[Size], Gen[T]]) -> Gen[T]:
    return Random(lambda size, source: func(size).generate(size, source))

def resize(size: Size, gen: Gen[T]) -> Gen[T]:
    return Random(lambda _, source: gen.generate(size, source))


def tuple_of(*gens: Gen[Any]) -> Gen[tuple[Any, ...]]:
    return mapN(lambda *values: tuple(values), gens)

def record_of(fields: Mapping[str, Gen[Any]], into: Callable[..., T] = dict) -> Gen[T]:
    names = list(fields)
    return mapN(lambda *values: into(**dict(zip(names, values))), [fields[name] for name in names])

def list_of_gen(gens: Iterable[Gen[Any]]) -> Gen[list[Any]]:
    return mapN(lambda *values: list(values), gens)

def list_of_length(length: int, gen: Gen[T]) -> Gen[list[T]]:
    if length < 0:
        def fail(size: Size, source: RandomSource) -> CandidateTree[list[T]]:
            raise GenerationError(f"list_of_length: negative length {length}")
        return Random(fail)
    return list_of_gen([gen] * length)

def list_of(gen: Gen[T], length: Optional[Gen[int]] = None) -> Gen[list[T]]:
    """Lists of `gen` values, by default up to `size` elements long.

    Unlike `bind(lambda n: list_of_length(n, gen), length)`, shrinking the
    length drops elements from the list drawn so far instead of drawing a
    fresh, shorter one.
    """
    if length is None:
        length = sized(lambda size: int_between(0, size))
    def generator(size: Size, source: RandomSource) -> CandidateTree[list[T]]:
        length_source, source = source.split()
        length_tree = length.generate(size, length_source)
        if length_tree.value < 0:
            raise GenerationError(f"list_of: negative length {length_tree.value}")
        elements = []
        for _ in range(length_tree.value):
            left, source = source.split()
            elements.append(gen.generate(size, left))
        return tree_list(length_tree, elements)
    return Random(generator)

def element_of(elements: Iterable[T]) -> Gen[T]:
    if isinstance(elements, (set, frozenset)):
        # iteration order of a set is not stable across interpreter runs
        choices = tuple(sorted(elements, key=repr))
    else:
        choices = tuple(elements)
    if not choices:
        def fail(size: Size, source: RandomSource) -> CandidateTree[T]:
            raise GenerationError("element_of: nothing to choose from")
        return Random(fail)
    return map(lambda i: choices[i], int_between(0, len(choices) - 1))

def one_of(*gens: Gen[Any]) -> Gen[Any]:
    if not gens:
        def fail(size: Size, source: RandomSource) -> CandidateTree[Any]:
            raise GenerationError("one_of: no generators to choose from")
        return Random(fail)
    return bind(lambda i: gens[i], int_between(0, len(gens) - 1))

def string_of(chars: Gen[str], length: Optional[Gen[int]] = None) -> Gen[str]:
    return map("".join, list_of(chars, length))

letters = map(chr, int_between(ord('a'), ord('z')))


def sample(gen: Gen[T], size: Size = 10, count: int = 10, seed: Optional[int] = None) -> list[T]:
    source = RandomSource(random.getrandbits(64) if seed is None else seed)
    values = []
    for _ in range(count):
        left, source = source.split()
        values.append(gen.generate(size, left).value)
    return values
