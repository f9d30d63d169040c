"""Tests for the greedy shrink search."""

import itertools

from candidate_tree import (CandidateTree, shrink_int, tree_constant,
                            tree_from_shrink, tree_mapN)
from gen import GenerationError, bind, element_of, int_between, list_of
from outcome import DISCARDED, failed
from random_source import RandomSource
from shrink import shrink


def counting_tree(n: int) -> CandidateTree[int]:
    # every node has an endless row of children, each failing
    return CandidateTree(n, (counting_tree(n + 1 + i) for i in itertools.count()))


def test_shrinks_to_smallest_failing_int() -> None:
    tree = tree_from_shrink(20, shrink_int(0, 20))
    result = shrink(tree, lambda v: v <= 3)
    # 20 -> 10 -> 5 -> 4
    assert result.value == 4
    assert result.shrink_count == 3
    assert not result.budget_reached


def test_no_failing_candidate_keeps_root() -> None:
    tree = tree_from_shrink(4, shrink_int(0, 20))
    result = shrink(tree, lambda v: v != 4)
    assert result.value == 4
    assert result.shrink_count == 0


def test_stops_at_budget_on_unbounded_tree() -> None:
    result = shrink(counting_tree(0), lambda v: False, max_shrinks=50)
    assert result.shrink_count == 50
    assert result.value == 50
    assert result.budget_reached


def test_large_budget_does_not_recurse() -> None:
    result = shrink(counting_tree(0), lambda v: False, max_shrinks=5000)
    assert result.shrink_count == 5000


def test_discarded_candidates_are_not_taken() -> None:
    tree = CandidateTree(10, [tree_from_shrink(1, shrink_int(0, 10)), tree_from_shrink(5, shrink_int(0, 10))])

    def prop(v):
        if v == 1:
            return DISCARDED
        return v < 5

    result = shrink(tree, prop)
    assert result.value == 5


def test_restarts_from_the_childs_own_candidates() -> None:
    seen = []
    grandchild = CandidateTree(1, [])
    child = CandidateTree(5, [grandchild])
    tree = CandidateTree(10, [child, CandidateTree(7, [])])

    def prop(v):
        seen.append(v)
        return False

    result = shrink(tree, prop)
    assert result.value == 1
    # the parent's other child is never looked at
    assert 7 not in seen


def test_reason_follows_the_accepted_candidate() -> None:
    tree = tree_from_shrink(20, shrink_int(0, 20))
    result = shrink(tree, lambda v: failed(f"{v} too big") if v > 3 else True, reason="20 too big")
    assert result.value == 4
    assert result.reason == "4 too big"


def test_result_still_fails() -> None:
    prop = lambda xs: sum(xs) < 100
    for seed in range(20):
        tree = list_of(int_between(0, 100)).generate(30, RandomSource(seed))
        if prop(tree.value):
            continue
        result = shrink(tree, prop)
        assert not prop(result.value)


def test_tuple_result_is_a_local_minimum_along_each_field() -> None:
    def prop(pair):
        a, b = pair
        return a < b + 1

    a = tree_from_shrink(87, shrink_int(1, 100))
    b = tree_from_shrink(15, shrink_int(1, 100))
    result = shrink(tree_mapN(lambda x, y: (x, y), [a, b]), prop)
    assert result.value == (2, 1)
    x, y = result.value
    for smaller in shrink_int(1, 100)(x):
        assert prop((smaller, y))
    for smaller in shrink_int(1, 100)(y):
        assert prop((x, smaller))


def test_ungeneratable_candidate_is_skipped() -> None:
    def candidates():
        raise GenerationError("element_of: nothing to choose from")
        yield

    tree = CandidateTree(10, itertools.chain(candidates(), [tree_constant(5)]))
    result = shrink(tree, lambda v: v < 5)
    assert result.value == 5
    assert result.shrink_count == 1


def test_bind_shrinks_past_an_empty_downstream_choice() -> None:
    # shrinking n towards 0 passes through element_of(range(0)), which cannot generate
    gen = bind(lambda n: element_of(range(n)), int_between(0, 50))
    prop = lambda x: x < 3
    checked = 0
    for seed in range(30):
        try:
            tree = gen.generate(10, RandomSource(seed))
        except GenerationError:
            continue
        if prop(tree.value):
            continue
        result = shrink(tree, prop)
        assert result.value == 3
        assert not result.budget_reached
        checked += 1
    assert checked > 0
