from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Optional, TypeVar

import structlog

from candidate_tree import CandidateTree
from gen import GenerationError
from outcome import Property, evaluate

T = TypeVar("T")

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ShrinkResult(Generic[T]):
    value: T
    shrink_count: int
    # stopped because max_shrinks steps were taken, not because no candidate failed
    budget_reached: bool
    reason: Optional[str] = None


def _derivable(candidates: Iterable[CandidateTree[T]]) -> Iterator[CandidateTree[T]]:
    # a candidate whose generator cannot be satisfied is skipped
    iterator = iter(candidates)
    while True:
        try:
            yield next(iterator)
        except StopIteration:
            return
        except GenerationError as e:
            logger.debug("shrink.candidate_skipped", error=str(e))


def shrink(
    tree: CandidateTree[T],
    property: Property[T],
    max_shrinks: int = 1000,
    reason: Optional[str] = None,
) -> ShrinkResult[T]:
    """Greedily walk `tree` towards a smaller value that still fails.

    `tree.value` is assumed to fail `property` (for `reason`). At each node
    the first candidate that also fails becomes the new node and the search
    starts over on its candidates; the parent's remaining candidates are
    never looked at again. Stops when no candidate fails or after
    `max_shrinks` accepted steps, whichever comes first. Candidates that
    pass, are discarded, or cannot be generated all count as not failing.
    """
    current = tree
    shrink_count = 0
    while shrink_count < max_shrinks:
        for smaller in _derivable(current.candidates):
            outcome = evaluate(property, smaller.value)
            if outcome.is_failure:
                # cool, found a smaller value that still fails - keep shrinking
                current = smaller
                reason = outcome.reason
                shrink_count += 1
                logger.debug("shrink.step", shrink_count=shrink_count, value=repr(current.value))
                break
        else:
            break

    budget_reached = shrink_count >= max_shrinks
    logger.info(
        "shrink.done",
        shrink_count=shrink_count,
        budget_reached=budget_reached,
        value=repr(current.value),
    )
    return ShrinkResult(
        value=current.value,
        shrink_count=shrink_count,
        budget_reached=budget_reached,
        reason=reason,
    )
