from __future__ import annotations

import sys
from typing import Optional, TextIO, TypeVar

from forall import Config, Failure, Verdict, forall
from gen import Gen
from outcome import Property

T = TypeVar("T")


class PropertyFalsified(AssertionError):
    def __init__(self, failure: Failure) -> None:
        super().__init__(
            f"Falsified after {failure.trials_run} tests and {failure.shrink_count} shrinks: "
            f"{failure.minimized_value!r} (reason: {failure.reason}, seed={failure.seed})")
        self.failure = failure


def print_report(verdict: Verdict, out: Optional[TextIO] = None) -> None:
    if out is None:
        out = sys.stdout
    if verdict.is_success:
        print(f"Success: {verdict.trials_run} tests passed (seed={verdict.seed}).", file=out)
        return
    print(f"Fail: at test {verdict.trial_index} with arguments {verdict.original_value!r}.", file=out)
    gave_up = "ran out of shrinks" if verdict.shrink_budget_reached else "gave up"
    print(
        f"Shrinking: {gave_up} at arguments {verdict.minimized_value!r} "
        f"after {verdict.shrink_count} shrinks.",
        file=out)
    if verdict.reason:
        print(f"Reason: {verdict.reason}", file=out)
    print(f"Seed: {verdict.seed} (set PBT_SEED to replay)", file=out)


def check(gen: Gen[T], property: Property[T], config: Optional[Config] = None) -> Verdict[T]:
    verdict = forall(gen, property, config)
    print_report(verdict)
    return verdict


def assert_forall(gen: Gen[T], property: Property[T], config: Optional[Config] = None) -> None:
    verdict = forall(gen, property, config)
    if not verdict.is_success:
        raise PropertyFalsified(verdict)
