from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

import structlog
from pydantic import BaseModel, Field, model_validator

from candidate_tree import CandidateTree
from gen import Gen, Size
from outcome import Property, Status, evaluate
from random_source import RandomSource
from shrink import shrink

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class TooManyDiscards(Exception):
    pass


class Config(BaseModel):
    """Settings for one `forall` run.

    Frozen after construction. Invalid values raise pydantic's
    `ValidationError`, which is a `ValueError`.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    trials: int = Field(default=100, ge=0, description="Trials that must pass")
    max_shrinks: int = Field(default=1000, ge=0, description="Accepted shrink steps before giving up")
    min_size: Size = Field(default=0, ge=0, description="Size of the first attempt")
    max_size: Size = Field(default=100, ge=0, description="Size the ramp saturates at")
    max_discards: int = Field(default=100, ge=0, description="Discards in a row allowed per trial")
    seed: Optional[int] = Field(default=None, description="Master seed, random when unset")

    @model_validator(mode="after")
    def validate_size_range(self) -> Config:
        if self.min_size > self.max_size:
            raise ValueError(f"min_size {self.min_size} is larger than max_size {self.max_size}")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load settings from PBT_* environment variables; keyword overrides win.

        Environment variable format: PBT_SEED, PBT_TRIALS, PBT_MAX_SHRINKS,
        PBT_MIN_SIZE, PBT_MAX_SIZE, PBT_MAX_DISCARDS. Empty variables are
        ignored.
        """
        from dynaconf import Dynaconf

        dynaconf_settings = Dynaconf(
            envvar_prefix="PBT",
            environments=False,  # No [default]/[production] sections
            load_dotenv=False,  # Don't auto-load .env
        )

        # Dynaconf returns uppercase keys and its own internal settings
        raw_config = {
            key.lower(): value
            for key, value in dynaconf_settings.as_dict().items()
            if key.lower() in cls.model_fields and value != ""
        }
        raw_config.update(overrides)
        return cls(**raw_config)

    def size_at(self, attempt: int) -> Size:
        # grows by one per attempt, then stays at max_size
        return min(self.max_size, self.min_size + attempt)


@dataclass(frozen=True)
class Success:
    trials_run: int
    discarded: int
    seed: int

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure(Generic[T]):
    original_value: T
    minimized_value: T
    trials_run: int
    shrink_count: int
    trial_index: int
    size: Size
    trial_seed: int
    seed: int
    reason: Optional[str] = None
    shrink_budget_reached: bool = False

    @property
    def is_success(self) -> bool:
        return False


Verdict = Union[Success, Failure[T]]


def forall(gen: Gen[T], property: Property[T], config: Optional[Config] = None) -> Verdict[T]:
    """Run `property` against values from `gen` until it fails or trials run out.

    Each attempt draws a tree from a fresh split of the master source at the
    size `config.size_at` gives for that attempt. Discarded attempts do not
    count as trials, but a trial discarded more than `config.max_discards`
    times raises `TooManyDiscards`. The first failure is shrunk and returned
    as a `Failure`; `GenerationError` from `gen` propagates untouched.
    """
    if config is None:
        config = Config()
    seed = config.seed if config.seed is not None else random.SystemRandom().getrandbits(64)
    master = RandomSource(seed)

    logger.debug(
        "forall.start",
        seed=seed,
        trials=config.trials,
        min_size=config.min_size,
        max_size=config.max_size,
    )

    attempt = 0
    discarded = 0
    for trial_index in range(config.trials):
        discards_in_a_row = 0
        while True:
            # Sampling
            trial_source, master = master.split()
            size = config.size_at(attempt)
            attempt += 1
            tree = gen.generate(size, trial_source)

            # Evaluating
            outcome = evaluate(property, tree.value)
            if outcome.status is Status.DISCARD:
                discarded += 1
                discards_in_a_row += 1
                logger.debug("trial.discarded", trial_index=trial_index, discards=discards_in_a_row)
                if discards_in_a_row > config.max_discards:
                    raise TooManyDiscards(
                        f"gave up after {discards_in_a_row} discards in a row at trial {trial_index} "
                        f"({trial_index} trials passed, seed={seed})")
                continue
            break

        if outcome.status is Status.PASS:
            continue

        # Shrinking
        logger.info(
            "trial.failed",
            trial_index=trial_index,
            size=size,
            seed=seed,
            value=repr(tree.value),
            reason=outcome.reason,
        )
        result = shrink(tree, property, config.max_shrinks, reason=outcome.reason)

        # Reporting
        return Failure(
            original_value=tree.value,
            minimized_value=result.value,
            trials_run=trial_index + 1,
            shrink_count=result.shrink_count,
            trial_index=trial_index,
            size=size,
            trial_seed=trial_source.seed,
            seed=seed,
            reason=result.reason,
            shrink_budget_reached=result.budget_reached,
        )

    logger.info("forall.passed", trials_run=config.trials, discarded=discarded, seed=seed)
    return Success(trials_run=config.trials, discarded=discarded, seed=seed)


def reproduce(gen: Gen[T], failure: Failure[T]) -> CandidateTree[T]:
    """Regenerate the tree of the trial that produced `failure`."""
    return gen.generate(failure.size, RandomSource(failure.trial_seed))
