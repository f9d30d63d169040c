from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, NoReturn, Optional, TypeVar, Union

from gen import GenerationError

T = TypeVar("T")


class Discard(Exception):
    """Raised by a property to decline judging the value it was given."""


def discard() -> NoReturn:
    raise Discard()


def assume(precondition: bool) -> None:
    if not precondition:
        raise Discard()


class Status(Enum):
    PASS = "pass"
    FAIL = "fail"
    DISCARD = "discard"


@dataclass(frozen=True)
class Outcome:
    status: Status
    reason: Optional[str] = None

    @property
    def is_failure(self) -> bool:
        return self.status is Status.FAIL


PASSED = Outcome(Status.PASS)
DISCARDED = Outcome(Status.DISCARD)


def failed(reason: str) -> Outcome:
    return Outcome(Status.FAIL, reason)


PropertyResult = Union[bool, None, Outcome]
Property = Callable[[T], PropertyResult]


def evaluate(property: Property[T], value: T) -> Outcome:
    """Run `property` on `value` and classify what happened.

    True or None pass, False fails, an `Outcome` is taken as is. `Discard`
    means the value did not meet a precondition. An `AssertionError` or any
    other exception is a failure, with the exception as the reason.
    """
    try:
        result: Any = property(value)
    except Discard:
        return DISCARDED
    except GenerationError:
        raise
    except AssertionError as e:
        return failed(str(e) or "assertion failed")
    except Exception as e:
        return failed(f"{type(e).__name__}: {e}")

    if isinstance(result, Outcome):
        return result
    if result is None or result is True:
        return PASSED
    if result is False:
        return failed("property returned False")
    raise TypeError(
        f"property must return a bool, None or an Outcome, got {type(result).__name__}")
