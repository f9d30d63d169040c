"""Tests for classifying what a property did with a value."""

import pytest

from gen import GenerationError
from outcome import (DISCARDED, PASSED, Outcome, Status, assume, discard,
                     evaluate, failed)


@pytest.mark.parametrize("result", [True, None])
def test_pass(result) -> None:
    assert evaluate(lambda v: result, 1) == PASSED


def test_false_fails() -> None:
    outcome = evaluate(lambda v: False, 1)
    assert outcome.status is Status.FAIL
    assert outcome.is_failure
    assert outcome.reason == "property returned False"


def test_outcome_is_returned_as_is() -> None:
    assert evaluate(lambda v: failed("too big"), 1) == Outcome(Status.FAIL, "too big")
    assert evaluate(lambda v: DISCARDED, 1) == DISCARDED


def test_assertion_error_fails_with_message() -> None:
    def prop(v):
        assert v < 0, f"{v} is not negative"

    outcome = evaluate(prop, 5)
    assert outcome.is_failure
    assert outcome.reason == "5 is not negative"


def test_bare_assertion_error_has_a_reason() -> None:
    def prop(v):
        assert v < 0

    assert evaluate(prop, 5).reason == "assertion failed"


def test_other_exception_fails_with_type_and_message() -> None:
    outcome = evaluate(lambda v: 1 // v, 0)
    assert outcome.is_failure
    assert outcome.reason.startswith("ZeroDivisionError:")


def test_discard() -> None:
    def prop(v):
        discard()

    assert evaluate(prop, 1).status is Status.DISCARD


def test_assume() -> None:
    def prop(v):
        assume(v % 2 == 0)
        return v % 2 == 0

    assert evaluate(prop, 3) == DISCARDED
    assert evaluate(prop, 4) == PASSED


def test_generation_error_is_not_a_failure() -> None:
    def prop(v):
        raise GenerationError("no values")

    with pytest.raises(GenerationError):
        evaluate(prop, 1)


def test_unexpected_return_type() -> None:
    with pytest.raises(TypeError):
        evaluate(lambda v: "yes", 1)
