from __future__ import annotations

import pytest

from ruleflow.result import Failure, Result, Success, combine, curry, failure

SAMPLES: list[Result[int]] = [Success(3), failure("boom"), Failure(("a", "b"))]


def _inc(x: int) -> int:
    return x + 1


def _double(x: int) -> int:
    return x * 2


def _half(x: int) -> Result[int]:
    return Success(x // 2) if x % 2 == 0 else failure("Odd")


def _positive(x: int) -> Result[int]:
    return Success(x) if x > 0 else failure("Not positive")


def _explode(x: object) -> Result[int]:
    raise AssertionError("must not be called")


@pytest.mark.parametrize("r", SAMPLES)
def test_map_identity_law(r: Result[int]) -> None:
    assert r.map(lambda x: x) == r


@pytest.mark.parametrize("r", SAMPLES)
def test_map_composition_law(r: Result[int]) -> None:
    assert r.map(_inc).map(_double) == r.map(lambda x: _double(_inc(x)))


def test_flat_map_left_identity() -> None:
    assert Success(4).flat_map(_half) == _half(4)
    assert Success(5).flat_map(_half) == _half(5)


def test_flat_map_on_failure_keeps_messages_and_skips_f() -> None:
    r = failure("Too small")
    assert r.flat_map(_explode) == Failure(("Too small",))


@pytest.mark.parametrize("r", [Success(8), Success(6), Success(-4), failure("x")])
def test_flat_map_associativity(r: Result[int]) -> None:
    left = r.flat_map(_half).flat_map(_positive)
    right = r.flat_map(lambda x: _half(x).flat_map(_positive))
    assert left == right


def test_flat_map_chain_short_circuits_on_first_failure() -> None:
    r = Success(3).flat_map(_half).flat_map(_explode)
    assert r == Failure(("Odd",))


def test_and_table() -> None:
    add = lambda a, b: a + b  # noqa: E731
    assert Success(1).and_(Success(2), add) == Success(3)
    assert failure("a").and_(Success(2), add) == Failure(("a",))
    assert Success(1).and_(failure("b"), add) == Failure(("b",))
    assert failure("a").and_(failure("b", "c"), add) == Failure(("a", "b", "c"))


def test_ap_table_function_side_first() -> None:
    assert Success(2).ap(Success(_inc)) == Success(3)
    assert failure("v").ap(Success(_inc)) == Failure(("v",))
    assert Success(2).ap(failure("f")) == Failure(("f",))
    assert failure("v").ap(failure("f")) == Failure(("f", "v"))


@pytest.mark.parametrize(
    "a, b",
    [
        (Success(1), Success("x")),
        (failure("a1", "a2"), Success("x")),
        (Success(1), failure("b")),
        (failure("a"), failure("b1", "b2")),
    ],
)
def test_and_is_derivable_from_ap(a: Result[int], b: Result[str]) -> None:
    f = lambda x, y: (x, y)  # noqa: E731
    assert a.and_(b, f) == b.ap(a.map(lambda x: lambda y: f(x, y)))


def test_combine_accumulates_all_failures_in_argument_order() -> None:
    r = combine(lambda a, b, c, d: None, failure("1"), failure("2a", "2b"), Success(0), failure("4"))
    assert r == Failure(("1", "2a", "2b", "4"))


def test_combine_success_applies_function_in_order() -> None:
    assert combine(lambda a, b, c: f"{a}{b}{c}", Success("x"), Success("y"), Success("z")) == Success(
        "xyz"
    )
    assert combine(_inc, Success(1)) == Success(2)


def test_combine_requires_results() -> None:
    with pytest.raises(ValueError):
        combine(lambda: None)


def test_curry() -> None:
    assert curry(lambda a, b, c: a - b - c, 3)(10)(3)(2) == 5
    with pytest.raises(ValueError):
        curry(lambda: None, 0)


def test_failure_messages_are_normalized_to_tuple() -> None:
    assert Failure(["a", "b"]) == Failure(("a", "b"))
    assert failure("a").messages == ("a",)


def test_failure_with_bare_string_is_one_message() -> None:
    assert Failure("Too small") == Failure(("Too small",))
    assert Failure("Too small").messages == ("Too small",)


def test_is_success() -> None:
    assert Success(None).is_success
    assert not failure("x").is_success


def test_non_result_operand_raises_type_error() -> None:
    with pytest.raises(TypeError):
        Success(1).ap("not a result")  # type: ignore[arg-type]
