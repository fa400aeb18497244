from __future__ import annotations

import pytest

from ruleflow.address import read_address
from ruleflow.checks import capitalize, get_field, gte, initial_cap, non_empty, parse_int
from ruleflow.result import Failure, Success


def test_non_empty() -> None:
    assert non_empty("x") == Success("x")
    assert non_empty("") == Failure(("Empty string",))


def test_gte_bound_is_inclusive() -> None:
    assert gte(1)(1) == Success(1)
    assert gte(1)(0) == Failure(("Too small",))


def test_initial_cap() -> None:
    assert initial_cap("Acacia") == Success("Acacia")
    assert initial_cap("acacia") == Failure(("No initial cap",))
    assert initial_cap("") == Failure(("No initial cap",))


def test_capitalize_only_touches_first_letter() -> None:
    assert capitalize("acacia road") == "Acacia road"
    assert capitalize("") == ""


def test_parse_int_never_raises() -> None:
    assert parse_int("29") == Success(29)
    assert parse_int("1a") == Failure(("Not a number",))
    assert parse_int("") == Failure(("Not a number",))
    assert parse_int(None) == Failure(("Not a number",))  # type: ignore[arg-type]


def test_parse_int_accepts_sign() -> None:
    assert parse_int("+29") == Success(29)
    assert parse_int("-1") == Success(-1)


@pytest.mark.parametrize("raw", ["2_9", " 29", "29 ", " 29 ", "٢٩", "29.0", "+", "0x1d"])
def test_parse_int_rejects_lenient_python_literals(raw: str) -> None:
    assert parse_int(raw) == Failure(("Not a number",))


def test_read_address_rejects_underscored_number() -> None:
    assert read_address({"number": "1_0", "street": "x"}) == Failure(("Not a number",))


def test_get_field() -> None:
    assert get_field("number")({"number": "29"}) == Success("29")
    assert get_field("number")({"street": "x"}) == Failure(("Field not found",))
    assert get_field("street")({"street": ""}) == Success("")
