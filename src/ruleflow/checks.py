from __future__ import annotations

import re

from ruleflow.models import FormData
from ruleflow.result import Result, Success, failure
from ruleflow.rule import Rule, attempt

EMPTY_STRING = "Empty string"
TOO_SMALL = "Too small"
NO_INITIAL_CAP = "No initial cap"
NOT_A_NUMBER = "Not a number"
FIELD_NOT_FOUND = "Field not found"

# Solo signo opcional + dígitos ASCII: sin espacios, sin "_", sin dígitos unicode
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def _non_empty(value: str) -> Result[str]:
    if not value:
        return failure(EMPTY_STRING)
    return Success(value)


def _initial_cap(value: str) -> Result[str]:
    # Un string vacío tampoco tiene inicial mayúscula
    if value[:1].isupper():
        return Success(value)
    return failure(NO_INITIAL_CAP)


def _strict_int(value: str) -> int:
    if _INT_PATTERN.fullmatch(value) is None:
        raise ValueError(f"not a decimal integer: {value!r}")
    return int(value)


non_empty: Rule[str, str] = Rule(_non_empty)
initial_cap: Rule[str, str] = Rule(_initial_cap)
parse_int: Rule[str, int] = attempt(_strict_int, NOT_A_NUMBER)


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def gte(min_value: int) -> Rule[int, int]:
    def check(value: int) -> Result[int]:
        if value < min_value:
            return failure(TOO_SMALL)
        return Success(value)

    return Rule(check)


def get_field(name: str) -> Rule[FormData, str]:
    def lookup(form: FormData) -> Result[str]:
        if name not in form:
            return failure(FIELD_NOT_FOUND)
        return Success(form[name])

    return Rule(lookup)
