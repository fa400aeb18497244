from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ruleflow.result import Result, Success, failure
from ruleflow.result import combine as combine_results

In = TypeVar("In")
Out = TypeVar("Out")
C = TypeVar("C")
D = TypeVar("D")


@dataclass(frozen=True)
class Rule(Generic[In, Out]):
    """
    Paso de validación/conversión: In -> Result[Out].

    Cada combinador devuelve una Rule nueva que cierra sobre las anteriores;
    no hay estado mutable.
    """

    fn: Callable[[In], Result[Out]]

    def __call__(self, value: In) -> Result[Out]:
        return self.fn(value)

    def map(self, f: Callable[[Out], C]) -> Rule[In, C]:
        return Rule(lambda value: self(value).map(f))

    def flat_map(self, rule2: Callable[[Out], Result[C]]) -> Rule[In, C]:
        """Encadena: la entrada de `rule2` es la salida de esta regla."""
        return Rule(lambda value: self(value).flat_map(rule2))

    def and_(self, rule2: Callable[[In], Result[C]], combine: Callable[[Out, C], D]) -> Rule[In, D]:
        """Ambas reglas corren sobre la MISMA entrada; los errores se acumulan."""
        return Rule(lambda value: self(value).and_(rule2(value), combine))

    def ap(self, fn_rule: Callable[[In], Result[Callable[[Out], C]]]) -> Rule[In, C]:
        return Rule(lambda value: self(value).ap(fn_rule(value)))


def identity() -> Rule[Any, Any]:
    return Rule(Success)


def combine(func: Callable[..., C], *rules: Callable[[In], Result[Any]]) -> Rule[In, C]:
    """Versión N-aria de Rule.and_: todas las reglas sobre la misma entrada, en orden."""
    if not rules:
        raise ValueError("combine() requires at least one rule")
    return Rule(lambda value: combine_results(func, *(r(value) for r in rules)))


def attempt(
    fn: Callable[[In], Out],
    message: str,
    catch: tuple[type[Exception], ...] = (ValueError, TypeError),
) -> Rule[In, Out]:
    """
    Frontera para conversiones que lanzan excepciones (ej: int()).

    Las excepciones listadas en `catch` se convierten en Failure((message,));
    cualquier otra se propaga.
    """

    def run(value: In) -> Result[Out]:
        try:
            return Success(fn(value))
        except catch:
            return failure(message)

    return Rule(run)
