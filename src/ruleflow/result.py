from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


def _not_a_result(value: object) -> NoReturn:
    raise TypeError(f"Expected Success or Failure, got {type(value).__name__}: {value!r}")


class _ResultOps(Generic[A]):
    """
    Álgebra común a Success/Failure.

    Propiedades:
    - Puro: ninguna operación muta; siempre se devuelve un Result nuevo
    - map / flat_map: secuencial, el primer Failure corta la cadena
    - and_ / ap / combine: paralelo, se acumulan los mensajes de ambos lados
    """

    @property
    def is_success(self) -> bool:
        match self:
            case Success():
                return True
            case Failure():
                return False
            case _:
                _not_a_result(self)

    def map(self, f: Callable[[A], B]) -> Result[B]:
        """`f` debe ser total; una conversión que puede fallar va por flat_map."""
        match self:
            case Success(value=value):
                return Success(f(value))
            case Failure():
                return self
            case _:
                _not_a_result(self)

    def flat_map(self, f: Callable[[A], Result[B]]) -> Result[B]:
        match self:
            case Success(value=value):
                return f(value)
            case Failure():
                return self
            case _:
                _not_a_result(self)

    def ap(self, fn: Result[Callable[[A], B]]) -> Result[B]:
        """
        Aplica una función envuelta en Result a este valor.

        `fn` es el lado izquierdo (lo ya acumulado): en Failure/Failure sus
        mensajes van primero, así un encadenado de `ap` conserva el orden de llamada.
        """
        match fn, self:
            case Success(value=func), Success(value=value):
                return Success(func(value))
            case Failure(messages=left), Failure(messages=right):
                return Failure(left + right)
            case Failure(), Success():
                return fn
            case Success(), Failure():
                return self
            case _:
                _not_a_result((fn, self))

    def and_(self, other: Result[B], combine: Callable[[A, B], C]) -> Result[C]:
        # and_ derivado de ap: other.ap(self.map(curry(combine)))
        return other.ap(self.map(lambda a: lambda b: combine(a, b)))


@dataclass(frozen=True)
class Success(_ResultOps[A]):
    value: A


@dataclass(frozen=True)
class Failure(_ResultOps[Any]):
    messages: tuple[str, ...]

    def __post_init__(self) -> None:
        # Un str suelto es un único mensaje, no una secuencia de caracteres
        if isinstance(self.messages, str):
            object.__setattr__(self, "messages", (self.messages,))
        elif not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))


Result = Success[A] | Failure


def failure(*messages: str) -> Failure:
    return Failure(messages)


def curry(func: Callable[..., C], arity: int) -> Callable[[Any], Any]:
    """curry(f, 3)(a)(b)(c) == f(a, b, c)"""
    if arity < 1:
        raise ValueError(f"curry() arity must be >= 1, got {arity}")

    def step(args: tuple[Any, ...]) -> Any:
        if len(args) == arity:
            return func(*args)
        return lambda arg: step((*args, arg))

    return step(())


def combine(func: Callable[..., C], *results: Result[Any]) -> Result[C]:
    """
    Combinación paralela N-aria.

    Pliega `ap` de izquierda a derecha sobre Success(curry(func, N)); con varios
    Failure, los mensajes quedan en el orden de los argumentos.
    """
    if not results:
        raise ValueError("combine() requires at least one result")

    acc: Result[Any] = Success(curry(func, len(results)))
    for result in results:
        acc = result.ap(acc)
    return acc
