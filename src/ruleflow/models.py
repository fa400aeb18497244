from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

FormData = Mapping[str, str]


class StreetPolicy(StrEnum):
    CAPITALIZE = "capitalize"  # corrige la inicial
    REJECT = "reject"  # falla con "No initial cap"


@dataclass(frozen=True)
class Address:
    number: int
    street: str


@dataclass(frozen=True)
class PostalAddress:
    number: int
    street: str
    zip_code: str


@dataclass(frozen=True)
class AddressPolicy:
    """
    Política versionable de validación de direcciones.

    Una sola política de calle por validador: o se capitaliza o se rechaza.
    """

    policy_id: str = "address_policy.v1"
    min_number: int = 1
    street: StreetPolicy = StreetPolicy.CAPITALIZE


@dataclass(frozen=True)
class ValidationStats:
    total: int
    accepted: int
    rejected: int


@dataclass(frozen=True)
class MessageDetail:
    message: str
    count: int
    examples: list[str]


@dataclass(frozen=True)
class ValidationReport:
    run_id: str
    generated_utc: str
    schema: str
    address_policy: AddressPolicy
    totals: ValidationStats
    message_details: list[MessageDetail]
    notes: list[str]
