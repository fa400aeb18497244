from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import assert_never

from ruleflow.checks import capitalize, get_field, gte, initial_cap, non_empty, parse_int
from ruleflow.models import Address, AddressPolicy, FormData, PostalAddress, StreetPolicy
from ruleflow.rule import Rule, combine, identity

# Lectura estructural de formularios: no depende de la política
read_number: Rule[FormData, int] = get_field("number").flat_map(parse_int)
read_street: Rule[FormData, str] = get_field("street")
read_zip: Rule[FormData, str] = get_field("zip")


def street_rule(policy: StreetPolicy) -> Rule[str, str]:
    if policy is StreetPolicy.CAPITALIZE:
        return non_empty.map(capitalize)
    if policy is StreetPolicy.REJECT:
        return non_empty.flat_map(initial_cap)
    assert_never(policy)


@dataclass(frozen=True)
class AddressRules:
    """Validadores de dirección construidos para una AddressPolicy concreta."""

    policy: AddressPolicy
    check_address: Rule[Address, Address]
    check_postal_address: Rule[PostalAddress, PostalAddress]
    read_address: Rule[FormData, Address]
    read_postal_address: Rule[FormData, PostalAddress]


def build_address_rules(policy: AddressPolicy | None = None) -> AddressRules:
    """
    Arma los validadores de registro:
    - check_*: proyecta cada campo (map), lo valida (flat_map) y combina en paralelo
    - read_*: lee el formulario y, si la lectura es válida, aplica el check_* correspondiente
    """
    policy = policy or AddressPolicy()

    check_number = identity().map(attrgetter("number")).flat_map(gte(policy.min_number))
    check_street = identity().map(attrgetter("street")).flat_map(street_rule(policy.street))
    check_zip = identity().map(attrgetter("zip_code")).flat_map(non_empty)

    check_address: Rule[Address, Address] = check_number.and_(check_street, Address)
    check_postal_address: Rule[PostalAddress, PostalAddress] = combine(
        PostalAddress, check_number, check_street, check_zip
    )

    read_address: Rule[FormData, Address] = read_number.and_(read_street, Address).flat_map(
        check_address
    )
    read_postal_address: Rule[FormData, PostalAddress] = combine(
        PostalAddress, read_number, read_street, read_zip
    ).flat_map(check_postal_address)

    return AddressRules(
        policy=policy,
        check_address=check_address,
        check_postal_address=check_postal_address,
        read_address=read_address,
        read_postal_address=read_postal_address,
    )


DEFAULT_RULES = build_address_rules()

check_address = DEFAULT_RULES.check_address
check_postal_address = DEFAULT_RULES.check_postal_address
read_address = DEFAULT_RULES.read_address
read_postal_address = DEFAULT_RULES.read_postal_address
