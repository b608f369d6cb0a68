from dataclasses import dataclass, replace
from typing import Optional

from dh_exchange.keys import (
    DomainParameters,
    KeyPair,
    confirm_shared_secret,
    derive_shared_secret,
    generate_key_pair,
    private_key_from_input,
    rotate_parameters,
    with_generator,
    with_prime,
)

# Two-party Diffie-Hellman between a Supplier and a Mill

PARTIES = ("supplier", "mill")

@dataclass(frozen=True)
class Exchange:
    params: DomainParameters
    supplier: KeyPair
    mill: KeyPair
    shared_secret: Optional[int] = None

    @classmethod
    def default(cls):
        params = DomainParameters(p=13, g=2)
        return cls.from_private_keys(params, 6, 15)

    @classmethod
    def from_private_keys(cls, params, supplier_private, mill_private):
        return cls(
            params=params,
            supplier=KeyPair.from_private(supplier_private, params),
            mill=KeyPair.from_private(mill_private, params),
        )

def _rekey(exchange, params):
    # new parameters invalidate both public keys and any previous secret
    return Exchange.from_private_keys(
        params, exchange.supplier.private_key, exchange.mill.private_key
    )

def calculate(exchange):
    """Derive both public keys and both shared secrets; they must agree."""
    p = exchange.params.p
    fresh = _rekey(exchange, exchange.params)
    supplier_secret = derive_shared_secret(fresh.supplier.private_key, fresh.mill.public_key, p)
    mill_secret = derive_shared_secret(fresh.mill.private_key, fresh.supplier.public_key, p)
    return replace(fresh, shared_secret=confirm_shared_secret(supplier_secret, mill_secret))

def rotate(exchange):
    return _rekey(exchange, rotate_parameters())

def change_generator(exchange, value):
    return _rekey(exchange, with_generator(exchange.params, value))

def change_prime(exchange, value):
    return _rekey(exchange, with_prime(exchange.params, value))

def _check_party(party):
    if party not in PARTIES:
        raise ValueError(f"unknown party {party!r}, expected one of {PARTIES}")

def set_private_key(exchange, party, value):
    _check_party(party)
    key_pair = KeyPair.from_private(private_key_from_input(value), exchange.params)
    return replace(exchange, shared_secret=None, **{party: key_pair})

def regenerate_private_key(exchange, party):
    _check_party(party)
    return replace(exchange, shared_secret=None, **{party: generate_key_pair(exchange.params)})

def demo(exchange=None):
    exchange = calculate(exchange or Exchange.default())

    print("=== common parameter ===")
    print("p =", exchange.params.p)
    print(f"g = {exchange.params.g}" + ("" if exchange.params.verified else "  (UNVERIFIED fallback)"))

    print("\n=== public key exchange (PKE) ===")
    print("Supplier Public:", exchange.supplier.public_key)
    print("Mill Public:    ", exchange.mill.public_key)

    print("\n=== shared key ===")
    print("Shared Secret:", exchange.shared_secret)
    if exchange.params.verified:
        print("\n The key exchange is successful, both sides share the same key")
    else:
        print("\n Both sides agree, but g is an UNVERIFIED fallback, not a primitive root of p")
    return exchange

if __name__ == "__main__":
    demo()
