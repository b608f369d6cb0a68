import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from dh_exchange.crypto_utils import derive_key, ecdsa_sign, ecdsa_verify, generate_ecdsa_keypair
from dh_exchange.errors import InvalidSignatureError
from dh_exchange.keys import (
    DomainParameters,
    KeyPair,
    confirm_shared_secret,
    derive_shared_secret,
    generate_key_pair,
    private_key_from_input,
)

logger = logging.getLogger(__name__)

# Extended Triple Diffie-Hellman over the toy (p, g) group.
# Initiator (Supplier): identity, signed pre-key, ephemeral.
# Responder (Mill): identity, signed pre-key, zero or more one-time pre-keys.
#
#   DH1 = DH(IK_A, SPK_B)
#   DH2 = DH(EK_A, IK_B)
#   DH3 = DH(EK_A, SPK_B)
#   DH4 = DH(EK_A, OPK_B)   only if the responder offers a one-time pre-key
#
# After every successful combine the ephemeral key and the consumed
# one-time pre-key are replaced, so neither is ever used twice.

DEFAULT_PRIME = 10007

@dataclass(frozen=True)
class X3DHKeys:
    identity_key: KeyPair
    signed_pre_key: KeyPair
    one_time_pre_keys: Tuple[KeyPair, ...]
    ephemeral_key: KeyPair
    # ECDSA key that vouches for the signed pre-key; the toy DH integers
    # cannot sign anything themselves
    signing_key: Any = field(default=None, repr=False, compare=False)
    signed_pre_key_signature: Optional[bytes] = field(default=None, repr=False)

@dataclass(frozen=True)
class X3DHResult:
    shared_secret: int
    session_key: bytes
    initiator: X3DHKeys
    responder: X3DHKeys
    used_one_time_pre_key: Optional[KeyPair]

# === Signed pre-key ===

def _pre_key_message(key_pair):
    return str(key_pair.public_key).encode()

def sign_pre_key(keys):
    signing_key = keys.signing_key
    if signing_key is None:
        signing_key, _ = generate_ecdsa_keypair()
    signature = ecdsa_sign(_pre_key_message(keys.signed_pre_key), signing_key)
    return replace(keys, signing_key=signing_key, signed_pre_key_signature=signature)

def verify_signed_pre_key(keys):
    if keys.signing_key is None or keys.signed_pre_key_signature is None:
        return False
    return ecdsa_verify(
        _pre_key_message(keys.signed_pre_key),
        keys.signed_pre_key_signature,
        keys.signing_key.public_key(),
    )

# === Bundles ===

def _key_pair(value, params, name):
    return KeyPair.from_private(private_key_from_input(value, name), params)

def keys_from_private(params, identity, signed_pre, ephemeral, one_time_pre=()):
    """
    Build a signed bundle from private values (ints or user text),
    deriving every public key. Bad values raise InvalidInputError.
    """
    keys = X3DHKeys(
        identity_key=_key_pair(identity, params, "identity key"),
        signed_pre_key=_key_pair(signed_pre, params, "signed pre-key"),
        one_time_pre_keys=tuple(_key_pair(k, params, "one-time pre-key") for k in one_time_pre),
        ephemeral_key=_key_pair(ephemeral, params, "ephemeral key"),
    )
    return sign_pre_key(keys)

def generate_keys(params, one_time_pre_key_count=1):
    keys = X3DHKeys(
        identity_key=generate_key_pair(params),
        signed_pre_key=generate_key_pair(params),
        one_time_pre_keys=tuple(generate_key_pair(params) for _ in range(one_time_pre_key_count)),
        ephemeral_key=generate_key_pair(params),
    )
    return sign_pre_key(keys)

# Re-derive every public key (and the pre-key signature) under new params
def with_params(keys, params):
    rederived = replace(
        keys,
        identity_key=KeyPair.from_private(keys.identity_key.private_key, params),
        signed_pre_key=KeyPair.from_private(keys.signed_pre_key.private_key, params),
        one_time_pre_keys=tuple(
            KeyPair.from_private(k.private_key, params) for k in keys.one_time_pre_keys
        ),
        ephemeral_key=KeyPair.from_private(keys.ephemeral_key.private_key, params),
    )
    return sign_pre_key(rederived)

# === Rotation ===

def rotate_identity_key(keys, params):
    return replace(keys, identity_key=generate_key_pair(params))

def rotate_signed_pre_key(keys, params):
    return sign_pre_key(replace(keys, signed_pre_key=generate_key_pair(params)))

def rotate_ephemeral_key(keys, params):
    return replace(keys, ephemeral_key=generate_key_pair(params))

# Drop the first one-time pre-key and publish a fresh one in its place
def rotate_one_time_pre_key(keys, params):
    remaining = keys.one_time_pre_keys[1:]
    return replace(keys, one_time_pre_keys=remaining + (generate_key_pair(params),))

# === Derivation ===

def _fold(terms, p):
    secret = 1
    for term in terms:
        secret = (secret * term) % p
    return secret

def initiator_secret(params, initiator, responder):
    p = params.p
    ek = initiator.ephemeral_key.private_key
    terms = [
        derive_shared_secret(initiator.identity_key.private_key, responder.signed_pre_key.public_key, p),
        derive_shared_secret(ek, responder.identity_key.public_key, p),
        derive_shared_secret(ek, responder.signed_pre_key.public_key, p),
    ]
    if responder.one_time_pre_keys:
        terms.append(derive_shared_secret(ek, responder.one_time_pre_keys[0].public_key, p))
    return _fold(terms, p)

def responder_secret(params, initiator, responder):
    p = params.p
    ek_pub = initiator.ephemeral_key.public_key
    spk = responder.signed_pre_key.private_key
    terms = [
        derive_shared_secret(spk, initiator.identity_key.public_key, p),
        derive_shared_secret(responder.identity_key.private_key, ek_pub, p),
        derive_shared_secret(spk, ek_pub, p),
    ]
    if responder.one_time_pre_keys:
        terms.append(derive_shared_secret(responder.one_time_pre_keys[0].private_key, ek_pub, p))
    return _fold(terms, p)

def combine(params, initiator, responder):
    """
    Run X3DH from both ends, check agreement, then rotate spent keys.
    """
    if not verify_signed_pre_key(responder):
        raise InvalidSignatureError("responder's signed pre-key signature does not verify")

    secret = confirm_shared_secret(
        initiator_secret(params, initiator, responder),
        responder_secret(params, initiator, responder),
    )

    used = responder.one_time_pre_keys[0] if responder.one_time_pre_keys else None
    new_initiator = rotate_ephemeral_key(initiator, params)
    new_responder = rotate_one_time_pre_key(responder, params) if used else responder
    logger.debug(
        "x3dh complete, rotated ephemeral key%s",
        " and one-time pre-key" if used else "",
    )
    return X3DHResult(
        shared_secret=secret,
        session_key=derive_key(secret),
        initiator=new_initiator,
        responder=new_responder,
        used_one_time_pre_key=used,
    )

def default_parties():
    params = DomainParameters.for_prime(DEFAULT_PRIME)
    supplier = keys_from_private(params, 6, 7, 9, one_time_pre=(8,))
    mill = keys_from_private(params, 15, 16, 18, one_time_pre=(17,))
    return params, supplier, mill

def demo(params=None, supplier=None, mill=None, use_one_time_pre_key=True):
    if params is None or supplier is None or mill is None:
        params, supplier, mill = default_parties()
    if not use_one_time_pre_key:
        mill = replace(mill, one_time_pre_keys=())

    print("=== X3DH parameters ===")
    print(f"p = {params.p}, g = {params.g}" + ("" if params.verified else "  (UNVERIFIED fallback)"))
    print("\n=== Mill's published bundle ===")
    print("IK_B: ", mill.identity_key.public_key)
    print("SPK_B:", mill.signed_pre_key.public_key, "(signature verified)"
          if verify_signed_pre_key(mill) else "(BAD signature)")
    if mill.one_time_pre_keys:
        print("OPK_B:", mill.one_time_pre_keys[0].public_key)
    else:
        print("OPK_B: none offered, DH4 omitted")

    result = combine(params, supplier, mill)
    print("\n=== shared secret ===")
    print("Shared Secret:", result.shared_secret)
    print("Session Key:  ", result.session_key.hex())
    print("\nEphemeral key rotated:", supplier.ephemeral_key.public_key,
          "->", result.initiator.ephemeral_key.public_key)
    if result.used_one_time_pre_key is not None:
        print("One-time pre-key consumed:", result.used_one_time_pre_key.public_key,
              "->", result.responder.one_time_pre_keys[-1].public_key)
    return result

if __name__ == "__main__":
    demo()
