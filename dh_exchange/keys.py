import logging
import re
from dataclasses import InitVar, dataclass, field

from dh_exchange.crypto_utils import generate_private_key, is_prime, mod_exp, random_prime_in_range
from dh_exchange.errors import InvalidGeneratorError, InvalidInputError, SharedSecretMismatchError
from dh_exchange.primitive_root import find_primitive_root, is_primitive_root

logger = logging.getLogger(__name__)

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")

# Convert user-edited text to an int, or raise InvalidInputError
def parse_int(value, name="value"):
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    # ASCII digits only: no "1_000", no other scripts' digits
    if not _INTEGER_TEXT.fullmatch(text):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    return int(text)

@dataclass(frozen=True)
class DomainParameters:
    """
    (p, g) shared by both parties. p must be prime and g a primitive root
    mod p; anything else is rejected at construction. Only `for_prime` may
    store an unverified g (the search fallback), and then verified is False.
    """
    p: int
    g: int
    verified: bool = field(init=False)
    allow_fallback: InitVar[bool] = False

    def __post_init__(self, allow_fallback):
        if not is_prime(self.p):
            raise InvalidInputError(f"p must be a positive prime, got {self.p}")
        verified = is_primitive_root(self.g, self.p)
        if not verified and not allow_fallback:
            raise InvalidGeneratorError(self.g, self.p)
        object.__setattr__(self, "verified", verified)

    @classmethod
    def for_prime(cls, p):
        return cls(p=p, g=find_primitive_root(p), allow_fallback=True)

@dataclass(frozen=True)
class KeyPair:
    private_key: int
    public_key: int

    @classmethod
    def from_private(cls, private_key, params):
        return cls(private_key, derive_public_key(private_key, params.g, params.p))

# Generate public key
def derive_public_key(private_key, g, p):
    return mod_exp(g, private_key, p)

# Calculating a shared key
def derive_shared_secret(own_private_key, peer_public_key, p):
    return mod_exp(peer_public_key, own_private_key, p)

# Return the agreed secret, or raise if the two derivations differ
def confirm_shared_secret(ours, theirs):
    if ours != theirs:
        raise SharedSecretMismatchError(ours, theirs)
    return ours

def private_key_from_input(value, name="private key"):
    private_key = parse_int(value, name)
    if private_key <= 0:
        raise InvalidInputError(f"{name} must be positive, got {private_key}")
    return private_key

def generate_key_pair(params):
    return KeyPair.from_private(generate_private_key(), params)

def rotate_parameters():
    params = DomainParameters.for_prime(random_prime_in_range())
    logger.info("rotated domain parameters to p=%s g=%s", params.p, params.g)
    return params

# New g for the same p; params itself is never touched
def with_generator(params, value):
    g = parse_int(value, "generator")
    if not is_primitive_root(g, params.p):
        logger.info("rejected generator g=%s for p=%s", g, params.p)
        raise InvalidGeneratorError(g, params.p)
    return DomainParameters(p=params.p, g=g)

# New p. g survives if it is still a primitive root of the new prime,
# otherwise the first primitive root of the new prime replaces it.
def with_prime(params, value):
    p = parse_int(value, "prime")
    if p <= 0 or not is_prime(p):
        raise InvalidInputError(f"p must be a positive prime, got {p}")
    if is_primitive_root(params.g, p):
        return DomainParameters(p=p, g=params.g)
    return DomainParameters.for_prime(p)
