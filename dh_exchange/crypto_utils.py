import hashlib
import math
import secrets

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from dh_exchange import config

# === Modular arithmetic ===

def gcd(a, b):
    while b != 0:
        a, b = b, a % b
    return abs(a)

# Fast power modulo arithmetic (square-and-multiply)
def mod_exp(base, exponent, modulus):
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus < 2:
        raise ValueError("modulus must be greater than 1")
    result = 1
    base %= modulus
    while exponent > 0:
        if exponent % 2:
            result = (result * base) % modulus
        exponent //= 2
        base = (base * base) % modulus
    return result

# === Primes ===

# Trial division up to floor(sqrt(n)). Deliberately naive: O(sqrt(n)),
# fine for the 5-digit demo range and useless for real key sizes.
def is_prime(n):
    if n <= 1:
        return False
    for d in range(2, math.isqrt(n) + 1):
        if n % d == 0:
            return False
    return True

# Uniform random prime in [min_value, max_value)
def random_prime_in_range(min_value=None, max_value=None):
    if min_value is None:
        min_value = config.PRIME_RANGE_MIN
    if max_value is None:
        max_value = config.PRIME_RANGE_MAX
    if max_value <= min_value:
        raise ValueError(f"empty range [{min_value}, {max_value})")
    while True:
        candidate = min_value + secrets.randbelow(max_value - min_value)
        if is_prime(candidate):
            return candidate

# Generate private key (a medium prime, like the demo's "generate" link)
def generate_private_key():
    return random_prime_in_range()

# Derived session key from the agreed integer
def derive_key(shared_secret: int, salt: bytes = b"X3DH", iterations=None) -> bytes:
    if iterations is None:
        iterations = config.KDF_ITERATIONS
    secret_bytes = shared_secret.to_bytes(max(1, (shared_secret.bit_length() + 7) // 8), 'big')
    return hashlib.pbkdf2_hmac('sha256', secret_bytes, salt, iterations)

# === ECC / ECDSA ===

def generate_ecdsa_keypair():
    """
    Generate ECDSA (secp256r1) key pair
    Returns (private_key, public_key)
    """
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()

def ecdsa_sign(message: bytes, private_key) -> bytes:
    """
    Use ECDSA to sign messages with SHA-256.
    """
    return private_key.sign(message, ec.ECDSA(hashes.SHA256()))

def ecdsa_verify(message: bytes, signature: bytes, public_key) -> bool:
    """
    Verify ECDSA signature, return True/False
    """
    try:
        public_key.verify(signature, message, ec.ECDSA(hashes.SHA256()))
        return True
    except InvalidSignature:
        return False
