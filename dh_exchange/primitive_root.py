import logging

from dh_exchange.crypto_utils import gcd, mod_exp

logger = logging.getLogger(__name__)

# Everything here is brute force (trial division, linear scan from 2).
# Fine for 5-digit primes, does NOT scale to cryptographic sizes.

FALLBACK_ROOT = 2

# Set of distinct prime factors of n (empty for n <= 1)
def prime_factors(n):
    factors = set()
    d = 2
    while d * d <= n:
        while n % d == 0:
            factors.add(d)
            n //= d
        d += 1
    # whatever is left above sqrt is itself prime
    if n > 1:
        factors.add(n)
    return factors

def is_primitive_root(candidate, p):
    """
    True if candidate generates the whole multiplicative group mod prime p.
    Checks run in order and stop at the first failure:
      (a) gcd(candidate, p) == 1
      (b) candidate^(p-1) == 1 (mod p)
      (c) candidate^((p-1)/f) != 1 (mod p) for every prime factor f of p-1
    """
    if p < 2:
        return False
    if gcd(candidate, p) != 1:
        return False
    phi = p - 1
    if mod_exp(candidate, phi, p) != 1:
        return False
    return all(mod_exp(candidate, phi // f, p) != 1 for f in prime_factors(phi))

def find_primitive_root(p):
    """
    First primitive root of p by linear scan from 2.
    Every prime p > 2 has one, so the fallback is only hit for p <= 2.
    The fallback value is NOT verified; DomainParameters.verified records it.
    """
    for candidate in range(2, p):
        if is_primitive_root(candidate, p):
            return candidate
    logger.warning(
        "no primitive root found for p=%s, falling back to unverified g=%s",
        p, FALLBACK_ROOT,
    )
    return FALLBACK_ROOT
