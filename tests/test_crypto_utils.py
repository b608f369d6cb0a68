"""
Unit tests for the modular arithmetic and prime helpers.
"""
import pytest

from dh_exchange import config, crypto_utils
from dh_exchange.crypto_utils import (
    derive_key,
    ecdsa_sign,
    ecdsa_verify,
    gcd,
    generate_ecdsa_keypair,
    generate_private_key,
    is_prime,
    mod_exp,
    random_prime_in_range,
)


def test_gcd():
    assert gcd(12, 18) == 6
    assert gcd(7, 0) == 7
    assert gcd(0, 5) == 5
    assert gcd(17, 13) == 1
    assert gcd(-4, 6) == 2
    assert gcd(4, -6) == 2


def test_mod_exp_matches_builtin_pow():
    for p in (2, 3, 13, 23, 101):
        for g in (2, 3, 5, p - 1):
            for a in range(p):
                assert mod_exp(g, a, p) == pow(g, a, p)


def test_mod_exp_known_values():
    assert mod_exp(2, 6, 13) == 12
    assert mod_exp(2, 15, 13) == 8
    assert mod_exp(5, 0, 7) == 1
    assert mod_exp(-3, 2, 7) == 2


def test_mod_exp_five_digit_values_do_not_overflow():
    assert mod_exp(99989, 99991, 99961) == pow(99989, 99991, 99961)
    assert mod_exp(12345, 2 ** 80 + 1, 99991) == pow(12345, 2 ** 80 + 1, 99991)


def test_mod_exp_rejects_bad_arguments():
    with pytest.raises(ValueError):
        mod_exp(2, -1, 13)
    with pytest.raises(ValueError):
        mod_exp(2, 3, 1)
    with pytest.raises(ValueError):
        mod_exp(2, 3, 0)


def test_is_prime_small_values():
    assert [n for n in range(-3, 30) if is_prime(n)] == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


def test_is_prime_perfect_square_and_large_prime():
    assert not is_prime(49)
    assert not is_prime(10001)  # 73 * 137
    assert is_prime(10007)
    assert is_prime(99991)


def test_random_prime_in_range_stays_in_window():
    for _ in range(20):
        n = random_prime_in_range(10000, 99999)
        assert is_prime(n)
        assert 10000 <= n < 99999


def test_random_prime_in_range_single_candidate():
    assert random_prime_in_range(13, 14) == 13


def test_random_prime_in_range_retries_until_prime(monkeypatch):
    offsets = iter([0, 1, 7])
    calls = []

    def fake_randbelow(n):
        calls.append(n)
        return next(offsets)

    monkeypatch.setattr(crypto_utils.secrets, "randbelow", fake_randbelow)
    # 10000 and 10001 are composite, 10007 is prime
    assert random_prime_in_range(10000, 99999) == 10007
    assert calls == [89999, 89999, 89999]


def test_random_prime_in_range_uses_configured_window(monkeypatch):
    monkeypatch.setattr(config, "PRIME_RANGE_MIN", 20)
    monkeypatch.setattr(config, "PRIME_RANGE_MAX", 24)
    for _ in range(10):
        assert random_prime_in_range() == 23


def test_random_prime_in_range_rejects_empty_window():
    with pytest.raises(ValueError):
        random_prime_in_range(100, 100)


def test_generate_private_key_is_prime_in_window():
    key = generate_private_key()
    assert is_prime(key)
    assert config.PRIME_RANGE_MIN <= key < config.PRIME_RANGE_MAX


def test_derive_key():
    k1 = derive_key(12)
    assert len(k1) == 32
    assert derive_key(12) == k1
    assert derive_key(11) != k1
    assert derive_key(0) != k1


def test_ecdsa_sign_verify():
    priv, pub = generate_ecdsa_keypair()
    sig = ecdsa_sign(b"12345", priv)
    assert ecdsa_verify(b"12345", sig, pub)
    assert not ecdsa_verify(b"12346", sig, pub)
    _, other_pub = generate_ecdsa_keypair()
    assert not ecdsa_verify(b"12345", sig, other_pub)
