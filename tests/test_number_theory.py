import math
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _sieve(limit: int) -> set[int]:
    flags = [True] * (limit + 1)
    flags[0] = flags[1] = False
    for i in range(2, int(limit ** 0.5) + 1):
        if flags[i]:
            flags[i * i :: i] = [False] * len(flags[i * i :: i])
    return {i for i, flag in enumerate(flags) if flag}


def test_is_prime_boundaries():
    from textbook_rsa.number_theory import is_prime

    assert not is_prime(1)
    assert is_prime(2)
    assert not is_prime(9)
    assert is_prime(61)
    assert not is_prime(0)
    assert not is_prime(-7)


def test_is_prime_matches_sieve():
    from textbook_rsa.number_theory import is_prime

    primes = _sieve(5000)
    assert {n for n in range(5001) if is_prime(n)} == primes


def test_is_prime_larger_values():
    from Crypto.Util.number import isPrime

    from textbook_rsa.number_theory import is_prime

    for value in (2147483647, 1000003, 15485867, 1000003 * 1000033, 25, 1000037 ** 2):
        assert is_prime(value) == bool(isPrime(value))


def test_gcd_and_egcd():
    from textbook_rsa.number_theory import egcd, gcd

    assert gcd(3120, 17) == 1
    assert gcd(12, 18) == 6
    assert gcd(-12, 18) == 6
    assert gcd(0, 5) == 5

    g, x, y = egcd(240, 46)
    assert g == 2
    assert 240 * x + 46 * y == g


def test_mod_inverse_concrete_cases():
    from textbook_rsa.number_theory import mod_inverse

    assert mod_inverse(7, 11) == 8
    assert mod_inverse(2, 4) is None
    assert mod_inverse(17, 3120) == 2753
    assert mod_inverse(5, 1) is None


def test_mod_inverse_agrees_with_gcd():
    from textbook_rsa.number_theory import mod_inverse

    for m in range(2, 60):
        for a in range(0, 80):
            d = mod_inverse(a, m)
            if math.gcd(a, m) == 1:
                assert d is not None and 0 <= d < m
                assert (a * d) % m == 1
            else:
                assert d is None


def test_mod_inverse_rejects_non_positive_modulus():
    from textbook_rsa.number_theory import mod_inverse

    with pytest.raises(ValueError):
        mod_inverse(3, 0)


@pytest.mark.parametrize("k", [2, 3, 5])
def test_integer_root_is_floor(k):
    from textbook_rsa.number_theory import integer_root

    for value in range(0, 3000):
        r = integer_root(value, k)
        assert r ** k <= value < (r + 1) ** k


def test_integer_root_large_values():
    from textbook_rsa.number_theory import integer_root

    assert integer_root(10 ** 30, 3) == 10 ** 10
    assert integer_root(10 ** 30 - 1, 3) == 10 ** 10 - 1
    big = 2 ** 521 - 1
    assert integer_root(big * big, 2) == big
    with pytest.raises(ValueError):
        integer_root(-8, 3)


def test_byte_conversions_pad_and_reject():
    from textbook_rsa.number_theory import i2osp, os2ip

    assert i2osp(b"\x00\x01\x00") == 256
    assert os2ip(1, 3) == b"\x00\x00\x01"
    assert os2ip(0) == b""
    with pytest.raises(ValueError):
        os2ip(256, 1)
    with pytest.raises(ValueError):
        os2ip(-1)
