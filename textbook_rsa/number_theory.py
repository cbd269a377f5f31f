"""Integer arithmetic behind key generation, encryption and the attacks.

Python's ``int`` already is an arbitrary-precision integer with ``pow(b, e, m)``
and big-endian byte conversion, so this module only adds the number theory
the RSA demo needs on top of it.
"""
from __future__ import annotations

from typing import Optional, Tuple

__all__ = [
    "is_prime",
    "gcd",
    "egcd",
    "mod_inverse",
    "integer_root",
    "i2osp",
    "os2ip",
]


def is_prime(num: int) -> bool:
    """Deterministic trial division using the 6k±1 wheel.

    Exact for any size, but only fast for small and moderate inputs; this is
    what bounds the key sizes the rest of the lab can use.
    """

    if num <= 1:
        return False
    if num in (2, 3):
        return True
    if num % 2 == 0 or num % 3 == 0:
        return False

    i = 5
    while i * i <= num:
        if num % i == 0 or num % (i + 2) == 0:
            return False
        i += 6
    return True


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    """Extended Euclidean algorithm without recursion.

    Returns ``(g, x, y)`` with ``a*x + b*y == g``.  The loop form keeps large
    operands away from Python's recursion limit.
    """

    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1

    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t

    return old_r, old_s, old_t


def mod_inverse(a: int, m: int) -> Optional[int]:
    """Return ``d`` in ``[0, m)`` with ``(a * d) % m == 1``, or ``None``.

    ``None`` is returned whenever ``gcd(a, m) != 1``; the Bézout coefficient
    from :func:`egcd` is meaningless in that case and must not leak out.
    """

    if m <= 0:
        raise ValueError("Modulus must be positive")
    if m == 1:
        return None

    g, x, _ = egcd(a % m, m)
    if g != 1:
        return None
    return x % m


def integer_root(value: int, k: int) -> int:
    """Floor of the ``k``-th root of ``value`` via integer Newton iteration."""

    if k < 1:
        raise ValueError("Root degree must be at least 1")
    if value < 0:
        raise ValueError("Cannot take the root of a negative integer")
    if value < 2 or k == 1:
        return value

    # 2**ceil(bits/k) is always >= the real root, so the iteration descends.
    x = 1 << -(-value.bit_length() // k)
    while True:
        y = ((k - 1) * x + value // x ** (k - 1)) // k
        if y >= x:
            return x
        x = y


def i2osp(data: bytes) -> int:
    """Convert a byte-string into its non-negative integer representation."""

    return int.from_bytes(data, "big", signed=False)


def os2ip(value: int, length: int | None = None) -> bytes:
    """Convert an integer into a big-endian byte-string, left-padded to ``length``."""

    if value < 0:
        raise ValueError("Cannot convert negative integers")

    if length is None:
        length = (value.bit_length() + 7) // 8

    if value.bit_length() > length * 8:
        raise ValueError("Integer too large for the requested length")

    return value.to_bytes(length, "big") if length > 0 else b""
