"""RSA key generation from two caller-supplied primes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from textbook_rsa.cipher import Ciphertext, decrypt_block, decrypt_message
from textbook_rsa.errors import (
    DuplicatePrimes,
    ExponentDerivationFailed,
    ExponentRetriesExhausted,
    InverseComputationFailed,
    NotPrime,
)
from textbook_rsa.number_theory import gcd, i2osp, is_prime, mod_inverse
from textbook_rsa.randomness import RandomSource, default_random_source

logger = logging.getLogger(__name__)

# Length of the random byte string reduced mod phi(n) for each candidate e.
EXPONENT_SAMPLE_BYTES = 16
# Upper bound on candidate draws; coprime exponents are dense so real runs
# finish in a handful of draws.
MAX_EXPONENT_RETRIES = 10_000


@dataclass(frozen=True)
class PublicKey:
    n: int
    e: int

    @property
    def size_bytes(self) -> int:
        return (self.n.bit_length() + 7) // 8


class RsaKeyPair:
    """Key pair produced by :func:`generate_keys`.

    Only ``n``, ``e`` and :attr:`public_key` are public.  The private exponent
    and the prime factors stay inside the pair and are only used through
    :meth:`decrypt` and :meth:`decrypt_message`.
    """

    __slots__ = ("_n", "_e", "_d", "_p", "_q")

    def __init__(self, n: int, e: int, d: int, p: int, q: int):
        self._n = n
        self._e = e
        self._d = d
        self._p = p
        self._q = q

    @property
    def n(self) -> int:
        return self._n

    @property
    def e(self) -> int:
        return self._e

    @property
    def public_key(self) -> PublicKey:
        return PublicKey(n=self._n, e=self._e)

    def decrypt(self, ciphertext: int) -> int:
        return decrypt_block(ciphertext, self._d, self._n)

    def decrypt_message(self, ciphertext: Ciphertext | Sequence[int]) -> bytes:
        return decrypt_message(ciphertext, self._d, self._n)

    def __repr__(self) -> str:
        return f"RsaKeyPair(n={self._n}, e={self._e})"


def _check_prime_pair(p: int, q: int) -> None:
    if p == q:
        raise DuplicatePrimes("p and q must be distinct primes")
    for value in (p, q):
        if not is_prime(value):
            raise NotPrime(value)


def _sample_exponent(phi: int, rng: RandomSource, max_retries: int) -> int:
    for attempt in range(1, max_retries + 1):
        e = i2osp(rng.random_bytes(EXPONENT_SAMPLE_BYTES)) % phi
        if e > 1 and gcd(e, phi) == 1:
            logger.info("Selected public exponent e=%d after %d draw(s)", e, attempt)
            return e
        logger.debug("Candidate exponent %d rejected, drawing again", e)
    raise ExponentRetriesExhausted(max_retries)


def generate_keys(
    p: int,
    q: int,
    *,
    rng: RandomSource | None = None,
    public_exponent: int | None = None,
    max_retries: int = MAX_EXPONENT_RETRIES,
) -> RsaKeyPair:
    """Derive an RSA key pair from the primes ``p`` and ``q``.

    By default ``e`` is drawn from ``rng`` until it is coprime to phi(n).
    Passing ``public_exponent`` (typically 3) skips sampling, but the value is
    still checked against phi(n).
    """

    _check_prime_pair(p, q)

    n = p * q
    phi = (p - 1) * (q - 1)
    logger.info("Generating key pair for a %d-bit modulus", n.bit_length())

    if public_exponent is None:
        e = _sample_exponent(phi, rng or default_random_source(), max_retries)
    else:
        e = public_exponent
        if not 1 < e < phi or gcd(e, phi) != 1:
            raise ExponentDerivationFailed(
                f"Public exponent {e} is not coprime to phi(n) within (1, phi(n))"
            )
        logger.info("Using fixed public exponent e=%d", e)

    d = mod_inverse(e, phi)
    if d is None:
        raise InverseComputationFailed(f"No inverse of e={e} modulo phi(n)")

    return RsaKeyPair(n=n, e=e, d=d, p=p, q=q)


__all__ = [
    "EXPONENT_SAMPLE_BYTES",
    "MAX_EXPONENT_RETRIES",
    "PublicKey",
    "RsaKeyPair",
    "generate_keys",
]
