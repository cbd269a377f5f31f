"""
Public-key-only attack on textbook RSA (demo)
Given nothing but (n, e) and the ciphertext blocks:
  Phase 1: Factorization      trial division up to FACTOR_SEARCH_BOUND
  Phase 2: Key recovery       phi(n) from the factors, d = e^-1 mod phi(n)
  Phase 3: e-th root          per block, when m^e never wrapped around n
Phase 3 only runs when phases 1-2 did not produce plaintext.  Both phases
deliberately target toy moduli; a modulus whose smallest factor exceeds the
bound and whose blocks wrapped around n is reported as AttackInconclusive.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from Crypto.Util.number import isPrime

from textbook_rsa.cipher import Ciphertext, chunk_widths, decode_text, join_blocks
from textbook_rsa.errors import AttackInconclusive
from textbook_rsa.number_theory import integer_root, is_prime, mod_inverse, os2ip

logger = logging.getLogger(__name__)

# Largest trial divisor tried during factorization.  The attack cannot factor
# any modulus whose smallest prime factor is above this value.
FACTOR_SEARCH_BOUND = 1_000_000


@dataclass(frozen=True)
class AttackResult:
    method: str
    plaintext: bytes
    factors: Optional[Tuple[int, int]] = None
    private_exponent: Optional[int] = None
    blocks_recovered: int = 0
    blocks_total: int = 0

    @property
    def text(self) -> str:
        return decode_text(self.plaintext)

    @property
    def complete(self) -> bool:
        return self.blocks_recovered == self.blocks_total


def factorize(n: int, bound: int = FACTOR_SEARCH_BOUND) -> Optional[Tuple[int, int]]:
    """Return ``(p, q)`` with ``p * q == n`` and ``p <= bound``, or ``None``."""

    i = 2
    while i * i <= n and i <= bound:
        if n % i == 0:
            return i, n // i
        i += 1
    return None


def root_attack(block: int, e: int) -> Optional[int]:
    """Recover ``m`` from ``block == m**e`` for e in (2, 3), verified exactly."""

    if e not in (2, 3):
        return None
    root = integer_root(block, e)
    if root ** e == block:
        return root
    return None


def _framing(ciphertext) -> Tuple[Optional[int], Optional[int]]:
    if isinstance(ciphertext, Ciphertext):
        return ciphertext.block_size, ciphertext.plaintext_length
    return None, None


def _recover_with_factors(
    blocks: Sequence[int],
    n: int,
    e: int,
    factors: Tuple[int, int],
    framing: Tuple[Optional[int], Optional[int]],
) -> Optional[AttackResult]:
    p, q = factors
    # The cofactor can be as large as n / 2, too big for trial division.
    if not (is_prime(p) and isPrime(q)):
        logger.info("Phase 2: n is not a product of two primes; key recovery skipped")
        return None
    phi = (p - 1) * (q - 1)
    d = mod_inverse(e, phi)
    if d is None:
        logger.info("Phase 2: e=%d has no inverse modulo phi(n); key recovery failed", e)
        return None
    logger.info("Phase 2: recovered private exponent d=%d", d)

    values = [pow(c, d, n) for c in blocks]
    try:
        plaintext = join_blocks(values, *framing)
    except ValueError as exc:
        logger.info("Phase 2: decrypted blocks do not fit the ciphertext framing (%s)", exc)
        return None
    return AttackResult(
        method="factorization",
        plaintext=plaintext,
        factors=(p, q),
        private_exponent=d,
        blocks_recovered=len(blocks),
        blocks_total=len(blocks),
    )


def _recover_with_roots(
    blocks: Sequence[int],
    e: int,
    framing: Tuple[Optional[int], Optional[int]],
) -> Optional[AttackResult]:
    block_size, plaintext_length = framing
    widths: List[Optional[int]] = [None] * len(blocks)
    if block_size is not None and plaintext_length is not None:
        expected = chunk_widths(block_size, plaintext_length)
        if len(expected) == len(blocks):
            widths = list(expected)

    pieces = []
    for index, (block, width) in enumerate(zip(blocks, widths)):
        root = root_attack(block, e)
        if root is None:
            logger.debug("Phase 3: block %d is not a perfect power of e=%d", index, e)
            continue
        if width is not None and root.bit_length() > 8 * width:
            logger.debug("Phase 3: root of block %d does not fit its chunk", index)
            continue
        pieces.append(os2ip(root, width))

    if not pieces:
        return None
    if len(pieces) < len(blocks):
        logger.warning(
            "Phase 3: only %d of %d block(s) recovered; plaintext is partial",
            len(pieces),
            len(blocks),
        )
    else:
        logger.info("Phase 3: every block recovered by %d-th root", e)
    return AttackResult(
        method="eth_root",
        plaintext=b"".join(pieces),
        blocks_recovered=len(pieces),
        blocks_total=len(blocks),
    )


def try_decrypt_with_public_key_only(
    ciphertext: Ciphertext | Iterable[int],
    n: int,
    e: int,
    *,
    bound: int = FACTOR_SEARCH_BOUND,
) -> AttackResult:
    """Attempt to read ``ciphertext`` knowing only the public key ``(n, e)``."""

    framing = _framing(ciphertext)
    blocks = list(ciphertext)
    logger.info(
        "Attacking %d block(s) under a %d-bit modulus with e=%d",
        len(blocks),
        n.bit_length(),
        e,
    )

    factors = factorize(n, bound)
    if factors is not None:
        logger.info("Phase 1: factorization succeeded: p=%d, q=%d", *factors)
        result = _recover_with_factors(blocks, n, e, factors, framing)
        if result is not None:
            return result
    else:
        logger.info("Phase 1: no factor found up to %d", min(bound, integer_root(n, 2)))

    result = _recover_with_roots(blocks, e, framing)
    if result is not None:
        return result

    raise AttackInconclusive(
        "Public key alone was insufficient: no small factor of n and no block "
        f"is an exact {e}-th power"
    )


__all__ = [
    "FACTOR_SEARCH_BOUND",
    "AttackResult",
    "factorize",
    "root_attack",
    "try_decrypt_with_public_key_only",
]
