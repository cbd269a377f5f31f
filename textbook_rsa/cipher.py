"""Textbook RSA over byte strings: chunking, block encryption and reassembly.

A message is cut into fixed-size chunks, each chunk is read as a big-endian
integer and raised to ``e`` modulo ``n``.  Chunks are at most ``bytes(n) - 1``
long, so every block value is strictly below ``n`` and survives the round
trip.  The chosen ``block_size`` and the plaintext length travel with the
blocks in :class:`Ciphertext`; decryption uses them to restore leading zero
bytes that the integer encoding would otherwise drop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from textbook_rsa.number_theory import i2osp, os2ip
from textbook_rsa.randomness import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ciphertext(Sequence[int]):
    """Ordered ciphertext blocks plus the framing needed to decode them."""

    blocks: Tuple[int, ...]
    block_size: int
    plaintext_length: int

    def __getitem__(self, index):
        return self.blocks[index]

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)


def modulus_bytes(n: int) -> int:
    return (n.bit_length() + 7) // 8


def max_block_size(n: int) -> int:
    size = modulus_bytes(n) - 1
    if size < 1:
        raise ValueError(f"Modulus {n} is too small to carry a one-byte block")
    return size


def choose_block_size(n: int, rng: RandomSource | None = None) -> int:
    """Largest safe block size, or a random one in ``[2, bytes(n) - 2]``.

    The random variant only applies when an ``rng`` is supplied and the
    modulus is longer than four bytes.
    """

    upper = max_block_size(n)
    if rng is not None and modulus_bytes(n) > 4:
        return rng.randrange(2, upper)
    return upper


def chunk_widths(block_size: int, plaintext_length: int) -> List[int]:
    if block_size < 1:
        raise ValueError("block_size must be positive")
    if plaintext_length <= 0:
        return []
    full, rest = divmod(plaintext_length, block_size)
    return [block_size] * full + ([rest] if rest else [])


def encrypt_block(m: int, n: int, e: int) -> int:
    if not (0 <= m < n):
        raise ValueError("Message representative out of range")
    return pow(m, e, n)


def decrypt_block(c: int, d: int, n: int) -> int:
    if not (0 <= c < n):
        raise ValueError("Ciphertext representative out of range")
    return pow(c, d, n)


def encrypt_message(
    plaintext: bytes | bytearray | memoryview,
    n: int,
    e: int,
    *,
    block_size: int | None = None,
    rng: RandomSource | None = None,
) -> Ciphertext:
    if not isinstance(plaintext, (bytes, bytearray, memoryview)):
        raise TypeError("plaintext must be bytes-like")
    message = bytes(plaintext)

    if block_size is None:
        block_size = choose_block_size(n, rng)
    elif not 1 <= block_size <= max_block_size(n):
        raise ValueError(
            f"block_size must be between 1 and {max_block_size(n)} for this modulus"
        )
    logger.debug("Encrypting %d byte(s) with block size %d", len(message), block_size)

    blocks = tuple(
        encrypt_block(i2osp(message[offset:offset + block_size]), n, e)
        for offset in range(0, len(message), block_size)
    )
    return Ciphertext(blocks=blocks, block_size=block_size, plaintext_length=len(message))


def join_blocks(
    values: Sequence[int],
    block_size: int | None = None,
    plaintext_length: int | None = None,
) -> bytes:
    """Serialize decrypted block values back into the original byte string.

    Without ``block_size`` each value uses its minimal encoding, which loses
    leading zero bytes of a chunk.  With ``block_size`` but no
    ``plaintext_length`` every block but the last is padded to full width.
    """

    if block_size is None:
        return b"".join(os2ip(value) for value in values)

    widths: List[Optional[int]]
    if plaintext_length is None:
        widths = [block_size] * (len(values) - 1) + [None] if values else []
    else:
        widths = list(chunk_widths(block_size, plaintext_length))
    if len(widths) != len(values):
        raise ValueError(
            f"Expected {len(widths)} block(s) for the recorded framing, got {len(values)}"
        )
    return b"".join(os2ip(value, width) for value, width in zip(values, widths))


def decrypt_message(
    ciphertext: Ciphertext | Iterable[int],
    d: int,
    n: int,
    *,
    block_size: int | None = None,
    plaintext_length: int | None = None,
) -> bytes:
    if isinstance(ciphertext, Ciphertext):
        if block_size is None:
            block_size = ciphertext.block_size
        if plaintext_length is None:
            plaintext_length = ciphertext.plaintext_length

    values = [decrypt_block(c, d, n) for c in ciphertext]
    return join_blocks(values, block_size, plaintext_length)


def decode_text(data: bytes) -> str:
    """UTF-8 decode that replaces invalid sequences instead of failing."""

    return data.decode("utf-8", errors="replace")


__all__ = [
    "Ciphertext",
    "modulus_bytes",
    "max_block_size",
    "choose_block_size",
    "chunk_widths",
    "encrypt_block",
    "decrypt_block",
    "encrypt_message",
    "join_blocks",
    "decrypt_message",
    "decode_text",
]
