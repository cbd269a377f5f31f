"""Randomness sources handed explicitly to key generation and block sizing."""
from __future__ import annotations

import random
import secrets
from typing import Protocol

from Crypto.Random import get_random_bytes


class RandomSource(Protocol):
    def random_bytes(self, count: int) -> bytes:
        ...

    def randrange(self, start: int, stop: int) -> int:
        ...


class SystemRandomSource:
    """OS entropy (pycryptodome for bytes, ``secrets`` for ranges)."""

    def random_bytes(self, count: int) -> bytes:
        return get_random_bytes(count)

    def randrange(self, start: int, stop: int) -> int:
        if stop <= start:
            raise ValueError("empty range for randrange")
        return start + secrets.randbelow(stop - start)


class SeededRandomSource:
    """Reproducible source for tests and ``--seed`` runs. Not for real keys."""

    def __init__(self, seed: int | str | bytes):
        self.seed = seed
        self._rng = random.Random(seed)

    def random_bytes(self, count: int) -> bytes:
        return self._rng.randbytes(count)

    def randrange(self, start: int, stop: int) -> int:
        return self._rng.randrange(start, stop)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r})"


_DEFAULT = SystemRandomSource()


def default_random_source() -> RandomSource:
    return _DEFAULT


__all__ = [
    "RandomSource",
    "SystemRandomSource",
    "SeededRandomSource",
    "default_random_source",
]
