"""Exceptions raised by the RSA lab."""
from __future__ import annotations


class RsaLabError(Exception):
    """Base class for every failure the lab reports as ordinary control flow."""


class InvalidPrimePair(RsaLabError, ValueError):
    """``p`` and ``q`` cannot form an RSA modulus."""


class DuplicatePrimes(InvalidPrimePair):
    pass


class NotPrime(InvalidPrimePair):
    def __init__(self, value: int):
        super().__init__(f"{value} is not prime")
        self.value = value


class ExponentDerivationFailed(RsaLabError):
    """No usable public/private exponent pair could be derived."""


class InverseComputationFailed(ExponentDerivationFailed):
    pass


class ExponentRetriesExhausted(ExponentDerivationFailed):
    def __init__(self, attempts: int):
        super().__init__(f"No public exponent coprime to phi(n) after {attempts} draws")
        self.attempts = attempts


class AttackInconclusive(RsaLabError):
    """The public key alone was not enough to recover any plaintext."""


__all__ = [
    "RsaLabError",
    "InvalidPrimePair",
    "DuplicatePrimes",
    "NotPrime",
    "ExponentDerivationFailed",
    "InverseComputationFailed",
    "ExponentRetriesExhausted",
    "AttackInconclusive",
]
