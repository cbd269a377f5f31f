from __future__ import annotations

from .cipher import Ciphertext, decode_text, decrypt_message, encrypt_message
from .errors import (
    AttackInconclusive,
    ExponentDerivationFailed,
    InvalidPrimePair,
    RsaLabError,
)
from .keygen import PublicKey, RsaKeyPair, generate_keys

__all__ = [
    "Ciphertext",
    "decode_text",
    "decrypt_message",
    "encrypt_message",
    "AttackInconclusive",
    "ExponentDerivationFailed",
    "InvalidPrimePair",
    "RsaLabError",
    "PublicKey",
    "RsaKeyPair",
    "generate_keys",
]
