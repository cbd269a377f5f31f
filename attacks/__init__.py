from __future__ import annotations

from .public_key_attack import AttackResult, try_decrypt_with_public_key_only

__all__ = ["AttackResult", "try_decrypt_with_public_key_only"]
