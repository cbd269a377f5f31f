from __future__ import annotations

from .attack_dashboard import make_attack_dashboard

__all__ = ["make_attack_dashboard"]
