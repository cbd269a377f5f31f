from __future__ import annotations

from pathlib import Path

from attacks.public_key_attack import FACTOR_SEARCH_BOUND
from textbook_rsa.cipher import max_block_size
from textbook_rsa.number_theory import integer_root
from utils.plotting import nice_axes, save, wide_grid


def _trial_division_steps(smallest_factors: list[int], bound: int) -> tuple[list[int], list[int]]:
    attempted: list[int] = []
    abandoned: list[int] = []
    for factor in smallest_factors:
        attempted.append(min(factor, bound) - 1)
        abandoned.append(1 if factor > bound else 0)
    return attempted, abandoned


def _root_attack_capacity(modulus_bits: list[int], e: int = 3) -> tuple[list[int], list[int]]:
    """Bytes a block may hold before m**e wraps, against the block size the cipher uses."""

    recoverable: list[int] = []
    block_sizes: list[int] = []
    for bits in modulus_bits:
        smallest_n = (1 << (bits - 1)) + 1
        root = integer_root(smallest_n - 1, e)
        recoverable.append((root.bit_length() - 1) // 8)
        block_sizes.append(max_block_size(smallest_n))
    return recoverable, block_sizes


def make_attack_dashboard(save_path: str | Path, *, bound: int = FACTOR_SEARCH_BOUND) -> Path:
    fig, axes = wide_grid(1, 2)
    ax_a, ax_b = axes[0]

    # Subplot A: cost of phase 1 against the smallest prime factor of n
    factors = [10 ** k for k in range(1, 10)]
    steps, abandoned = _trial_division_steps(factors, bound)
    ax_a = nice_axes(
        ax_a,
        "Trial Division Before Success or Give-Up",
        xlabel="Smallest prime factor of n",
        ylabel="Divisions attempted",
    )
    ax_a.plot(factors, steps, marker="o", label="Divisions attempted")
    for factor, step, gave_up in zip(factors, steps, abandoned):
        if gave_up:
            ax_a.scatter([factor], [step], color="tab:red", zorder=3)
    ax_a.axvline(bound, linestyle="--", color="tab:red", label=f"Search bound ({bound:,})")
    ax_a.set_xscale("log")
    ax_a.set_yscale("log")
    ax_a.legend()

    # Subplot B: where the cube-root attack still works
    modulus_bits = list(range(24, 521, 16))
    recoverable, block_sizes = _root_attack_capacity(modulus_bits)
    ax_b = nice_axes(
        ax_b,
        "Small-Plaintext Regime (e = 3)",
        xlabel="Modulus size (bits)",
        ylabel="Block size (bytes)",
    )
    ax_b.plot(modulus_bits, block_sizes, marker=".", label="Largest block the cipher uses")
    ax_b.plot(modulus_bits, recoverable, marker=".", label="Largest block with m³ < n")
    ax_b.fill_between(modulus_bits, 0, recoverable, alpha=0.2, color="tab:orange")
    ax_b.legend()

    fig.suptitle("Public-Key-Only Attack Limits")
    fig.tight_layout(rect=(0, 0, 1, 0.95))

    return save(fig, save_path)


__all__ = ["make_attack_dashboard"]
