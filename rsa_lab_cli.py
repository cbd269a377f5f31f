#!/usr/bin/env python3
"""
RSA Lab CLI: key generation, textbook encryption and the public-key attack.

Usage:
  Interactive menu:
    python rsa_lab_cli.py

  Non-interactive:
    python rsa_lab_cli.py --run keygen
    python rsa_lab_cli.py --run roundtrip --message "Rust is great"
    python rsa_lab_cli.py --run attack --p 102871 --q 102877
    python rsa_lab_cli.py --run attack --attack-file out/bundle.json
    python rsa_lab_cli.py --run all --seed 7
"""

from __future__ import annotations

import argparse
import logging
import os
import pathlib
import sys
import textwrap
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

# Ensure relative repo imports work even if executed from another directory.
sys.path.insert(0, str(pathlib.Path(__file__).parent.resolve()))

from attacks.public_key_attack import (
    FACTOR_SEARCH_BOUND,
    AttackResult,
    try_decrypt_with_public_key_only,
)
from textbook_rsa.cipher import Ciphertext, decode_text, encrypt_message
from textbook_rsa.errors import AttackInconclusive, RsaLabError
from textbook_rsa.keygen import PublicKey, RsaKeyPair, generate_keys
from textbook_rsa.randomness import RandomSource, SeededRandomSource, SystemRandomSource
from textbook_rsa.rsa_file_io import load_bundle, parse_int, save_bundle
from utils import console_ui

# Small enough for trial-division primality checks.  The last four are above
# FACTOR_SEARCH_BOUND, so moduli built only from them resist the attack.
DEMO_PRIMES: Tuple[int, ...] = (
    102871,
    102877,
    102881,
    102911,
    102913,
    102929,
    1000003,
    1000033,
    1000037,
    1000039,
)

DEFAULT_MESSAGE = "Textbook RSA is malleable"

logger = logging.getLogger("rsa_lab_cli")


@dataclass
class DemoSettings:
    rng: RandomSource
    p: Optional[int] = None
    q: Optional[int] = None
    message: str = DEFAULT_MESSAGE
    fixed_e: bool = False
    block_size: Optional[int] = None
    bound: int = FACTOR_SEARCH_BOUND
    save_path: Optional[pathlib.Path] = None
    attack_file: Optional[pathlib.Path] = None


def pick_primes(rng: RandomSource, primes: Sequence[int] = DEMO_PRIMES) -> Tuple[int, int]:
    """Pick two distinct primes from ``primes``."""

    if len(primes) < 2:
        raise ValueError("Need at least two primes to choose from")
    i = rng.randrange(0, len(primes))
    j = rng.randrange(0, len(primes) - 1)
    if j >= i:
        j += 1
    return primes[i], primes[j]


def _resolve_primes(settings: DemoSettings) -> Tuple[int, int]:
    if settings.p is not None and settings.q is not None:
        return settings.p, settings.q
    given = settings.p if settings.p is not None else settings.q
    if given is None:
        return pick_primes(settings.rng)
    pool = [prime for prime in DEMO_PRIMES if prime != given]
    other = pool[settings.rng.randrange(0, len(pool))]
    return (given, other) if settings.p is not None else (other, given)


def clear_screen() -> None:
    command = "cls" if os.name == "nt" else "clear"
    os.system(command)


def menu() -> str:
    clear_screen()
    console_ui.banner("RSA Lab")
    console_ui.bullet("Choose a demo to run:")
    print("  1) Key generation")
    print("  2) Encrypt / decrypt round trip")
    print("  3) Public-key-only attack")
    print("  4) Run ALL (in order)")
    print("  5) Export attack dashboard (PNG)")
    print("  0) Exit")
    return input("\nEnter choice: ").strip()


def run_keygen(settings: DemoSettings) -> Optional[RsaKeyPair]:
    console_ui.section("Key Generation")
    p, q = _resolve_primes(settings)
    console_ui.kv("Prime p", str(p), secret=True)
    console_ui.kv("Prime q", str(q), secret=True)
    try:
        keys = generate_keys(
            p,
            q,
            rng=settings.rng,
            public_exponent=3 if settings.fixed_e else None,
        )
    except RsaLabError as exc:
        console_ui.error(f"Key generation failed: {exc}")
        return None

    console_ui.kv("Modulus n", f"{keys.n} ({keys.n.bit_length()} bits)")
    console_ui.kv("Public exponent e", str(keys.e))
    console_ui.success("Key pair generated.")
    return keys


def run_roundtrip(settings: DemoSettings) -> Optional[Tuple[RsaKeyPair, Ciphertext]]:
    keys = run_keygen(settings)
    if keys is None:
        return None

    console_ui.section("Encrypt / Decrypt")
    plaintext = settings.message.encode("utf-8")
    try:
        ciphertext = encrypt_message(
            plaintext,
            keys.n,
            keys.e,
            block_size=settings.block_size,
            rng=settings.rng,
        )
    except ValueError as exc:
        console_ui.error(f"Encryption failed: {exc}")
        return None

    console_ui.kv("Plaintext", repr(settings.message))
    console_ui.kv("Block size", f"{ciphertext.block_size} byte(s)")
    console_ui.kv("Ciphertext blocks", str(len(ciphertext)))
    for index, block in enumerate(ciphertext.blocks[:8]):
        print(f"      Block {index:02d}: {block}")
    if len(ciphertext) > 8:
        print(f"      ... {len(ciphertext) - 8} more")

    recovered = keys.decrypt_message(ciphertext)
    console_ui.kv("Decrypted", repr(decode_text(recovered)))
    if recovered == plaintext:
        console_ui.success("Round trip is byte-exact.")
    else:
        console_ui.error("Round trip mismatch!")

    if settings.save_path is not None:
        path = save_bundle(settings.save_path, keys.public_key, ciphertext)
        console_ui.kv("Bundle saved to", str(path.resolve()))
    return keys, ciphertext


def _print_attack_result(result: AttackResult) -> None:
    console_ui.kv("Method", result.method)
    if result.factors is not None:
        console_ui.kv("Recovered factors", f"p={result.factors[0]}, q={result.factors[1]}", secret=True)
    if result.private_exponent is not None:
        console_ui.kv("Recovered d", str(result.private_exponent), secret=True)
    console_ui.kv("Blocks recovered", f"{result.blocks_recovered}/{result.blocks_total}")
    console_ui.kv("Recovered text", repr(result.text))


def run_attack(settings: DemoSettings) -> Optional[AttackResult]:
    if settings.attack_file is not None:
        try:
            public_key, ciphertext = load_bundle(settings.attack_file)
        except (OSError, ValueError) as exc:
            console_ui.error(f"Could not load bundle: {exc}")
            return None
    else:
        outcome = run_roundtrip(settings)
        if outcome is None:
            return None
        keys, ciphertext = outcome
        public_key = keys.public_key
    return _attack(public_key, ciphertext, settings.bound)


def _attack(public_key: PublicKey, ciphertext: Ciphertext, bound: int) -> Optional[AttackResult]:
    console_ui.section("Public-Key-Only Attack")
    console_ui.kv("Known to attacker", f"n={public_key.n}, e={public_key.e}, {len(ciphertext)} block(s)")
    console_ui.kv("Factor search bound", f"{bound:,}")
    start = time.perf_counter()
    try:
        result = try_decrypt_with_public_key_only(ciphertext, public_key.n, public_key.e, bound=bound)
    except AttackInconclusive as exc:
        console_ui.elapsed("Gave up after", time.perf_counter() - start)
        console_ui.warning(f"Attack failed: {exc}")
        return None
    console_ui.elapsed("Attack finished in", time.perf_counter() - start)
    _print_attack_result(result)
    if result.complete:
        console_ui.success("Plaintext recovered without the private key.")
    else:
        console_ui.warning("Only part of the plaintext was recovered.")
    return result


def export_dashboard(path: pathlib.Path, bound: int = FACTOR_SEARCH_BOUND) -> Optional[pathlib.Path]:
    console_ui.section("Export Attack Dashboard (PNG)")
    from reports.attack_dashboard import make_attack_dashboard

    target = make_attack_dashboard(path, bound=bound)
    console_ui.success(f"Saved dashboard: {target.resolve()}")
    return target


def run_all(settings: DemoSettings) -> bool:
    """Key generation, round trip and attack against one shared key pair."""

    steps = ("Key generation + round trip", "Public-key-only attack")
    total = len(steps)
    start = time.perf_counter()

    console_ui.step_header(1, total, steps[0])
    outcome = run_roundtrip(settings)
    console_ui.elapsed("DONE in", time.perf_counter() - start)
    console_ui.line()
    if outcome is None:
        return False
    keys, ciphertext = outcome

    start = time.perf_counter()
    console_ui.step_header(2, total, steps[1])
    result = _attack(keys.public_key, ciphertext, settings.bound)
    console_ui.elapsed("DONE in", time.perf_counter() - start)
    console_ui.line()

    console_ui.success("All demos completed.")
    return result is not None


def _int_arg(field: str):
    def _parse(value: str) -> int:
        try:
            return parse_int(value, field=field)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return _parse


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="RSA Lab CLI: textbook RSA and a public-key-only attack.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
        Examples:
          python rsa_lab_cli.py
          python rsa_lab_cli.py --run roundtrip --p 61 --q 53 --message "Rust is great"
          python rsa_lab_cli.py --run all --seed 7
        """),
    )
    ap.add_argument(
        "--run",
        choices=["keygen", "roundtrip", "attack", "all"],
        help="Run a specific demo non-interactively.",
    )
    ap.add_argument("--p", type=_int_arg("p"), help="First prime (decimal or 0x-hex).")
    ap.add_argument("--q", type=_int_arg("q"), help="Second prime (decimal or 0x-hex).")
    ap.add_argument("--message", default=DEFAULT_MESSAGE, help="Plaintext to encrypt.")
    ap.add_argument(
        "--fixed-e",
        action="store_true",
        help="Use e = 3 instead of a random coprime exponent.",
    )
    ap.add_argument("--seed", help="Seed a deterministic random source (demo only).")
    ap.add_argument("--block-size", type=_int_arg("block size"), help="Plaintext bytes per block.")
    ap.add_argument(
        "--bound",
        type=_int_arg("bound"),
        default=FACTOR_SEARCH_BOUND,
        help="Largest trial divisor the attack tries.",
    )
    ap.add_argument("--save", type=pathlib.Path, help="Write the public key and ciphertext to JSON.")
    ap.add_argument("--attack-file", type=pathlib.Path, help="Attack a previously saved JSON bundle.")
    ap.add_argument("--dashboard", type=pathlib.Path, help="Export the attack dashboard PNG and exit.")
    ap.add_argument(
        "--plain",
        action="store_true",
        help="Disable colors/banners; print plain ASCII.",
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging verbosity (DEBUG, INFO, WARNING, ...)",
    )
    return ap.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> DemoSettings:
    rng: RandomSource = SeededRandomSource(args.seed) if args.seed is not None else SystemRandomSource()
    return DemoSettings(
        rng=rng,
        p=args.p,
        q=args.q,
        message=args.message,
        fixed_e=args.fixed_e,
        block_size=args.block_size,
        bound=args.bound,
        save_path=args.save,
        attack_file=args.attack_file,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    console_ui.init(plain=args.plain)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    settings = settings_from_args(args)
    logger.debug("Running with %r", settings)

    if args.dashboard is not None:
        export_dashboard(args.dashboard, settings.bound)
        return 0

    if args.run:
        mapping = {
            "keygen": lambda: run_keygen(settings) is not None,
            "roundtrip": lambda: run_roundtrip(settings) is not None,
            "attack": lambda: run_attack(settings) is not None,
            "all": lambda: run_all(settings),
        }
        return 0 if mapping[args.run]() else 1

    # interactive loop
    while True:
        choice = menu()
        if choice == "1":
            run_keygen(settings)
        elif choice == "2":
            run_roundtrip(settings)
        elif choice == "3":
            run_attack(settings)
        elif choice == "4":
            run_all(settings)
        elif choice == "5":
            export_dashboard(pathlib.Path("out") / "attack_dashboard.png", settings.bound)
        elif choice == "0" or choice.lower() in {"q", "quit", "exit"}:
            print("Goodbye!")
            return 0
        else:
            print("Invalid choice. Please select 0-5.")
            continue
        input("\nPress Enter to return to the main menu...")


if __name__ == "__main__":
    sys.exit(main())
