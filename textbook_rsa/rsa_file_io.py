"""JSON bundles holding a public key and textbook RSA ciphertext blocks.

Integers are written as decimal strings so any JSON reader keeps full
precision.  A bundle never contains the private exponent or the factors; it
carries exactly what an eavesdropper would see.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Tuple

from textbook_rsa.cipher import Ciphertext, chunk_widths, max_block_size
from textbook_rsa.keygen import PublicKey

logger = logging.getLogger(__name__)

BUNDLE_ALG = "RSA-textbook"
BUNDLE_VERSION = 1


def parse_int(value: str, *, field: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal integer."""

    text = value.strip().lower()
    if text.startswith("0x"):
        base = 16
        text = text[2:]
    else:
        base = 10
    try:
        return int(text, base)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {field}") from exc


def _json_int(value: Any, *, field: str) -> int:
    # bool is an int subclass; JSON true/false must not pass as 1/0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"RSA metadata contains invalid integers: {field}")
    return value


def save_bundle(path: str | Path, public_key: PublicKey, ciphertext: Ciphertext) -> Path:
    bundle: dict[str, Any] = {
        "alg": BUNDLE_ALG,
        "v": BUNDLE_VERSION,
        "n": str(public_key.n),
        "e": str(public_key.e),
        "block_size": ciphertext.block_size,
        "plaintext_len": ciphertext.plaintext_length,
        "blocks": [str(block) for block in ciphertext.blocks],
    }

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(bundle, indent=2) + "\n")
    logger.info("Wrote %d ciphertext block(s) to %s", len(ciphertext), output_path)
    return output_path


def load_bundle(path: str | Path) -> Tuple[PublicKey, Ciphertext]:
    """Read a bundle written by :func:`save_bundle` and validate its contents."""

    bundle_path = Path(path)
    try:
        data = json.loads(bundle_path.read_text())
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"File not found: {bundle_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError("Input file is not valid JSON") from exc

    if not isinstance(data, dict) or data.get("alg") != BUNDLE_ALG:
        raise ValueError("Input file does not contain a textbook RSA bundle")
    if data.get("v") != BUNDLE_VERSION:
        raise ValueError(f"Unsupported bundle version: {data.get('v')!r}")

    try:
        n = parse_int(str(data["n"]), field="n")
        e = parse_int(str(data["e"]), field="e")
        block_size = _json_int(data["block_size"], field="block_size")
        plaintext_len = _json_int(data["plaintext_len"], field="plaintext_len")
        raw_blocks = data["blocks"]
    except KeyError as exc:
        raise ValueError(f"Missing required RSA field: {exc.args[0]}") from exc

    if not 1 <= block_size <= max_block_size(n):
        raise ValueError("Recorded block size does not fit the modulus")
    if plaintext_len < 0:
        raise ValueError("Recorded plaintext length is negative")

    if not isinstance(raw_blocks, list):
        raise ValueError("'blocks' must be a list")
    blocks = tuple(parse_int(str(item), field="block") for item in raw_blocks)
    if any(not 0 <= block < n for block in blocks):
        raise ValueError("Ciphertext block outside [0, n)")
    if len(chunk_widths(block_size, plaintext_len)) != len(blocks):
        raise ValueError("Block count does not match recorded block size and length")

    return PublicKey(n=n, e=e), Ciphertext(
        blocks=blocks, block_size=block_size, plaintext_length=plaintext_len
    )


__all__ = ["BUNDLE_ALG", "BUNDLE_VERSION", "parse_int", "save_bundle", "load_bundle"]
