"""Console presentation helpers for the RSA lab CLI."""
from __future__ import annotations

import os
import shutil
import sys
from typing import Optional

import colorama
import pyfiglet
from colorama import Fore, Style

__all__ = [
    "init",
    "banner",
    "step_header",
    "section",
    "kv",
    "bullet",
    "success",
    "warning",
    "error",
    "elapsed",
    "rule",
    "line",
]

_width = 100
_plain_mode = False
_symbols = {"success": "✓", "warning": "!", "error": "✗", "bullet": "•"}
_styles = {"success": "", "warning": "", "error": "", "step": "", "secret": ""}


def init(plain: bool = False) -> None:
    """Pick colour/ASCII mode from ``--plain``, ``NO_COLOR`` and the tty state."""

    global _width, _plain_mode, _symbols, _styles

    _width = shutil.get_terminal_size(fallback=(100, 24)).columns or 100

    is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    _plain_mode = plain or bool(os.environ.get("NO_COLOR")) or not is_tty

    if _plain_mode:
        _symbols = {"success": "[OK]", "warning": "[!]", "error": "[X]", "bullet": "-"}
        _styles = {key: "" for key in _styles}
        return

    colorama.init(autoreset=True)
    _symbols = {"success": "✓", "warning": "!", "error": "✗", "bullet": "•"}
    _styles = {
        "success": Fore.GREEN + Style.BRIGHT,
        "warning": Fore.YELLOW + Style.BRIGHT,
        "error": Fore.RED + Style.BRIGHT,
        "step": Fore.CYAN + Style.BRIGHT,
        "secret": Fore.MAGENTA,
    }


def _apply(kind: str, message: str) -> str:
    style = _styles.get(kind, "")
    if not style:
        return message
    return f"{style}{message}{Style.RESET_ALL}"


def rule(char: str = "=", width: Optional[int] = None) -> None:
    count = width if width is not None else _width
    print(char * max(1, count))


def banner(title: str) -> None:
    if _plain_mode:
        print(f"=== {title} ===".center(_width))
        return
    print(pyfiglet.figlet_format(title, width=_width))


def step_header(i: int, n: int, title: str) -> None:
    print(_apply("step", f"[{i}/{n}] {title}"))


def section(title: str) -> None:
    rule("=")
    print(f" {title.upper()}")
    rule("=")


def kv(key: str, value: str, *, secret: bool = False) -> None:
    """Print a key-value line; ``secret`` values are highlighted as private material."""

    text = _apply("secret", value) if secret else value
    print(f"{key}: {text}")


def bullet(msg: str) -> None:
    print(f"{_symbols['bullet']} {msg}")


def success(msg: str) -> None:
    print(_apply("success", f"{_symbols['success']} {msg}"))


def warning(msg: str) -> None:
    print(_apply("warning", f"{_symbols['warning']} {msg}"))


def error(msg: str) -> None:
    print(_apply("error", f"{_symbols['error']} {msg}"))


def elapsed(prefix: str, seconds: float) -> None:
    print(f"{prefix} {seconds:.2f}s")


def line() -> None:
    rule("-")
