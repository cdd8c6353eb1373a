"""
Diagnostic output for fileagg.

Everything here goes to stderr so it never mixes with aggregated text that
the terminal sink prints on stdout.
"""

from __future__ import annotations

import sys
from typing import Optional

from colorama import Fore, Style

PREFIX = "[fileagg]"


def echo(msg: str, color: Optional[str] = None) -> None:
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg, file=sys.stderr)


def info(msg: str) -> None:
    echo(f"{PREFIX} {msg}")


def warn(msg: str) -> None:
    echo(f"{PREFIX} ! {msg}", Fore.YELLOW)


def success(msg: str) -> None:
    echo(f"{PREFIX} {msg}", Fore.GREEN)


def error(msg: str) -> None:
    echo(f"Error: {msg}", Fore.RED)
