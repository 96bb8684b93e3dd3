"""Coloured status messages for the terminal."""

import os
import sys

_RESET = "\x1b[0m"
_BOLD = 1
_RED = 31
_GREEN = 32
_BLUE = 34


def _colors_enabled() -> bool:
    force = os.environ.get("CLICOLOR_FORCE")
    if force is not None and force != "0":
        return True
    if os.environ.get("CLICOLOR") == "0":
        return False
    return sys.stdout.isatty()


def _style(text: object, *codes: int) -> str:
    text = str(text)
    if not codes or not _colors_enabled():
        return text
    prefix = "".join(f"\x1b[{code}m" for code in codes)
    return f"{prefix}{text}{_RESET}"


def _no_emoji() -> bool:
    return "NO_EMOJI" in os.environ


def bold(text: object) -> str:
    """Return ``text`` in bold when the terminal supports colours."""
    return _style(text, _BOLD)


def blue(text: object) -> str:
    """Return ``text`` in blue when the terminal supports colours."""
    return _style(text, _BLUE)


def warn(message: str) -> None:
    """Print a warning line in red."""
    symbol = "!" if _no_emoji() else "⚠️ "
    print(f"{_style(symbol, _RED)} {_style(message, _RED)}")


def success(message: str) -> None:
    """Print a success line in green."""
    symbol = "✓" if _no_emoji() else "✅"
    print(f"{_style(symbol, _GREEN)} {_style(message, _GREEN)}")