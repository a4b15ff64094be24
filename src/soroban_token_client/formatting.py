"""
Display formatting for token amounts and addresses.
"""

from typing import Union

from .models import UNAVAILABLE

ELLIPSIS = "…"


def format_amount(raw: Union[int, str], decimals: int) -> str:
    """
    Format a smallest-unit integer amount as a decimal string.

    The integer part gets thousands separators; the fractional part keeps
    only significant digits and is omitted when zero. The UNAVAILABLE
    sentinel passes through unchanged.

    Example:
        >>> format_amount(15000000, 7)
        '1.5'
        >>> format_amount(12345670000000, 7)
        '1,234,567'
    """
    if raw == UNAVAILABLE:
        return UNAVAILABLE
    if decimals < 0:
        raise ValueError("decimals must be non-negative")

    value = int(raw)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10 ** decimals)

    if frac == 0:
        return f"{sign}{whole:,}"

    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole:,}.{frac_str}"


def parse_amount(text: str, decimals: int) -> int:
    """
    Parse a decimal string (separators allowed) into smallest units.

    Inverse of format_amount.

    Raises:
        ValueError: On malformed input or more fractional digits than decimals
    """
    cleaned = text.strip().replace(",", "")
    negative = cleaned.startswith("-")
    if negative or cleaned.startswith("+"):
        cleaned = cleaned[1:]

    whole, _, frac = cleaned.partition(".")
    if not whole and not frac:
        raise ValueError(f"Not an amount: {text!r}")
    if (whole and not whole.isdigit()) or (frac and not frac.isdigit()):
        raise ValueError(f"Not an amount: {text!r}")
    if len(frac) > decimals:
        raise ValueError(f"{text!r} has more than {decimals} fractional digits")

    value = int(whole or "0") * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")
    return -value if negative else value


def truncate_address(addr: str, chars: int = 4) -> str:
    """Shorten an address for display: first chars+1, an ellipsis, last chars."""
    if len(addr) <= chars * 2 + 3:
        return addr
    tail = addr[-chars:] if chars > 0 else ""
    return f"{addr[:chars + 1]}{ELLIPSIS}{tail}"


__all__ = [
    "format_amount",
    "parse_amount",
    "truncate_address",
]
