"""
Roman numeral formatting for item ordinals.
"""

from __future__ import annotations

_NUMERALS = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def to_roman(number: int) -> str:
    """
    Convert a positive integer to an upper-case Roman numeral.

    Non-positive input yields an empty string.

    Example:
        >>> to_roman(14)
        'XIV'
    """
    if number <= 0:
        return ""
    parts = []
    for value, symbol in _NUMERALS:
        count, number = divmod(number, value)
        parts.append(symbol * count)
    return "".join(parts)
