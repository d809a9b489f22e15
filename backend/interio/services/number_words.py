"""Rupee amounts in words, Indian numbering system.

>>> amount_in_words(1500.50)
'One Thousand Five Hundred Rupees and Fifty Paise only'
>>> amount_in_words(12500000)
'One Crore Twenty Five Lakh Rupees only'
"""

import math

from ..utils.money import to_paise

ZERO_WORDS = "Zero Rupees Only"

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (value, name), largest first
_SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
    (100, "Hundred"),
]


def integer_to_words(num: int) -> str:
    """
    Spell a non-negative integer using crore / lakh / thousand / hundred.

    The crore multiplier is itself spelled recursively, so 10^9 becomes
    "One Hundred Crore". Zero returns an empty string.
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if num < 20:
        return _ONES[num]
    if num < 100:
        rest = _ONES[num % 10]
        return _TENS[num // 10] + (f" {rest}" if rest else "")

    for value, name in _SCALES:
        if num >= value:
            head, tail = divmod(num, value)
            words = f"{integer_to_words(head)} {name}"
            if tail:
                words += f" {integer_to_words(tail)}"
            return words
    return ""  # unreachable


def amount_in_words(amount: float) -> str:
    """
    Render a rupee amount as words for documents.

    Paise are rounded half-up to two decimals before spelling. Negative
    amounts get a "Minus " prefix. An amount with no rupee part is spelled
    as paise alone ("Fifty Paise only").

    Args:
        amount: Amount in rupees

    Returns:
        e.g. "One Thousand Five Hundred Rupees and Fifty Paise only"

    Raises:
        ValueError: If amount is NaN or infinite
    """
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValueError(f"Cannot convert {amount!r} to words")

    value = to_paise(amount)
    if value == 0:
        return ZERO_WORDS

    rupee_digits, paise_digits = f"{value.copy_abs():.2f}".split(".")
    rupees = int(rupee_digits)
    paise = int(paise_digits)

    parts = []
    if rupees:
        parts.append(f"{integer_to_words(rupees)} Rupees")
    if paise:
        parts.append(f"{integer_to_words(paise)} Paise")
    words = " and ".join(parts) + " only"
    return f"Minus {words}" if value < 0 else words
