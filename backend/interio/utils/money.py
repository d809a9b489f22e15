"""Currency rounding and display helpers (Indian Rupee)."""

from decimal import Decimal, ROUND_HALF_UP, localcontext

CURRENCY_SYMBOL = "₹"
_CENT = Decimal("0.01")


def to_paise(value: float) -> Decimal:
    """Decimal rounded half-up to paise.

    Goes through ``str`` so that binary noise such as ``2.675000000001``
    does not decide the rounding direction. The context precision grows
    with the magnitude so very large amounts keep their paise digits.
    """
    amount = Decimal(str(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def round_money(value: float) -> float:
    """Round a currency amount to 2 decimals, half away from zero."""
    return float(to_paise(value))


def group_indian(digits: str) -> str:
    """Insert lakh/crore separators into a string of digits.

    >>> group_indian("12345678")
    '1,23,45,678'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: float, symbol: bool = True) -> str:
    """
    Format an amount for display, e.g. ``₹1,23,45,678.90``.

    Args:
        amount: Amount in rupees
        symbol: Prefix the rupee sign

    Returns:
        Two-decimal string grouped by the Indian numbering convention
    """
    rounded = to_paise(amount)
    sign = "-" if rounded < 0 else ""
    rupees, paise = f"{rounded.copy_abs():.2f}".split(".")
    prefix = CURRENCY_SYMBOL if symbol else ""
    return f"{sign}{prefix}{group_indian(rupees)}.{paise}"
