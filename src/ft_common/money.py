"""Integer money utilities.

All fees, balances and payouts are int minor units (paise, called "cents"
throughout the API). No float, no Decimal.
"""

CURRENCY_SYMBOL = "₹"


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 150000 -> '₹1,500.00', -1200 -> '-₹12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-{CURRENCY_SYMBOL}{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"{CURRENCY_SYMBOL}{cents // 100:,}.{cents % 100:02d}"


def require_positive(amount: int, what: str = "Amount") -> None:
    """Raise ValueError unless `amount` is a positive integer."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{what} must be an integer number of cents")
    if amount <= 0:
        raise ValueError(f"{what} must be positive, got {amount}")
