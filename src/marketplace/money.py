"""Money helpers.

Amounts are stored as integer minor units (cents). Percentage maths goes
through ``Decimal`` and rounds half-up to the cent.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("1")


def line_total(unit_price_cents: int, quantity: int) -> int:
    return unit_price_cents * quantity


def vendor_payout(total_cents: int, commission_rate: float) -> int:
    """Amount owed to the vendor after the platform commission.

    >>> vendor_payout(5998, 10)
    5398
    """
    rate = Decimal(str(commission_rate)) / Decimal("100")
    payout = Decimal(total_cents) * (Decimal("1") - rate)
    return int(payout.quantize(_CENT, rounding=ROUND_HALF_UP))


def to_cents(amount) -> int:
    """Convert a major-unit amount (e.g. ``"29.99"``) to cents."""
    return int((Decimal(str(amount)) * 100).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_amount(cents: int) -> str:
    """Render cents as a major-unit string, e.g. ``5998`` -> ``"59.98"``."""
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))
