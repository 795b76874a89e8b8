"""Order price arithmetic.

The same numbers are derived by the storefront client before submitting an
order; the server recomputes them from catalog prices and compares.
"""
import math
from dataclasses import dataclass, asdict
from typing import Iterable, Optional, Tuple

TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 50.0
FLAT_SHIPPING_FEE = 9.99

# client and server may round at different points
PRICE_TOLERANCE = 0.01


@dataclass(frozen=True)
class PriceBreakdown:
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float

    def as_dict(self) -> dict:
        return asdict(self)


def calculate_prices(lines: Iterable[Tuple[float, int]]) -> PriceBreakdown:
    """Subtotal, 8% tax, flat shipping under the free threshold, and total.

    Tax and the shipping threshold work on the unrounded subtotal, the way the
    client computes them; only the returned values are rounded to cents.
    """
    raw_subtotal = sum(price * quantity for price, quantity in lines)
    shipping = 0.0 if raw_subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE
    subtotal = round(raw_subtotal, 2)
    tax = round(raw_subtotal * TAX_RATE, 2)
    total = round(subtotal + tax + shipping, 2)

    return PriceBreakdown(
        items_price=subtotal,
        tax_price=tax,
        shipping_price=shipping,
        total_price=total,
    )


def find_mismatch(
    submitted: PriceBreakdown, canonical: PriceBreakdown
) -> Optional[Tuple[str, float, float]]:
    """Return (field, submitted, expected) for the first field off by more than a cent."""
    for field, expected in canonical.as_dict().items():
        value = getattr(submitted, field)
        if not math.isclose(value, expected, abs_tol=PRICE_TOLERANCE + 1e-9):
            return field, value, expected
    return None
