"""Cart pricing.

Totals are exact ``Decimal`` sums; rounding to money happens only when an
amount is persisted or rendered.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

TAX_RATE = Decimal("0.05")  # flat GST
TWOPLACES = Decimal("0.01")


class PriceQuote(NamedTuple):
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self):
        return {
            "subtotal": float(to_money(self.subtotal)),
            "gst": float(to_money(self.tax)),
            "total": float(to_money(self.total)),
        }


def to_money(value) -> Decimal:
    d = Decimal(str(value))
    return d.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def subtotal(items: Iterable) -> Decimal:
    return sum(
        (Decimal(str(item.unit_price)) * item.quantity for item in items),
        Decimal("0"),
    )


def tax(amount: Decimal) -> Decimal:
    return amount * TAX_RATE


def total(amount: Decimal, tax_amount: Decimal) -> Decimal:
    return amount + tax_amount


def quote(items: Iterable) -> PriceQuote:
    sub = subtotal(items)
    gst = tax(sub)
    return PriceQuote(sub, gst, total(sub, gst))
