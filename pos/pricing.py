"""Pricing engine for the cart.

All helpers work on unrounded ``Decimal`` values. Rounding to cents only
happens in :func:`round_currency` / :func:`format_currency`, i.e. when a
value is about to be shown, so sums never compound rounding error.
"""
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable

from pydantic import BaseModel

from .models import CartItem

TAX_RATE = Decimal("0.08875")
CENTS = Decimal("0.01")


def subtotal(items: Iterable[CartItem]) -> Decimal:
    return sum((item.subtotal for item in items), Decimal("0"))


def tax(amount: Decimal) -> Decimal:
    return amount * TAX_RATE


def grand_total(items: Iterable[CartItem]) -> Decimal:
    sub = subtotal(items)
    return sub + tax(sub)


def round_currency(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_EVEN)


def format_currency(value: Decimal) -> str:
    """Render ``value`` the way a US currency formatter would: ``$1,234.56``."""
    rounded = round_currency(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


class Totals(BaseModel):
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal
    display_subtotal: str
    display_tax: str
    display_grand_total: str


def totals(items: Iterable[CartItem]) -> Totals:
    items = list(items)
    sub = subtotal(items)
    t = tax(sub)
    return Totals(
        subtotal=round_currency(sub),
        tax=round_currency(t),
        grand_total=round_currency(sub + t),
        display_subtotal=format_currency(sub),
        display_tax=format_currency(t),
        display_grand_total=format_currency(sub + t),
    )
