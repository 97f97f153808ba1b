# tests/test_pricing.py
from decimal import Decimal

from pos import pricing
from pos.database import MOCK_PRODUCTS
from pos.models import CartItem


def test_empty_cart_totals_are_zero():
    t = pricing.totals([])
    assert t.subtotal == Decimal("0.00")
    assert t.grand_total == Decimal("0.00")
    assert t.display_grand_total == "$0.00"


def test_line_subtotal_uses_exact_decimals():
    item = CartItem(product=MOCK_PRODUCTS[0], quantity=3)
    assert item.subtotal == Decimal("8.97")


def test_rounding_happens_only_at_display_time():
    items = [CartItem(product=MOCK_PRODUCTS[6], quantity=1)]  # 3.99
    sub = pricing.subtotal(items)
    assert pricing.tax(sub) == Decimal("0.3541125")
    assert pricing.grand_total(items) == Decimal("4.3441125")
    t = pricing.totals(items)
    assert t.tax == Decimal("0.35")
    assert t.grand_total == Decimal("4.34")


def test_round_currency_is_half_even():
    assert pricing.round_currency(Decimal("0.125")) == Decimal("0.12")
    assert pricing.round_currency(Decimal("0.135")) == Decimal("0.14")


def test_format_currency():
    assert pricing.format_currency(Decimal("2.99")) == "$2.99"
    assert pricing.format_currency(Decimal("1234.5")) == "$1,234.50"
    assert pricing.format_currency(Decimal("-3.10")) == "-$3.10"
