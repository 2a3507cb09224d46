from decimal import Decimal

from app.schemas.cart import LineItem
from app.services import pricing


def _item(pid, price, qty):
    return LineItem(product_id=pid, name=pid, unit_price=Decimal(price), quantity=qty)


def test_quote_for_single_line():
    q = pricing.quote([_item("a", "100", 2)])
    assert q.subtotal == Decimal("200")
    assert q.tax == Decimal("10.00")
    assert q.total == Decimal("210.00")


def test_quote_is_order_independent():
    items = [_item("a", "19.99", 3), _item("b", "0.35", 7), _item("c", "250", 1)]
    assert pricing.quote(items) == pricing.quote(list(reversed(items)))


def test_total_is_subtotal_plus_five_percent():
    items = [_item("a", "33.33", 3)]
    q = pricing.quote(items)
    assert q.total == q.subtotal * Decimal("1.05")


def test_empty_cart_quotes_zero():
    q = pricing.quote([])
    assert q == (Decimal("0"), Decimal("0"), Decimal("0"))


def test_no_rounding_until_money():
    q = pricing.quote([_item("a", "0.01", 1)])
    assert q.tax == Decimal("0.0005")
    assert pricing.to_money(q.tax) == Decimal("0.00")
    assert pricing.to_money(Decimal("0.005")) == Decimal("0.01")
    assert pricing.to_money(q.total) == Decimal("0.01")


def test_quote_to_dict_renders_money():
    q = pricing.quote([_item("a", "250", 1)])
    assert q.to_dict() == {"subtotal": 250.0, "gst": 12.5, "total": 262.5}
