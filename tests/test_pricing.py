import pytest

from marketplace.services.pricing import calculate_subtotal, price_order, round_half_up


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (0.5, 1), (2.4, 2), (215.99999, 216), (0, 0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_subtotal_multiplies_quantities():
    items = [{"price": 250, "quantity": 2}, {"price": 99.5, "quantity": 1}]
    assert calculate_subtotal(items) == 599.5


def test_default_shipping_and_tax():
    totals = price_order([{"price": 1200, "quantity": 1}])
    assert totals == {
        "subtotal": 1200,
        "shipping_cost": 100,
        "tax": 216,
        "discount": 0,
        "total": 1516,
    }


def test_tax_rounds_half_up():
    totals = price_order([{"price": 5, "quantity": 1}], shipping_cost=0, tax_rate=0.5)
    assert totals["tax"] == 3


def test_tax_is_charged_before_discount():
    totals = price_order([{"price": 1000, "quantity": 1}], discount=100)
    assert totals["tax"] == 180
    assert totals["total"] == 1000 + 100 + 180 - 100


def test_total_never_negative():
    totals = price_order([{"price": 10, "quantity": 1}], discount=500, shipping_cost=0, tax_rate=0)
    assert totals["total"] == 0
