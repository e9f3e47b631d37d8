from decimal import Decimal

from app.pricing import FeeSchedule, OrderType, PricingResult, checkout_totals

FEES = FeeSchedule(
    delivery_fee=Decimal("39"),
    bag_fee=Decimal("4"),
    admin_fee=Decimal("5"),
    admin_fee_type="fixed",
    vat_percentage=Decimal("25"),
)


def _result(cart_total, free_delivery=None):
    return PricingResult(lines=(), subtotal=Decimal(cart_total), cart_total=Decimal(cart_total),
                         free_delivery=free_delivery)


def test_pickup_skips_delivery_fee():
    totals = checkout_totals(_result("198"), FEES, OrderType.PICKUP)
    assert totals.delivery_fee == Decimal("0")
    assert totals.checkout_total == Decimal("207")
    assert totals.vat_amount == Decimal("41.4")


def test_delivery_adds_fee():
    totals = checkout_totals(_result("100"), FEES, OrderType.DELIVERY)
    assert totals.delivery_charge == Decimal("39")
    assert totals.checkout_total == Decimal("148")


def test_free_delivery_waives_the_fee():
    totals = checkout_totals(_result("250", free_delivery="Free over 200"), FEES, OrderType.DELIVERY)
    assert totals.free_delivery is True
    assert totals.delivery_fee == Decimal("39")
    assert totals.checkout_total == Decimal("259")


def test_bag_fee_can_be_declined():
    totals = checkout_totals(_result("100"), FEES, OrderType.PICKUP, include_bag_fee=False)
    assert totals.bag_fee == Decimal("0")
    assert totals.checkout_total == Decimal("105")


def test_percentage_admin_fee_is_taken_on_the_running_total():
    fees = FeeSchedule(delivery_fee=Decimal("40"), bag_fee=Decimal("10"), admin_fee=Decimal("10"),
                       admin_fee_type="percentage")
    totals = checkout_totals(_result("150"), fees, OrderType.DELIVERY)
    assert totals.admin_fee == Decimal("20")
    assert totals.checkout_total == Decimal("220")


def test_unknown_admin_fee_type_charges_nothing():
    fees = FeeSchedule(admin_fee=Decimal("10"), admin_fee_type="weird")
    assert checkout_totals(_result("100"), fees, OrderType.PICKUP).admin_fee == Decimal("0")


def test_negative_cart_total_is_clamped():
    totals = checkout_totals(_result("-5"), FeeSchedule(), OrderType.PICKUP)
    assert totals.cart_total == Decimal("0")
    assert totals.checkout_total == Decimal("0")


def test_totals_dict_is_rounded():
    data = checkout_totals(_result("99.999"), FEES, OrderType.PICKUP).to_dict()
    assert data["cart_total"] == 100.0
    assert set(data) == {"cart_total", "delivery_fee", "free_delivery", "bag_fee", "admin_fee",
                         "vat_amount", "checkout_total"}
