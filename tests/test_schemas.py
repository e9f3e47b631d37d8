from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.pricing import DiscountType, OrderType
from app.schemas.discounts import StandardDiscountRequest, VoucherRequest
from app.schemas.pricing import CheckoutRequest, QuoteRequest
from app.schemas.upsells import UpsellRequest


def _discount(**kw):
    data = dict(
        brand_id="brand-1",
        discount_name="Lunch",
        discount_type="cart",
        discount_method="percentage",
        discount_value=10,
        min_order_value=100,
        order_types=["pickup"],
        location_ids=["loc-1"],
    )
    data.update(kw)
    return StandardDiscountRequest(**data)


def test_valid_cart_discount():
    req = _discount(active_days=["Monday"], active_time_slots=[{"start": "11:00", "end": "14:00"}])
    assert req.discount_type == DiscountType.CART
    assert req.active_days == ["monday"]
    assert req.discount_value == Decimal("10")


@pytest.mark.parametrize("overrides", [
    {"discount_type": "product", "reference_ids": []},
    {"min_order_value": 0},
    {"discount_value": 0},
    {"discount_value": 150},
    {"location_ids": []},
    {"order_types": []},
    {"active_days": ["someday"]},
    {"active_time_slots": [{"start": "24:00", "end": "25:00"}]},
    {"start_date": "2024-02-01T00:00:00", "end_date": "2024-01-01T00:00:00"},
])
def test_invalid_standard_discounts(overrides):
    with pytest.raises(ValidationError):
        _discount(**overrides)


def test_free_delivery_needs_no_value():
    req = _discount(discount_type="free_delivery", discount_value=0, min_order_value=300)
    assert req.discount_type == DiscountType.FREE_DELIVERY


def test_voucher_code_is_upper_cased():
    req = VoucherRequest(brand_id="brand-1", code="summer-24", discount_method="fixed_amount",
                         discount_value=25, order_types=["pickup", "delivery"])
    assert req.code == "SUMMER-24"
    assert req.usage_limit is None


def test_voucher_code_rejects_spaces():
    with pytest.raises(ValidationError):
        VoucherRequest(brand_id="brand-1", code="BAD CODE", discount_method="percentage",
                       discount_value=10, order_types=["pickup"])


def test_upsell_needs_numeric_cart_value_threshold():
    base = dict(brand_id="brand-1", upsell_name="Drinks", offer_type="product",
                offer_product_ids=["cola-1"], order_types=["pickup"])
    UpsellRequest(trigger_conditions=[{"type": "cart_value_over", "reference_id": "150"}], **base)
    with pytest.raises(ValidationError):
        UpsellRequest(trigger_conditions=[{"type": "cart_value_over", "reference_id": "lots"}], **base)
    with pytest.raises(ValidationError):
        UpsellRequest(trigger_conditions=[], **base)


def test_quote_needs_lines_with_unique_ids():
    cart = dict(brand_id="brand-1", location_id="loc-1", delivery_type="pickup")
    with pytest.raises(ValidationError):
        QuoteRequest(lines=[], **cart)
    with pytest.raises(ValidationError):
        QuoteRequest(lines=[{"line_id": "a", "product_id": "p"}, {"line_id": "a", "product_id": "q"}], **cart)
    req = QuoteRequest(lines=[{"line_id": "a", "product_id": "p", "quantity": 2}], **cart)
    assert req.delivery_type == OrderType.PICKUP
    assert req.include_bag_fee is True


def test_combo_lines_cannot_carry_an_upsell():
    with pytest.raises(ValidationError):
        QuoteRequest(brand_id="b", location_id="l", delivery_type="pickup",
                     lines=[{"line_id": "a", "product_id": "c", "item_type": "combo", "upsell_id": "u"}])


def test_delivery_checkout_needs_address():
    data = dict(
        brand_id="brand-1", location_id="loc-1", delivery_type="delivery",
        lines=[{"line_id": "a", "product_id": "pizza-1"}],
        customer={"name": "Ann", "email": "ann@example.com"},
    )
    with pytest.raises(ValidationError):
        CheckoutRequest(**data)
    req = CheckoutRequest(delivery_address={"street": "Main 1", "zip_code": "8000", "city": "Aarhus"}, **data)
    assert req.delivery_address.city == "Aarhus"
