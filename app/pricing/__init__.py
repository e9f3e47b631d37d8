from .types import (
    AppliedDiscount,
    CartLine,
    DiscountMethod,
    DiscountType,
    ItemType,
    OrderType,
    PricingContext,
    PricingResult,
    StandardDiscount,
    TimeSlot,
    TimeSlotValidation,
    Topping,
    VoucherDiscount,
)
from .eligibility import filter_eligible, is_eligible
from .item_discounts import resolve_item_discounts
from .cart_discounts import discountable_subtotal, select_cart_discount
from .engine import price_cart
from .fees import FeeSchedule, CheckoutTotals, checkout_totals

__all__ = [
    'AppliedDiscount',
    'CartLine',
    'DiscountMethod',
    'DiscountType',
    'ItemType',
    'OrderType',
    'PricingContext',
    'PricingResult',
    'StandardDiscount',
    'TimeSlot',
    'TimeSlotValidation',
    'Topping',
    'VoucherDiscount',
    'filter_eligible',
    'is_eligible',
    'resolve_item_discounts',
    'discountable_subtotal',
    'select_cart_discount',
    'price_cart',
    'FeeSchedule',
    'CheckoutTotals',
    'checkout_totals',
]
