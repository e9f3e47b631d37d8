"""Value types shared by the pricing engine.

Everything here is immutable. The engine returns new ``CartLine`` objects
instead of mutating the caller's cart, which keeps repeated pricing calls
over the same input equal.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from .money import ZERO, HUNDRED, to_amount, to_display, to_quantity

OFFER_SUFFIX = "-offer"


def strip_offer_suffix(product_id) -> str:
    pid = product_id or ""
    if pid.endswith(OFFER_SUFFIX):
        return pid[: -len(OFFER_SUFFIX)]
    return pid


class OrderType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class ItemType(str, Enum):
    PRODUCT = "product"
    COMBO = "combo"


class DiscountType(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    CART = "cart"
    FREE_DELIVERY = "free_delivery"


class TimeSlotValidation(str, Enum):
    ORDER_TIME = "orderTime"
    PICKUP_TIME = "pickupTime"


def _percentage_off(base: Decimal, value: Decimal) -> Decimal:
    return min(base, base * value / HUNDRED)


def _fixed_off(base: Decimal, value: Decimal) -> Decimal:
    return min(base, value)


class DiscountMethod(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"

    def amount_off(self, base, value) -> Decimal:
        """Amount taken off ``base``, never more than ``base`` itself."""
        return _AMOUNT_OFF[self](to_amount(base), to_amount(value))


_AMOUNT_OFF = {
    DiscountMethod.PERCENTAGE: _percentage_off,
    DiscountMethod.FIXED_AMOUNT: _fixed_off,
}


def amount_off(method, base, value) -> Decimal:
    """Like ``DiscountMethod.amount_off``; a missing or unknown method takes nothing off."""
    handler = _AMOUNT_OFF.get(method)
    if handler is None:
        return ZERO
    return handler(to_amount(base), to_amount(value))


@dataclass(frozen=True)
class Topping:
    name: str
    price: Decimal = ZERO


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str


@dataclass(frozen=True)
class CartLine:
    line_id: str
    product_id: str
    base_price: Decimal
    price: Decimal
    quantity: int = 1
    toppings: Tuple[Topping, ...] = ()
    item_type: ItemType = ItemType.PRODUCT
    category_id: Optional[str] = None
    name: str = ""
    discount_label: Optional[str] = None

    @property
    def is_locked(self) -> bool:
        return self.item_type == ItemType.COMBO or self.price != self.base_price

    @property
    def underlying_product_id(self) -> str:
        return strip_offer_suffix(self.product_id)

    @property
    def toppings_total(self) -> Decimal:
        return sum((to_amount(t.price) for t in self.toppings), ZERO)

    @property
    def qty(self) -> int:
        return to_quantity(self.quantity)

    @property
    def line_subtotal(self) -> Decimal:
        """Undiscounted line value: base price plus toppings, times quantity."""
        return (to_amount(self.base_price) + self.toppings_total) * self.qty

    @property
    def markdown(self) -> Decimal:
        """Discount already baked into ``price`` for the whole line."""
        per_unit = to_amount(self.base_price) - to_amount(self.price)
        return per_unit * self.qty if per_unit > ZERO else ZERO


@dataclass(frozen=True)
class StandardDiscount:
    id: str
    discount_name: str
    discount_type: DiscountType
    discount_method: DiscountMethod
    discount_value: Decimal = ZERO
    min_order_value: Decimal = ZERO
    reference_ids: Tuple[str, ...] = ()
    order_types: Tuple[OrderType, ...] = (OrderType.PICKUP, OrderType.DELIVERY)
    location_ids: Tuple[str, ...] = ()
    active_days: Tuple[str, ...] = ()
    active_time_slots: Tuple[TimeSlot, ...] = ()
    time_slot_validation: TimeSlotValidation = TimeSlotValidation.ORDER_TIME
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    allow_stacking: bool = False
    brand_id: Optional[str] = None


@dataclass(frozen=True)
class VoucherDiscount:
    id: str
    code: str
    discount_method: DiscountMethod
    discount_value: Decimal = ZERO
    min_order_value: Decimal = ZERO


@dataclass(frozen=True)
class PricingContext:
    brand_id: str
    location_id: str
    delivery_type: OrderType
    now: datetime
    pickup_time: Optional[datetime] = None


@dataclass(frozen=True)
class AppliedDiscount:
    name: str
    amount: Decimal

    def to_dict(self):
        return {"name": self.name, "amount": to_display(self.amount)}


@dataclass
class PricingResult:
    lines: Tuple[CartLine, ...]
    subtotal: Decimal
    item_discounts: Dict[str, Decimal] = field(default_factory=dict)
    cart_discount: Optional[AppliedDiscount] = None
    final_discount: Optional[AppliedDiscount] = None
    cart_total: Decimal = ZERO
    free_delivery: Optional[str] = None
    voucher_applied: bool = False

    @property
    def item_discount_total(self) -> Decimal:
        return sum(self.item_discounts.values(), ZERO)

    @property
    def total_discount(self) -> Decimal:
        return self.final_discount.amount if self.final_discount else ZERO

    def to_dict(self):
        return {
            "subtotal": to_display(self.subtotal),
            "item_discounts": {k: to_display(v) for k, v in self.item_discounts.items()},
            "item_discount_total": to_display(self.item_discount_total),
            "cart_discount": self.cart_discount.to_dict() if self.cart_discount else None,
            "final_discount": self.final_discount.to_dict() if self.final_discount else None,
            "cart_total": to_display(self.cart_total),
            "free_delivery": self.free_delivery,
            "voucher_applied": self.voucher_applied,
            "lines": [
                {
                    "line_id": line.line_id,
                    "product_id": line.product_id,
                    "name": line.name,
                    "item_type": line.item_type.value,
                    "quantity": line.qty,
                    "base_price": to_display(line.base_price),
                    "price": to_display(line.price),
                    "toppings": [{"name": t.name, "price": to_display(t.price)} for t in line.toppings],
                    "locked": line.is_locked,
                    "discount_label": line.discount_label,
                }
                for line in self.lines
            ],
        }
