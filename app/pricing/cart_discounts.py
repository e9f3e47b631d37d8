from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from .money import ZERO, to_amount
from .types import (
    AppliedDiscount,
    CartLine,
    DiscountType,
    OrderType,
    StandardDiscount,
    VoucherDiscount,
    amount_off,
)

AUTOMATIC = "automatic"
VOUCHER = "voucher"


@dataclass(frozen=True)
class CartDiscountChoice:
    """Winning cart-level discount. ``source`` is AUTOMATIC or VOUCHER."""
    source: str
    source_id: str
    name: str
    amount: Decimal

    def applied(self) -> AppliedDiscount:
        return AppliedDiscount(name=self.name, amount=self.amount)


def discountable_subtotal(lines: Sequence[CartLine]) -> Decimal:
    return sum((line.line_subtotal for line in lines if not line.is_locked), ZERO)


def meets_minimum(min_order_value, subtotal: Decimal) -> bool:
    return subtotal >= to_amount(min_order_value)


def automatic_cart_discount(
    discounts: Sequence[StandardDiscount], subtotal: Decimal
) -> Optional[CartDiscountChoice]:
    best = None
    for discount in discounts:
        if discount.discount_type != DiscountType.CART:
            continue
        if not meets_minimum(discount.min_order_value, subtotal):
            continue
        amount = amount_off(discount.discount_method, subtotal, discount.discount_value)
        if amount <= ZERO:
            continue
        if best is None or amount > best.amount:
            best = CartDiscountChoice(AUTOMATIC, discount.id, discount.discount_name, amount)
    return best


def voucher_cart_discount(voucher: Optional[VoucherDiscount], subtotal: Decimal) -> Optional[CartDiscountChoice]:
    if voucher is None or not meets_minimum(voucher.min_order_value, subtotal):
        return None
    amount = amount_off(voucher.discount_method, subtotal, voucher.discount_value)
    if amount <= ZERO:
        return None
    return CartDiscountChoice(VOUCHER, voucher.id, voucher.code, amount)


def select_cart_discount(
    lines: Sequence[CartLine],
    discounts: Sequence[StandardDiscount],
    voucher: Optional[VoucherDiscount] = None,
) -> Optional[CartDiscountChoice]:
    """Best of the automatic cart discount and the voucher; never both."""
    subtotal = discountable_subtotal(lines)
    if subtotal <= ZERO:
        return None
    best = automatic_cart_discount(discounts, subtotal)
    from_voucher = voucher_cart_discount(voucher, subtotal)
    if from_voucher is not None and (best is None or from_voucher.amount > best.amount):
        best = from_voucher
    return best


def free_delivery_discount(
    discounts: Sequence[StandardDiscount], delivery_type: OrderType, amount_after_item_discounts: Decimal
) -> Optional[StandardDiscount]:
    if delivery_type != OrderType.DELIVERY:
        return None
    for discount in discounts:
        if discount.discount_type == DiscountType.FREE_DELIVERY and meets_minimum(
            discount.min_order_value, amount_after_item_discounts
        ):
            return discount
    return None
