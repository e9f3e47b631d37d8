from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .money import HUNDRED, ZERO, to_amount, to_display
from .types import OrderType, PricingResult

ADMIN_FEE_FIXED = "fixed"
ADMIN_FEE_PERCENTAGE = "percentage"


@dataclass(frozen=True)
class FeeSchedule:
    delivery_fee: Decimal = ZERO
    bag_fee: Decimal = ZERO
    admin_fee: Decimal = ZERO
    admin_fee_type: Optional[str] = None
    vat_percentage: Decimal = Decimal("25")


@dataclass(frozen=True)
class CheckoutTotals:
    cart_total: Decimal
    delivery_fee: Decimal
    free_delivery: bool
    bag_fee: Decimal
    admin_fee: Decimal
    vat_amount: Decimal
    checkout_total: Decimal

    @property
    def delivery_charge(self) -> Decimal:
        return ZERO if self.free_delivery else self.delivery_fee

    def to_dict(self):
        return {
            "cart_total": to_display(self.cart_total),
            "delivery_fee": to_display(self.delivery_fee),
            "free_delivery": self.free_delivery,
            "bag_fee": to_display(self.bag_fee),
            "admin_fee": to_display(self.admin_fee),
            "vat_amount": to_display(self.vat_amount),
            "checkout_total": to_display(self.checkout_total),
        }


def admin_fee_for(fees: FeeSchedule, base: Decimal) -> Decimal:
    fee = to_amount(fees.admin_fee)
    if fee <= ZERO:
        return ZERO
    if fees.admin_fee_type == ADMIN_FEE_FIXED:
        return fee
    if fees.admin_fee_type == ADMIN_FEE_PERCENTAGE:
        return base * fee / HUNDRED
    return ZERO


def checkout_totals(
    result: PricingResult,
    fees: FeeSchedule,
    delivery_type: OrderType,
    include_bag_fee: bool = True,
) -> CheckoutTotals:
    """Add delivery, bag and admin fees on top of a priced cart.

    VAT is included in prices, so ``vat_amount`` is the share of the
    checkout total that is tax, not an extra charge.
    """
    cart_total = max(ZERO, result.cart_total)
    delivery_fee = to_amount(fees.delivery_fee) if delivery_type == OrderType.DELIVERY else ZERO
    free_delivery = bool(result.free_delivery) and delivery_fee > ZERO
    bag_fee = to_amount(fees.bag_fee) if include_bag_fee else ZERO

    charged_delivery = ZERO if free_delivery else delivery_fee
    admin_fee = admin_fee_for(fees, cart_total + charged_delivery + bag_fee)
    total = cart_total + charged_delivery + bag_fee + admin_fee

    vat_rate = to_amount(fees.vat_percentage)
    vat_amount = total * vat_rate / (HUNDRED + vat_rate)

    return CheckoutTotals(
        cart_total=cart_total,
        delivery_fee=delivery_fee,
        free_delivery=free_delivery,
        bag_fee=bag_fee,
        admin_fee=admin_fee,
        vat_amount=vat_amount,
        checkout_total=total,
    )
