import logging
from typing import Optional, Sequence

from .cart_discounts import VOUCHER, free_delivery_discount, select_cart_discount
from .eligibility import filter_eligible
from .item_discounts import resolve_item_discounts
from .money import ZERO
from .types import (
    AppliedDiscount,
    CartLine,
    PricingContext,
    PricingResult,
    StandardDiscount,
    VoucherDiscount,
)

logger = logging.getLogger(__name__)


def cart_subtotal(lines: Sequence[CartLine]):
    return sum((line.line_subtotal for line in lines), ZERO)


def price_cart(
    lines: Sequence[CartLine],
    discounts: Sequence[StandardDiscount],
    voucher: Optional[VoucherDiscount] = None,
    context: Optional[PricingContext] = None,
) -> PricingResult:
    """Price a cart.

    ``discounts`` is run through the eligibility filter when a ``context`` is
    given, otherwise it is taken as already filtered. Item-level discounts are
    resolved first and lock the lines they touch; the best of the automatic
    cart discount and the voucher is then applied to what stays unlocked.
    Free delivery is only evaluated with a context, since it depends on the
    delivery type.
    """
    lines = list(lines)
    if context is not None:
        discounts = filter_eligible(discounts, context)
    else:
        discounts = list(discounts)

    subtotal = cart_subtotal(lines)
    items = resolve_item_discounts(lines, discounts)
    choice = select_cart_discount(items.lines, discounts, voucher)

    names = list(items.names)
    total_discount = items.total
    cart_discount = None
    if choice is not None:
        cart_discount = choice.applied()
        total_discount += choice.amount
        if choice.name and choice.name not in names:
            names.append(choice.name)

    final_discount = None
    if total_discount > ZERO:
        final_discount = AppliedDiscount(name=", ".join(names), amount=total_discount)

    free_delivery = None
    if context is not None:
        match = free_delivery_discount(discounts, context.delivery_type, subtotal - items.total)
        if match is not None:
            free_delivery = match.discount_name

    result = PricingResult(
        lines=tuple(items.lines),
        subtotal=subtotal,
        item_discounts=dict(items.item_discounts),
        cart_discount=cart_discount,
        final_discount=final_discount,
        cart_total=subtotal - total_discount,
        free_delivery=free_delivery,
        voucher_applied=choice is not None and choice.source == VOUCHER,
    )
    logger.debug(
        "Priced %d lines: subtotal=%s discount=%s total=%s",
        len(lines), subtotal, total_discount, result.cart_total,
    )
    return result
