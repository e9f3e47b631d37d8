"""Upsell selection and the locked lines an accepted upsell produces."""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .eligibility import within_dates, within_days, within_time_slots
from .money import ZERO, to_amount
from .types import CartLine, DiscountMethod, ItemType, OrderType, PricingContext, TimeSlot, Topping, amount_off

logger = logging.getLogger(__name__)


class TriggerType(str, Enum):
    PRODUCT_IN_CART = "product_in_cart"
    CATEGORY_IN_CART = "category_in_cart"
    CART_VALUE_OVER = "cart_value_over"
    COMBO_IN_CART = "combo_in_cart"
    PRODUCT_TAG_IN_CART = "product_tag_in_cart"


class OfferType(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"


@dataclass(frozen=True)
class TriggerCondition:
    type: TriggerType
    reference_id: str


@dataclass(frozen=True)
class Upsell:
    id: str
    upsell_name: str
    offer_type: OfferType
    trigger_conditions: Tuple[TriggerCondition, ...]
    offer_product_ids: Tuple[str, ...] = ()
    offer_category_ids: Tuple[str, ...] = ()
    discount_method: Optional[DiscountMethod] = None
    discount_value: Decimal = ZERO
    order_types: Tuple[OrderType, ...] = (OrderType.PICKUP, OrderType.DELIVERY)
    location_ids: Tuple[str, ...] = ()
    active_days: Tuple[str, ...] = ()
    active_time_slots: Tuple[TimeSlot, ...] = ()
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True


@dataclass(frozen=True)
class UpsellMatch:
    upsell: Upsell
    product_ids: Tuple[str, ...]


def is_upsell_active(upsell: Upsell, context: PricingContext) -> bool:
    if not upsell.is_active:
        return False
    if upsell.location_ids and context.location_id not in upsell.location_ids:
        return False
    if context.delivery_type not in (upsell.order_types or ()):
        return False
    return (
        within_dates(upsell.start_date, upsell.end_date, context.now)
        and within_days(upsell.active_days, context.now)
        and within_time_slots(upsell.active_time_slots, context.now)
    )


def _cart_value_over(reference: str, cart_total) -> bool:
    try:
        threshold = Decimal(str(reference).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        logger.debug("Malformed cart_value_over threshold %r", reference)
        return False
    return threshold.is_finite() and to_amount(cart_total) > threshold


def condition_met(condition: TriggerCondition, lines: Sequence[CartLine], cart_total) -> bool:
    kind = condition.type
    if kind == TriggerType.CART_VALUE_OVER:
        return _cart_value_over(condition.reference_id, cart_total)
    if kind == TriggerType.PRODUCT_IN_CART:
        return any(
            line.item_type == ItemType.PRODUCT and line.underlying_product_id == condition.reference_id
            for line in lines
        )
    if kind == TriggerType.CATEGORY_IN_CART:
        return any(line.category_id == condition.reference_id for line in lines if line.category_id)
    if kind == TriggerType.COMBO_IN_CART:
        return any(line.item_type == ItemType.COMBO and line.product_id == condition.reference_id for line in lines)
    # Cart lines carry no product tags.
    return False


def is_triggered(upsell: Upsell, lines: Sequence[CartLine], cart_total) -> bool:
    return any(condition_met(c, lines, cart_total) for c in upsell.trigger_conditions or ())


def products_in_cart(lines: Iterable[CartLine]) -> set:
    return {line.underlying_product_id for line in lines if line.item_type == ItemType.PRODUCT}


def suppress_in_cart(product_ids: Iterable[str], lines: Sequence[CartLine]) -> Tuple[str, ...]:
    in_cart = products_in_cart(lines)
    seen = []
    for pid in product_ids:
        if pid not in in_cart and pid not in seen:
            seen.append(pid)
    return tuple(seen)


def select_upsell(
    upsells: Sequence[Upsell],
    lines: Sequence[CartLine],
    cart_total,
    context: PricingContext,
    products_in_categories: Callable[[Sequence[str]], List[str]],
    live_products: Optional[Callable[[Sequence[str]], List[str]]] = None,
) -> Optional[UpsellMatch]:
    """First active, triggered upsell that still has something new to offer.

    ``live_products`` narrows the offered ids to those still sellable; an
    upsell left with nothing falls through to the next one.
    """
    for upsell in upsells:
        if not is_upsell_active(upsell, context) or not is_triggered(upsell, lines, cart_total):
            continue
        if upsell.offer_type == OfferType.PRODUCT:
            offered = list(upsell.offer_product_ids or ())
        else:
            offered = list(products_in_categories(upsell.offer_category_ids)) if upsell.offer_category_ids else []
        remaining = suppress_in_cart(offered, lines)
        if remaining and live_products is not None:
            live = set(live_products(remaining))
            remaining = tuple(pid for pid in remaining if pid in live)
        if remaining:
            return UpsellMatch(upsell=upsell, product_ids=remaining)
    return None


def upsell_unit_price(upsell: Upsell, original_price) -> Decimal:
    base = to_amount(original_price)
    if upsell.discount_method is None:
        return base
    return base - amount_off(upsell.discount_method, base, upsell.discount_value)


def build_upsell_line(
    upsell: Upsell,
    line_id: str,
    product_id: str,
    base_price,
    quantity: int = 1,
    category_id: Optional[str] = None,
    name: str = "",
    toppings: Tuple[Topping, ...] = (),
) -> CartLine:
    """Cart line for an accepted upsell; locked whenever the upsell discounts it."""
    base = to_amount(base_price)
    price = upsell_unit_price(upsell, base)
    return CartLine(
        line_id=line_id,
        product_id=product_id,
        base_price=base,
        price=price,
        quantity=quantity,
        toppings=tuple(toppings),
        item_type=ItemType.PRODUCT,
        category_id=category_id,
        name=name,
        discount_label=upsell.upsell_name if price < base else None,
    )
