"""Turn stored discounts and upsells into pricing-engine values."""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from app.pricing.money import to_amount
from app.pricing.types import (
    DiscountMethod,
    DiscountType,
    OrderType,
    StandardDiscount as EngineDiscount,
    TimeSlot,
    TimeSlotValidation,
    VoucherDiscount,
)
from app.pricing.upsells import OfferType, TriggerCondition, TriggerType, Upsell as EngineUpsell
from models.catalog import Product
from models.discount import StandardDiscount
from models.upsell import Upsell

logger = logging.getLogger(__name__)


def _enum_tuple(values, enum) -> tuple:
    members = []
    for value in values or ():
        try:
            members.append(enum(value))
        except ValueError:
            logger.warning("Skipping unknown %s value %r", enum.__name__, value)
    return tuple(members)


def time_slots_from(raw) -> tuple:
    return tuple(
        TimeSlot(start=s.get("start"), end=s.get("end")) for s in raw or () if isinstance(s, dict)
    )


def day_names(raw) -> tuple:
    return tuple(str(d).strip().lower() for d in raw or ())


def naive_local(value: Optional[datetime], tz: ZoneInfo) -> Optional[datetime]:
    """Store datetimes as naive wall-clock time in the pricing timezone."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def to_standard_discount(row: StandardDiscount) -> Optional[EngineDiscount]:
    try:
        discount_type = DiscountType(row.discount_type)
        method = DiscountMethod(row.discount_method)
    except ValueError:
        logger.warning("Standard discount %s has an unknown type or method", row.id)
        return None
    try:
        validation = TimeSlotValidation(row.time_slot_validation or TimeSlotValidation.ORDER_TIME.value)
    except ValueError:
        validation = TimeSlotValidation.ORDER_TIME
    return EngineDiscount(
        id=row.id,
        discount_name=row.discount_name,
        discount_type=discount_type,
        discount_method=method,
        discount_value=to_amount(row.discount_value),
        min_order_value=to_amount(row.min_order_value),
        reference_ids=tuple(row.reference_ids or ()),
        order_types=_enum_tuple(row.order_types, OrderType),
        location_ids=tuple(row.location_ids or ()),
        active_days=day_names(row.active_days),
        active_time_slots=time_slots_from(row.active_time_slots),
        time_slot_validation=validation,
        start_date=row.start_date,
        end_date=row.end_date,
        is_active=bool(row.is_active),
        allow_stacking=bool(row.allow_stacking),
        brand_id=row.brand_id,
    )


def to_voucher(row) -> Optional[VoucherDiscount]:
    try:
        method = DiscountMethod(row.discount_method)
    except ValueError:
        logger.warning("Voucher %s has an unknown discount method", row.id)
        return None
    return VoucherDiscount(
        id=row.id,
        code=row.code,
        discount_method=method,
        discount_value=to_amount(row.discount_value),
        min_order_value=to_amount(row.min_order_value),
    )


def to_upsell(row: Upsell) -> Optional[EngineUpsell]:
    try:
        offer_type = OfferType(row.offer_type)
    except ValueError:
        logger.warning("Upsell %s has an unknown offer type", row.id)
        return None
    method = None
    if row.discount_type and row.discount_type != "none":
        try:
            method = DiscountMethod(row.discount_type)
        except ValueError:
            logger.warning("Upsell %s has an unknown discount type", row.id)
    conditions = []
    for raw in row.trigger_conditions or ():
        try:
            conditions.append(TriggerCondition(TriggerType(raw.get("type")), str(raw.get("reference_id", ""))))
        except (ValueError, AttributeError):
            logger.warning("Upsell %s has a malformed trigger %r", row.id, raw)
    return EngineUpsell(
        id=row.id,
        upsell_name=row.upsell_name,
        offer_type=offer_type,
        trigger_conditions=tuple(conditions),
        offer_product_ids=tuple(row.offer_product_ids or ()),
        offer_category_ids=tuple(row.offer_category_ids or ()),
        discount_method=method,
        discount_value=to_amount(row.discount_value),
        order_types=_enum_tuple(row.order_types, OrderType),
        location_ids=tuple(row.location_ids or ()),
        active_days=day_names(row.active_days),
        active_time_slots=time_slots_from(row.active_time_slots),
        start_date=row.start_date,
        end_date=row.end_date,
        is_active=bool(row.is_active),
    )


def load_standard_discounts(brand_id: str) -> List[EngineDiscount]:
    rows = (
        StandardDiscount.query.filter_by(brand_id=brand_id)
        .order_by(StandardDiscount.created_at, StandardDiscount.id)
        .all()
    )
    return [d for d in (to_standard_discount(r) for r in rows) if d is not None]


def load_upsells(brand_id: str) -> List[EngineUpsell]:
    rows = Upsell.query.filter_by(brand_id=brand_id).order_by(Upsell.created_at, Upsell.id).all()
    return [u for u in (to_upsell(r) for r in rows) if u is not None]


def category_products(brand_id: str) -> Callable[[Sequence[str]], List[str]]:
    """Lookup of active product ids per category, scoped to one brand."""

    def lookup(category_ids: Sequence[str]) -> List[str]:
        if not category_ids:
            return []
        rows = (
            Product.query.filter(
                Product.brand_id == brand_id,
                Product.category_id.in_(list(category_ids)),
                Product.is_active.is_(True),
            )
            .order_by(Product.name, Product.id)
            .all()
        )
        return [p.id for p in rows]

    return lookup


def live_products(brand_id: str) -> Callable[[Sequence[str]], List[str]]:
    """Filter of product ids down to the brand's active products."""

    def lookup(product_ids: Sequence[str]) -> List[str]:
        if not product_ids:
            return []
        rows = Product.query.filter(
            Product.brand_id == brand_id,
            Product.id.in_(list(product_ids)),
            Product.is_active.is_(True),
        ).all()
        return [p.id for p in rows]

    return lookup
