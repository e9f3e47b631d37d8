import logging
from typing import Optional

from app.pricing.eligibility import within_dates, within_days, within_time_slots
from app.pricing.types import PricingContext
from app.services.discount_catalog import day_names, time_slots_from
from app.services.errors import InvalidVoucher, NotFound
from app.utils.db import lock_row
from models import db
from models.discount import Discount, VoucherRedemption
from models.order import Order

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def find_voucher(brand_id: str, code: str) -> Optional[Discount]:
    return Discount.query.filter_by(brand_id=brand_id, code=normalize_code(code)).first()


def voucher_applies(row: Discount, context: PricingContext) -> bool:
    """Location, order type and schedule gate for a voucher."""
    if row.location_ids and context.location_id not in row.location_ids:
        return False
    if row.order_types and context.delivery_type.value not in row.order_types:
        return False
    return (
        within_dates(row.start_date, row.end_date, context.now)
        and within_days(day_names(row.active_days), context.now)
        and within_time_slots(time_slots_from(row.active_time_slots), context.now)
    )


def _limit_reached(row: Discount) -> bool:
    return row.usage_limit is not None and (row.used_count or 0) >= row.usage_limit


def check_voucher(brand_id: str, code: str, context: PricingContext, customer_email: str = None) -> Discount:
    """Return the voucher for ``code`` or raise with the reason it can't be used.

    Per-customer rules only run when the customer is known, i.e. at checkout.
    """
    row = find_voucher(brand_id, code)
    if row is None:
        raise NotFound("Voucher code not found")
    if not row.is_active:
        raise InvalidVoucher("Voucher is not active")
    if not voucher_applies(row, context):
        raise InvalidVoucher("Voucher is not valid for this order")
    if _limit_reached(row):
        raise InvalidVoucher("Voucher usage limit reached")
    if customer_email:
        email = customer_email.strip().lower()
        if row.per_customer_limit is not None:
            used = VoucherRedemption.query.filter_by(discount_id=row.id, customer_email=email).count()
            if used >= row.per_customer_limit:
                raise InvalidVoucher("Voucher already used")
        if row.first_time_customer_only:
            previous = Order.query.filter_by(brand_id=brand_id, customer_email=email).first()
            if previous is not None:
                raise InvalidVoucher("Voucher is only for first-time customers")
    return row


def redeem_voucher(voucher_id: str, order_id: str, customer_email: str = None) -> int:
    """Count one use of a voucher. Does NOT commit; caller owns the transaction."""
    row = lock_row(Discount, id=voucher_id)
    if row is None:
        raise NotFound("Voucher code not found")
    if _limit_reached(row):
        raise InvalidVoucher("Voucher usage limit reached")
    row.used_count = (row.used_count or 0) + 1
    db.session.add(
        VoucherRedemption(
            discount_id=row.id,
            order_id=order_id,
            customer_email=customer_email.strip().lower() if customer_email else None,
        )
    )
    logger.info("Voucher %s redeemed on order %s (%d uses)", row.code, order_id, row.used_count)
    return row.used_count
