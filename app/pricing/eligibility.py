"""Time, location and order-type gate for standard discounts."""
import logging
import re
from datetime import datetime, time
from typing import Iterable, List, Optional, Sequence

from .types import PricingContext, StandardDiscount, TimeSlot, TimeSlotValidation

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
CLOCK = re.compile(r"\d{2}:\d{2}")


def weekday_name(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def parse_clock(value) -> Optional[time]:
    """Parse ``HH:MM``. Returns None for anything else."""
    if not isinstance(value, str) or not CLOCK.fullmatch(value.strip()):
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        return None


def in_time_slot(slot: TimeSlot, moment: datetime) -> bool:
    start = parse_clock(getattr(slot, "start", None))
    end = parse_clock(getattr(slot, "end", None))
    if start is None or end is None:
        logger.debug("Ignoring malformed time slot %r", slot)
        return False
    current = moment.time().replace(second=0, microsecond=0)
    return start <= current <= end


def within_time_slots(slots: Sequence[TimeSlot], moment: datetime) -> bool:
    if not slots:
        return True
    return any(in_time_slot(slot, moment) for slot in slots)


def within_days(days: Sequence[str], moment: datetime) -> bool:
    if not days:
        return True
    return weekday_name(moment) in {str(d).strip().lower() for d in days}


def _align(bound: datetime, moment: datetime) -> datetime:
    if bound.tzinfo is None and moment.tzinfo is not None:
        return bound.replace(tzinfo=moment.tzinfo)
    if bound.tzinfo is not None and moment.tzinfo is None:
        return bound.astimezone(None).replace(tzinfo=None)
    return bound


def within_dates(start: Optional[datetime], end: Optional[datetime], moment: datetime) -> bool:
    if start is not None and moment < _align(start, moment):
        return False
    if end is not None and moment > _align(end, moment):
        return False
    return True


def evaluation_moment(discount: StandardDiscount, context: PricingContext) -> datetime:
    if discount.time_slot_validation == TimeSlotValidation.PICKUP_TIME and context.pickup_time:
        return context.pickup_time
    return context.now


def is_eligible(discount: StandardDiscount, context: PricingContext) -> bool:
    if not discount.is_active:
        return False
    if discount.location_ids and context.location_id not in discount.location_ids:
        return False
    if context.delivery_type not in (discount.order_types or ()):
        return False
    if not within_dates(discount.start_date, discount.end_date, context.now):
        return False
    moment = evaluation_moment(discount, context)
    if not within_days(discount.active_days, moment):
        return False
    return within_time_slots(discount.active_time_slots, moment)


def filter_eligible(discounts: Iterable[StandardDiscount], context: PricingContext) -> List[StandardDiscount]:
    eligible = []
    for discount in discounts:
        if is_eligible(discount, context):
            eligible.append(discount)
        else:
            logger.debug("Discount %s not eligible for %s", discount.id, context.location_id)
    return eligible
