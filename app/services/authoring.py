"""Copy validated back-office payloads onto model rows."""
from decimal import Decimal
from zoneinfo import ZoneInfo

from flask import current_app

from app.services.discount_catalog import naive_local

DATE_FIELDS = ("start_date", "end_date")


def apply_request(row, data, exclude=()):
    """Set every field of ``data`` on ``row``.

    Enums become their string values, money stays Decimal and datetimes are
    stored as naive wall-clock time in the pricing timezone.
    """
    tz = ZoneInfo(current_app.config["PRICING_TIMEZONE"])
    skip = set(exclude)
    plain = data.model_dump(mode="json", exclude=skip)
    for key, value in plain.items():
        raw = getattr(data, key)
        if isinstance(raw, Decimal):
            value = raw
        elif key in DATE_FIELDS:
            value = naive_local(raw, tz)
        setattr(row, key, value)
    return row
