import logging
from typing import Optional

from app.metrics import UPSELL_VIEWS
from app.pricing import price_cart
from app.pricing.money import to_display
from app.pricing.upsells import select_upsell, upsell_unit_price
from app.services.discount_catalog import (
    category_products,
    live_products,
    load_standard_discounts,
    load_upsells,
)
from app.services.errors import NotFound
from app.services.pricing_service import build_cart_lines, build_context, get_storefront
from app.utils.db import lock_row, transactional
from models.catalog import Product
from models.upsell import Upsell

logger = logging.getLogger(__name__)


def match_upsell(req, now=None) -> Optional[dict]:
    """Pick the upsell to show for a cart and record the view."""
    brand, location = get_storefront(req.brand_id, req.location_id)
    context = build_context(brand.id, location.id, req.delivery_type, req.pickup_time, now=now)
    lines = build_cart_lines(brand.id, context, req.lines)
    cart_total = price_cart(lines, load_standard_discounts(brand.id), context=context).cart_total

    match = select_upsell(
        load_upsells(brand.id), lines, cart_total, context,
        category_products(brand.id), live_products(brand.id),
    )
    if match is None:
        return None

    rows = Product.query.filter(Product.id.in_(match.product_ids)).all()
    by_id = {p.id: p for p in rows}
    offers = []
    for pid in match.product_ids:
        product = by_id.get(pid)
        if product is None or not product.is_active:
            continue
        base = product.price_for(context.delivery_type.value)
        offers.append({
            "product_id": product.id,
            "name": product.name,
            "base_price": to_display(base),
            "offer_price": to_display(upsell_unit_price(match.upsell, base)),
        })
    if not offers:
        return None

    _record_view(match.upsell.id)
    upsell = match.upsell
    return {
        "upsell_id": upsell.id,
        "upsell_name": upsell.upsell_name,
        "discount_type": upsell.discount_method.value if upsell.discount_method else "none",
        "discount_value": to_display(upsell.discount_value),
        "products": offers,
    }


def _record_view(upsell_id: str) -> None:
    from app.tasks.upsells import record_upsell_view
    try:
        record_upsell_view.delay(upsell_id)
    except Exception:
        # Counting views is best effort; the offer is still shown.
        logger.warning("Could not record view for upsell %s", upsell_id, exc_info=True)


def _bump(upsell_id: str, counter: str) -> int:
    with transactional(f"Failed to update upsell {counter}"):
        row = lock_row(Upsell, id=upsell_id)
        if row is None:
            raise NotFound("Upsell not found")
        value = (getattr(row, counter) or 0) + 1
        setattr(row, counter, value)
    return value


def increment_views(upsell_id: str) -> int:
    views = _bump(upsell_id, "views")
    UPSELL_VIEWS.inc()
    return views


def record_conversion(upsell_id: str) -> int:
    conversions = _bump(upsell_id, "conversions")
    logger.info("Upsell %s converted (%d total)", upsell_id, conversions)
    return conversions
