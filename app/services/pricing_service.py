"""Price storefront carts against the live catalog."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

from flask import current_app

from app.metrics import record_pricing
from app.pricing import CheckoutTotals, FeeSchedule, PricingContext, PricingResult, checkout_totals, price_cart
from app.pricing.money import to_amount
from app.pricing.types import CartLine, ItemType, OrderType, Topping, strip_offer_suffix
from app.pricing.upsells import build_upsell_line, is_upsell_active
from app.services.discount_catalog import load_standard_discounts, to_upsell, to_voucher
from app.services.errors import InvalidCart, InvalidVoucher, NotFound
from app.services.vouchers import check_voucher
from app.telemetry import get_tracer
from models import db
from models.brand import Brand, Location
from models.catalog import Combo, Product
from models.discount import Discount
from models.upsell import Upsell

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def pricing_timezone() -> ZoneInfo:
    return ZoneInfo(current_app.config["PRICING_TIMEZONE"])


def build_context(
    brand_id: str,
    location_id: str,
    delivery_type: OrderType,
    pickup_time: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> PricingContext:
    """Pin the pricing moment to the storefront's timezone."""
    tz = pricing_timezone()
    now = now or datetime.now(tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    if pickup_time is not None:
        pickup_time = pickup_time.replace(tzinfo=tz) if pickup_time.tzinfo is None else pickup_time.astimezone(tz)
    return PricingContext(
        brand_id=brand_id,
        location_id=location_id,
        delivery_type=OrderType(delivery_type),
        now=now.astimezone(tz),
        pickup_time=pickup_time,
    )


def get_storefront(brand_id: str, location_id: str):
    brand = db.session.get(Brand, brand_id)
    location = Location.query.filter_by(id=location_id, brand_id=brand_id).first()
    if brand is None or location is None or not location.is_active:
        raise NotFound("Storefront not found")
    return brand, location


def fee_schedule(brand: Brand, location: Location) -> FeeSchedule:
    vat = brand.vat_percentage
    if vat is None:
        vat = current_app.config["DEFAULT_VAT_PERCENTAGE"]
    return FeeSchedule(
        delivery_fee=to_amount(location.delivery_fee),
        bag_fee=to_amount(brand.bag_fee),
        admin_fee=to_amount(brand.admin_fee),
        admin_fee_type=brand.admin_fee_type,
        vat_percentage=to_amount(vat),
    )


def _toppings(line_in) -> tuple:
    return tuple(Topping(name=t.name, price=to_amount(t.price)) for t in line_in.toppings)


def _offers_product(upsell_row: Upsell, product: Product) -> bool:
    if upsell_row.offer_type == "product":
        return product.id in (upsell_row.offer_product_ids or [])
    return bool(product.category_id) and product.category_id in (upsell_row.offer_category_ids or [])


def build_cart_lines(brand_id: str, context: PricingContext, lines_in: Sequence) -> List[CartLine]:
    """Resolve request lines to catalog prices.

    Client prices are never trusted; an upsell line is only discounted when
    the upsell is still live and actually offers that product.
    """
    delivery_type = context.delivery_type.value
    product_ids = {strip_offer_suffix(l.product_id) for l in lines_in if l.item_type == ItemType.PRODUCT}
    combo_ids = {l.product_id for l in lines_in if l.item_type == ItemType.COMBO}
    upsell_ids = {l.upsell_id for l in lines_in if l.upsell_id}

    products: Dict[str, Product] = {}
    if product_ids:
        rows = Product.query.filter(Product.brand_id == brand_id, Product.id.in_(product_ids)).all()
        products = {p.id: p for p in rows if p.is_active}
    combos: Dict[str, Combo] = {}
    if combo_ids:
        rows = Combo.query.filter(Combo.brand_id == brand_id, Combo.id.in_(combo_ids)).all()
        combos = {c.id: c for c in rows if c.is_active}
    upsells: Dict[str, Upsell] = {}
    if upsell_ids:
        rows = Upsell.query.filter(Upsell.brand_id == brand_id, Upsell.id.in_(upsell_ids)).all()
        upsells = {u.id: u for u in rows}

    lines = []
    for line_in in lines_in:
        toppings = _toppings(line_in)
        if line_in.item_type == ItemType.COMBO:
            combo = combos.get(line_in.product_id)
            if combo is None:
                raise InvalidCart(f"Unknown combo {line_in.product_id}")
            price = to_amount(combo.price_for(delivery_type))
            lines.append(CartLine(
                line_id=line_in.line_id,
                product_id=combo.id,
                base_price=price,
                price=price,
                quantity=line_in.quantity,
                toppings=toppings,
                item_type=ItemType.COMBO,
                name=combo.name,
            ))
            continue

        product = products.get(strip_offer_suffix(line_in.product_id))
        if product is None:
            raise InvalidCart(f"Unknown product {line_in.product_id}")
        base = to_amount(product.price_for(delivery_type))

        upsell_row = upsells.get(line_in.upsell_id) if line_in.upsell_id else None
        if line_in.upsell_id and upsell_row is None:
            raise InvalidCart(f"Unknown upsell {line_in.upsell_id}")
        upsell = to_upsell(upsell_row) if upsell_row is not None else None
        if upsell is not None and _offers_product(upsell_row, product) and is_upsell_active(upsell, context):
            lines.append(build_upsell_line(
                upsell,
                line_id=line_in.line_id,
                product_id=line_in.product_id,
                base_price=base,
                quantity=line_in.quantity,
                category_id=product.category_id,
                name=product.name,
                toppings=toppings,
            ))
            continue
        if upsell is not None:
            logger.info("Upsell %s no longer applies to %s; pricing at base", upsell.id, product.id)

        lines.append(CartLine(
            line_id=line_in.line_id,
            product_id=line_in.product_id,
            base_price=base,
            price=base,
            quantity=line_in.quantity,
            toppings=toppings,
            category_id=product.category_id,
            name=product.name,
        ))
    return lines


@dataclass
class Quote:
    context: PricingContext
    result: PricingResult
    totals: CheckoutTotals
    voucher: Optional[Discount] = None
    voucher_error: Optional[str] = None
    currency: str = "dkk"

    def to_dict(self):
        data = self.result.to_dict()
        data.update(self.totals.to_dict())
        data["currency"] = self.currency
        data["voucher"] = {
            "code": self.voucher.code if self.voucher is not None else None,
            "applied": self.result.voucher_applied,
            "error": self.voucher_error,
        }
        return data


def price_request(req, now: Optional[datetime] = None, customer_email: str = None, strict_voucher: bool = False) -> Quote:
    """Price a quote or checkout request.

    An unusable voucher is reported on the quote, or raised when
    ``strict_voucher`` is set (checkout).
    """
    brand, location = get_storefront(req.brand_id, req.location_id)
    context = build_context(brand.id, location.id, req.delivery_type, req.pickup_time, now=now)
    lines = build_cart_lines(brand.id, context, req.lines)
    discounts = load_standard_discounts(brand.id)

    voucher_row, voucher_error = None, None
    if req.voucher_code:
        try:
            voucher_row = check_voucher(brand.id, req.voucher_code, context, customer_email=customer_email)
        except (InvalidVoucher, NotFound) as e:
            if strict_voucher:
                raise InvalidVoucher(e.message)
            voucher_error = e.message

    with tracer.start_as_current_span("pricing.price_cart") as span:
        span.set_attribute("pricing.brand_id", brand.id)
        span.set_attribute("pricing.location_id", location.id)
        span.set_attribute("pricing.delivery_type", context.delivery_type.value)
        span.set_attribute("pricing.lines", len(lines))
        result = price_cart(
            lines,
            discounts,
            voucher=to_voucher(voucher_row) if voucher_row is not None else None,
            context=context,
        )
        span.set_attribute("pricing.total_discount", str(result.total_discount))

    totals = checkout_totals(
        result, fee_schedule(brand, location), context.delivery_type, include_bag_fee=req.include_bag_fee
    )
    record_pricing(result, context.delivery_type)
    logger.info(
        "Priced cart brand=%s location=%s subtotal=%s discount=%s total=%s",
        brand.id, location.id, result.subtotal, result.total_discount, totals.checkout_total,
    )
    return Quote(
        context=context,
        result=result,
        totals=totals,
        voucher=voucher_row,
        voucher_error=voucher_error,
        currency=brand.currency or current_app.config["CURRENCY"],
    )

