import logging

from app.pricing.money import to_display
from app.services.pricing_service import price_request
from app.services.vouchers import redeem_voucher
from models import db
from models.order import Order, OrderItem

logger = logging.getLogger(__name__)


def payment_snapshot(quote) -> dict:
    """What the payment step charges, frozen at checkout time."""
    data = quote.to_dict()
    data["priced_at"] = quote.context.now.isoformat()
    return data


def place_order(req, now=None) -> Order:
    """Reprice the cart server-side and create the order.

    Does NOT commit; caller is responsible for commit/rollback.
    """
    email = req.customer.email.strip().lower()
    quote = price_request(req, now=now, customer_email=email, strict_voucher=True)
    result, totals = quote.result, quote.totals

    order = Order(
        brand_id=req.brand_id,
        location_id=req.location_id,
        delivery_type=quote.context.delivery_type.value,
        pickup_time=quote.context.pickup_time.replace(tzinfo=None) if quote.context.pickup_time else None,
        customer_name=req.customer.name,
        customer_email=email,
        customer_phone=req.customer.phone,
        delivery_address=req.delivery_address.model_dump() if req.delivery_address else None,
        voucher_code=quote.voucher.code if quote.voucher is not None and result.voucher_applied else None,
        subtotal=result.subtotal,
        total_discount=result.total_discount,
        checkout_total=totals.checkout_total,
        payment_details=payment_snapshot(quote),
    )
    db.session.add(order)
    db.session.flush()

    for line in result.lines:
        db.session.add(
            OrderItem(
                order_id=order.id,
                line_id=line.line_id,
                product_id=line.product_id,
                item_type=line.item_type.value,
                name=line.name,
                quantity=line.qty,
                base_price=line.base_price,
                unit_price=line.price,
                toppings=[{"name": t.name, "price": to_display(t.price)} for t in line.toppings],
                discount_label=line.discount_label,
                item_discount=result.item_discounts.get(line.line_id, 0),
            )
        )

    if quote.voucher is not None and result.voucher_applied:
        redeem_voucher(quote.voucher.id, order.id, email)

    logger.info({"event": "order_created", "order_id": order.id, "email": email, "total": str(totals.checkout_total)})
    return order
