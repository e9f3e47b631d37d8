from flask import current_app, request
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.schemas.pricing import CheckoutRequest
from app.services.checkout_service import place_order
from app.utils import ok, transactional, validate_schema
from . import storefront_bp


@storefront_bp.route("/checkout", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["CHECKOUT_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many checkouts from this IP",
)
@validate_schema(CheckoutRequest)
def checkout():
    """Reprice the cart and create the order with its payment snapshot."""
    with transactional("Checkout failed"):
        order = place_order(request.validated_data)
    return ok(order.to_dict(), message="Order created", status=201)
