from flask import current_app, request
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.pricing.types import OrderType
from app.schemas.pricing import QuoteRequest
from app.services.pricing_service import build_context, get_storefront, price_request
from app.services.vouchers import check_voucher
from app.utils import error, ok, validate_schema
from . import storefront_bp


def _quote_limit():
    return current_app.config["QUOTE_LIMIT_PER_IP"]


@storefront_bp.route("/pricing/quote", methods=["POST"])
@limiter.limit(_quote_limit, key_func=get_remote_address, error_message="Too many pricing requests from this IP")
@validate_schema(QuoteRequest)
def quote():
    """Price a cart with live discounts, an optional voucher and fees."""
    result = price_request(request.validated_data)
    return ok(result.to_dict())


@storefront_bp.route("/vouchers/<code>", methods=["GET"])
@limiter.limit(_quote_limit, key_func=get_remote_address, error_message="Too many voucher checks from this IP")
def voucher_lookup(code):
    brand_id = request.args.get("brand_id")
    location_id = request.args.get("location_id")
    if not brand_id or not location_id:
        return error("brand_id and location_id are required", status=400)
    try:
        delivery_type = OrderType(request.args.get("delivery_type", OrderType.PICKUP.value))
    except ValueError:
        return error("delivery_type must be pickup or delivery", status=400)
    brand, location = get_storefront(brand_id, location_id)
    voucher = check_voucher(brand.id, code, build_context(brand.id, location.id, delivery_type))
    return ok({
        "code": voucher.code,
        "discount_method": voucher.discount_method,
        "discount_value": float(voucher.discount_value or 0),
        "min_order_value": float(voucher.min_order_value or 0),
    })
