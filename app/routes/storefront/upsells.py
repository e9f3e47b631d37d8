from flask import current_app, request
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.schemas.pricing import UpsellMatchRequest
from app.services.upsell_service import match_upsell, record_conversion
from app.utils import ok, validate_schema
from . import storefront_bp


@storefront_bp.route("/upsells/match", methods=["POST"])
@limiter.limit(lambda: current_app.config["QUOTE_LIMIT_PER_IP"], key_func=get_remote_address)
@validate_schema(UpsellMatchRequest)
def upsell_match():
    """Return the upsell offer for this cart, or null."""
    offer = match_upsell(request.validated_data)
    return ok({"offer": offer})


@storefront_bp.route("/upsells/<upsell_id>/convert", methods=["POST"])
@limiter.limit(lambda: current_app.config["QUOTE_LIMIT_PER_IP"], key_func=get_remote_address)
def upsell_convert(upsell_id):
    conversions = record_conversion(upsell_id)
    return ok({"upsell_id": upsell_id, "conversions": conversions})
