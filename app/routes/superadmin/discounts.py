from flask import request
from app.schemas.common import StatusRequest
from app.schemas.discounts import StandardDiscountRequest
from app.services.authoring import apply_request
from app.utils import error, ok, role_required, transactional, validate_schema
from models import db
from models.discount import StandardDiscount
from . import superadmin_bp, SUPERADMIN


def _get_or_404(discount_id):
    return db.get_or_404(StandardDiscount, discount_id, description="Standard discount not found")


@superadmin_bp.route("/standard-discounts", methods=["GET"])
@role_required(SUPERADMIN)
def list_standard_discounts():
    query = StandardDiscount.query
    if request.args.get("brand_id"):
        query = query.filter_by(brand_id=request.args["brand_id"])
    rows = query.order_by(StandardDiscount.created_at.desc()).all()
    return ok([r.to_dict() for r in rows])


@superadmin_bp.route("/standard-discounts", methods=["POST"])
@role_required(SUPERADMIN)
@validate_schema(StandardDiscountRequest)
def create_standard_discount():
    row = apply_request(StandardDiscount(), request.validated_data)
    with transactional("Failed to create standard discount"):
        db.session.add(row)
    return ok(row.to_dict(), message="Standard discount created", status=201)


@superadmin_bp.route("/standard-discounts/<discount_id>", methods=["GET"])
@role_required(SUPERADMIN)
def get_standard_discount(discount_id):
    return ok(_get_or_404(discount_id).to_dict())


@superadmin_bp.route("/standard-discounts/<discount_id>", methods=["PUT"])
@role_required(SUPERADMIN)
@validate_schema(StandardDiscountRequest)
def update_standard_discount(discount_id):
    row = _get_or_404(discount_id)
    if request.validated_data.brand_id != row.brand_id:
        return error("brand_id cannot be changed", status=400)
    with transactional("Failed to update standard discount"):
        apply_request(row, request.validated_data)
    return ok(row.to_dict(), message="Standard discount updated")


@superadmin_bp.route("/standard-discounts/<discount_id>/status", methods=["POST"])
@role_required(SUPERADMIN)
@validate_schema(StatusRequest)
def set_standard_discount_status(discount_id):
    row = _get_or_404(discount_id)
    with transactional("Failed to update discount status"):
        row.is_active = request.validated_data.is_active
    return ok(row.to_dict())


@superadmin_bp.route("/standard-discounts/<discount_id>", methods=["DELETE"])
@role_required(SUPERADMIN)
def delete_standard_discount(discount_id):
    row = _get_or_404(discount_id)
    with transactional("Failed to delete standard discount"):
        db.session.delete(row)
    return ok(message="Standard discount deleted")
