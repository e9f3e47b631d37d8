from flask import request
from app.schemas.discounts import VoucherRequest
from app.services.authoring import apply_request
from app.services.vouchers import find_voucher
from app.utils import error, ok, role_required, transactional, validate_schema
from models import db
from models.discount import Discount
from . import superadmin_bp, SUPERADMIN


@superadmin_bp.route("/vouchers", methods=["GET"])
@role_required(SUPERADMIN)
def list_vouchers():
    query = Discount.query
    if request.args.get("brand_id"):
        query = query.filter_by(brand_id=request.args["brand_id"])
    return ok([v.to_dict() for v in query.order_by(Discount.code).all()])


@superadmin_bp.route("/vouchers", methods=["POST"])
@role_required(SUPERADMIN)
@validate_schema(VoucherRequest)
def create_voucher():
    data = request.validated_data
    if find_voucher(data.brand_id, data.code) is not None:
        return error("Voucher code already exists", status=409)
    row = apply_request(Discount(), data)
    row.used_count = 0
    with transactional("Failed to create voucher"):
        db.session.add(row)
    return ok(row.to_dict(), message="Voucher created", status=201)


@superadmin_bp.route("/vouchers/<voucher_id>", methods=["DELETE"])
@role_required(SUPERADMIN)
def delete_voucher(voucher_id):
    row = db.get_or_404(Discount, voucher_id, description="Voucher not found")
    if row.used_count:
        # Redeemed codes stay for the order history; switch them off instead.
        with transactional("Failed to deactivate voucher"):
            row.is_active = False
        return ok(row.to_dict(), message="Voucher deactivated")
    with transactional("Failed to delete voucher"):
        db.session.delete(row)
    return ok(message="Voucher deleted")
