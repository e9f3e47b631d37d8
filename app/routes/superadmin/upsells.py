from flask import request
from app.schemas.upsells import UpsellRequest
from app.services.authoring import apply_request
from app.utils import ok, role_required, transactional, validate_schema
from models import db
from models.upsell import Upsell
from . import superadmin_bp, SUPERADMIN


@superadmin_bp.route("/upsells", methods=["GET"])
@role_required(SUPERADMIN)
def list_upsells():
    query = Upsell.query
    if request.args.get("brand_id"):
        query = query.filter_by(brand_id=request.args["brand_id"])
    return ok([u.to_dict() for u in query.order_by(Upsell.created_at.desc()).all()])


@superadmin_bp.route("/upsells", methods=["POST"])
@role_required(SUPERADMIN)
@validate_schema(UpsellRequest)
def create_upsell():
    data = request.validated_data
    row = apply_request(Upsell(), data)
    row.views = 0
    row.conversions = 0
    with transactional("Failed to create upsell"):
        db.session.add(row)
    return ok(row.to_dict(), message="Upsell created", status=201)


@superadmin_bp.route("/upsells/<upsell_id>", methods=["GET"])
@role_required(SUPERADMIN)
def get_upsell(upsell_id):
    return ok(db.get_or_404(Upsell, upsell_id, description="Upsell not found").to_dict())


@superadmin_bp.route("/upsells/<upsell_id>", methods=["DELETE"])
@role_required(SUPERADMIN)
def delete_upsell(upsell_id):
    row = db.get_or_404(Upsell, upsell_id, description="Upsell not found")
    with transactional("Failed to delete upsell"):
        db.session.delete(row)
    return ok(message="Upsell deleted")
