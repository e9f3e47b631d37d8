from app.services.discount_validation import PASS, run_discount_validation
from app.utils import ok, role_required
from . import superadmin_bp, SUPERADMIN


@superadmin_bp.route("/discount-validation", methods=["GET"])
@role_required([SUPERADMIN, "qa:run_validation"])
def discount_validation():
    results = run_discount_validation()
    passed = sum(1 for r in results if r.status == PASS)
    return ok({
        "passed": passed,
        "failed": len(results) - passed,
        "results": [r.to_dict() for r in results],
    })
