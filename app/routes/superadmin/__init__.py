from flask import Blueprint
from app.version import API_PREFIX
from app.utils import auth_required

superadmin_bp = Blueprint("superadmin", __name__, url_prefix=f"{API_PREFIX}/superadmin")

SUPERADMIN = "superadmin"


@superadmin_bp.before_request
@auth_required
def _enforce_authentication():
    """Every back-office route needs a valid access token; roles are checked per route."""
    return None

from . import discounts  # noqa: E402
from . import vouchers  # noqa: E402
from . import upsells  # noqa: E402
from . import qa  # noqa: E402
from . import validation  # noqa: E402
