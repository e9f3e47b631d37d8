from flask import Blueprint
from app.version import API_PREFIX

# Public: shoppers are anonymous until checkout.
storefront_bp = Blueprint("storefront", __name__, url_prefix=f"{API_PREFIX}/storefront")

from . import pricing  # noqa: E402
from . import upsells  # noqa: E402
from . import checkout  # noqa: E402
