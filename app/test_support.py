from flask import Blueprint, request
from app.utils import ok
from app.utils.jwt import create_access_token
import logging


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__auth/login_stub", methods=["POST"])
def __login_stub():
    j = request.get_json(silent=True) or {}
    subject = j.get("email", "admin@example.com")
    role = j.get("role", "superadmin")
    return ok({"access": create_access_token(subject, role)})
