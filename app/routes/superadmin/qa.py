from flask import request
from app.schemas.qa import QaTestcaseRequest, QaTestcaseUpdate
from app.services import qa_service
from app.utils import ok, role_required, transactional, validate_schema
from . import superadmin_bp, SUPERADMIN

QA_ROLES = [SUPERADMIN, "qa:manage_qa"]


@superadmin_bp.route("/qa", methods=["GET"])
@role_required(QA_ROLES)
def list_qa_testcases():
    rows = qa_service.list_testcases(status=request.args.get("status"))
    return ok([r.to_dict() for r in rows])


@superadmin_bp.route("/qa", methods=["POST"])
@role_required(QA_ROLES)
@validate_schema(QaTestcaseRequest)
def create_qa_testcase():
    with transactional("Failed to create QA test case"):
        row = qa_service.create_testcase(request.validated_data)
    return ok(row.to_dict(), message="Test case created", status=201)


@superadmin_bp.route("/qa/<code>", methods=["GET"])
@role_required(QA_ROLES)
def get_qa_testcase(code):
    return ok(qa_service.get_testcase(code).to_dict())


@superadmin_bp.route("/qa/<code>", methods=["PUT"])
@role_required(QA_ROLES)
@validate_schema(QaTestcaseUpdate)
def update_qa_testcase(code):
    with transactional("Failed to update QA test case"):
        row = qa_service.update_testcase(code, request.validated_data)
    return ok(row.to_dict())


@superadmin_bp.route("/qa/<code>", methods=["DELETE"])
@role_required(QA_ROLES)
def delete_qa_testcase(code):
    with transactional("Failed to delete QA test case"):
        qa_service.delete_testcase(code)
    return ok(message="Test case deleted")
