from typing import Literal, Optional

from pydantic import BaseModel, constr

QaStatus = Literal["Draft", "Ready", "Deprecated"]
QaContext = Literal["public", "superadmin"]


class QaTestcaseRequest(BaseModel):
    title: constr(strip_whitespace=True, min_length=1, max_length=200)
    acceptance_criteria: constr(strip_whitespace=True, min_length=1)
    status: QaStatus = "Draft"
    context: QaContext = "public"
    steps_template: Optional[str] = None
    start_path: Optional[constr(max_length=255)] = None
    proof_url: Optional[constr(max_length=500)] = None


class QaTestcaseUpdate(BaseModel):
    title: Optional[constr(strip_whitespace=True, min_length=1, max_length=200)] = None
    acceptance_criteria: Optional[constr(strip_whitespace=True, min_length=1)] = None
    status: Optional[QaStatus] = None
    context: Optional[QaContext] = None
    steps_template: Optional[str] = None
    start_path: Optional[constr(max_length=255)] = None
    proof_url: Optional[constr(max_length=500)] = None
