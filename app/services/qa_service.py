import logging

from flask import current_app

from app.services.errors import NotFound
from app.utils.db import lock_row
from models import db
from models.qa import QaSequence, QaTestcase

logger = logging.getLogger(__name__)

SEQUENCE_ID = "qa_testcases"


def format_code(prefix: str, number: int) -> str:
    return f"{prefix}-{number:03d}"


def allocate_code() -> str:
    """Take the next QA code from the sequence row. Does NOT commit."""
    seq = lock_row(QaSequence, id=SEQUENCE_ID)
    if seq is None:
        seq = QaSequence(id=SEQUENCE_ID, next_number=1)
        db.session.add(seq)
        db.session.flush()
    number = seq.next_number
    seq.next_number = number + 1
    return format_code(current_app.config["QA_CODE_PREFIX"], number)


def list_testcases(status=None):
    query = QaTestcase.query
    if status:
        query = query.filter_by(status=status)
    return query.order_by(QaTestcase.code).all()


def get_testcase(code: str) -> QaTestcase:
    row = db.session.get(QaTestcase, code.upper())
    if row is None:
        raise NotFound("Test case not found")
    return row


def create_testcase(data) -> QaTestcase:
    row = QaTestcase(code=allocate_code(), **data.model_dump())
    db.session.add(row)
    logger.info("QA test case %s created", row.code)
    return row


def update_testcase(code: str, data) -> QaTestcase:
    row = get_testcase(code)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    return row


def delete_testcase(code: str) -> None:
    db.session.delete(get_testcase(code))
