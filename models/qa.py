from datetime import datetime

from models import db


class QaSequence(db.Model):
    """Single-row counter for QA test case codes."""
    __tablename__ = "qa_sequence"

    id = db.Column(db.String(20), primary_key=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)


class QaTestcase(db.Model):
    __tablename__ = "qa_testcase"

    code = db.Column(db.String(20), primary_key=True)                 # e.g. OFQ-001
    title = db.Column(db.String(200), nullable=False)
    acceptance_criteria = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), default="Draft")                # Draft, Ready, Deprecated
    context = db.Column(db.String(20), default="public")              # public or superadmin
    steps_template = db.Column(db.Text, nullable=True)
    start_path = db.Column(db.String(255), nullable=True)
    proof_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "code": self.code,
            "title": self.title,
            "acceptance_criteria": self.acceptance_criteria,
            "status": self.status,
            "context": self.context,
            "steps_template": self.steps_template,
            "start_path": self.start_path,
            "proof_url": self.proof_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
