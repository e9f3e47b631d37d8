from contextlib import contextmanager
import logging
from models import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(message="DB transaction failed"):
    """Context manager to wrap a database transaction."""
    try:
        yield
        db.session.commit()
    except Exception as e:
        logger.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise


def lock_row(model, **filters):
    """Fetch one row with SELECT ... FOR UPDATE for a read-modify-write."""
    return model.query.filter_by(**filters).with_for_update(of=model).first()
