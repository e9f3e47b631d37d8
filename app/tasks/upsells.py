import logging
from celery import shared_task
from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def _bump_views(upsell_id: str) -> int:
    from app.services.upsell_service import increment_views
    return increment_views(upsell_id)


@shared_task(bind=True, max_retries=3, default_retry_delay=10)
def record_upsell_view(self, upsell_id: str) -> int:
    """Count one impression of an upsell offer."""
    try:
        if has_app_context():
            return _bump_views(upsell_id)
        from app import create_app
        with create_app().app_context():
            return _bump_views(upsell_id)
    except SQLAlchemyError as exc:
        logger.error("Recording view for upsell %s failed: %s", upsell_id, exc)
        if has_app_context() and current_app.config.get("TESTING"):
            raise
        raise self.retry(exc=exc)
