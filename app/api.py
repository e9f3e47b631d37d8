from app.routes import storefront_bp, superadmin_bp
import logging


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(storefront_bp)
    app.register_blueprint(superadmin_bp)
    logging.getLogger(__name__).debug("API v1 blueprints registered")
