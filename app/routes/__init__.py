from .storefront import storefront_bp
from .superadmin import superadmin_bp


__all__ = [
    'storefront_bp',
    'superadmin_bp',
]
