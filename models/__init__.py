import uuid

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()


def new_id() -> str:
    return uuid.uuid4().hex


def money_column(**kwargs):
    return db.Column(db.Numeric(10, 2), **kwargs)


# Re-export common models for convenience
from .brand import Brand, Location  # noqa: F401,E402
from .catalog import Category, Product, Combo  # noqa: F401,E402
from .discount import StandardDiscount, Discount, VoucherRedemption  # noqa: F401,E402
from .upsell import Upsell  # noqa: F401,E402
from .order import Order, OrderItem  # noqa: F401,E402
from .qa import QaSequence, QaTestcase  # noqa: F401,E402
