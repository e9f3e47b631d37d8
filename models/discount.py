from datetime import datetime

from models import db, money_column, new_id


def _iso(value):
    return value.isoformat() if value else None


class StandardDiscount(db.Model):
    """Automatic discount authored in the back office."""
    __tablename__ = "standard_discount"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False, index=True)
    discount_name = db.Column(db.String(100), nullable=False)
    discount_type = db.Column(db.String(20), nullable=False)          # product, category, cart, free_delivery
    reference_ids = db.Column(db.JSON, default=list)
    discount_method = db.Column(db.String(20), nullable=False)        # percentage or fixed_amount
    discount_value = money_column(default=0)
    min_order_value = money_column(default=0)

    # Where and when
    order_types = db.Column(db.JSON, default=list)
    location_ids = db.Column(db.JSON, default=list)
    active_days = db.Column(db.JSON, default=list)
    active_time_slots = db.Column(db.JSON, default=list)              # [{"start": "HH:MM", "end": "HH:MM"}]
    time_slot_validation = db.Column(db.String(20), default="orderTime")
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)

    is_active = db.Column(db.Boolean, default=True)
    allow_stacking = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "discount_name": self.discount_name,
            "discount_type": self.discount_type,
            "reference_ids": self.reference_ids or [],
            "discount_method": self.discount_method,
            "discount_value": float(self.discount_value or 0),
            "min_order_value": float(self.min_order_value or 0),
            "order_types": self.order_types or [],
            "location_ids": self.location_ids or [],
            "active_days": self.active_days or [],
            "active_time_slots": self.active_time_slots or [],
            "time_slot_validation": self.time_slot_validation,
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "is_active": self.is_active,
            "allow_stacking": self.allow_stacking,
        }


class Discount(db.Model):
    """Voucher code a shopper types in at checkout."""
    __tablename__ = "discount"
    __table_args__ = (
        db.UniqueConstraint("brand_id", "code", name="uq_discount_brand_code"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False)
    code = db.Column(db.String(50), nullable=False)                   # stored upper-case
    discount_method = db.Column(db.String(20), nullable=False)
    discount_value = money_column(default=0)
    min_order_value = money_column(default=0)
    is_active = db.Column(db.Boolean, default=True)

    order_types = db.Column(db.JSON, default=list)
    location_ids = db.Column(db.JSON, default=list)
    active_days = db.Column(db.JSON, default=list)
    active_time_slots = db.Column(db.JSON, default=list)
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)

    # Usage
    usage_limit = db.Column(db.Integer, nullable=True)
    used_count = db.Column(db.Integer, default=0)
    per_customer_limit = db.Column(db.Integer, nullable=True)
    first_time_customer_only = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "code": self.code,
            "discount_method": self.discount_method,
            "discount_value": float(self.discount_value or 0),
            "min_order_value": float(self.min_order_value or 0),
            "is_active": self.is_active,
            "order_types": self.order_types or [],
            "location_ids": self.location_ids or [],
            "active_days": self.active_days or [],
            "active_time_slots": self.active_time_slots or [],
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "usage_limit": self.usage_limit,
            "used_count": self.used_count or 0,
            "per_customer_limit": self.per_customer_limit,
            "first_time_customer_only": self.first_time_customer_only,
        }


class VoucherRedemption(db.Model):
    __tablename__ = "voucher_redemption"
    __table_args__ = (
        db.Index("ix_redemption_discount_customer", "discount_id", "customer_email"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    discount_id = db.Column(db.String(32), db.ForeignKey("discount.id"), nullable=False)
    order_id = db.Column(db.String(32), db.ForeignKey("order.id"), nullable=False)
    customer_email = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
