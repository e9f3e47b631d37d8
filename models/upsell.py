from datetime import datetime

from models import db, money_column, new_id


class Upsell(db.Model):
    __tablename__ = "upsell"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False, index=True)
    upsell_name = db.Column(db.String(100), nullable=False)
    offer_type = db.Column(db.String(20), nullable=False)             # product or category
    trigger_conditions = db.Column(db.JSON, default=list)             # [{"type": ..., "reference_id": ...}]
    offer_product_ids = db.Column(db.JSON, default=list)
    offer_category_ids = db.Column(db.JSON, default=list)
    discount_type = db.Column(db.String(20), default="none")          # none, percentage, fixed_amount
    discount_value = money_column(default=0)

    order_types = db.Column(db.JSON, default=list)
    location_ids = db.Column(db.JSON, default=list)
    active_days = db.Column(db.JSON, default=list)
    active_time_slots = db.Column(db.JSON, default=list)
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    # Counters
    views = db.Column(db.Integer, default=0)
    conversions = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "upsell_name": self.upsell_name,
            "offer_type": self.offer_type,
            "trigger_conditions": self.trigger_conditions or [],
            "offer_product_ids": self.offer_product_ids or [],
            "offer_category_ids": self.offer_category_ids or [],
            "discount_type": self.discount_type,
            "discount_value": float(self.discount_value or 0),
            "order_types": self.order_types or [],
            "location_ids": self.location_ids or [],
            "active_days": self.active_days or [],
            "active_time_slots": self.active_time_slots or [],
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "views": self.views or 0,
            "conversions": self.conversions or 0,
        }
